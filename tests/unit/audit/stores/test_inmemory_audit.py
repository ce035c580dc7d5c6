"""Tests for InMemoryAuditStore."""

import asyncio
import random
import threading
from datetime import timedelta
from uuid import uuid4

import pytest

from chronicle.audit.stores import InMemoryAuditStore


class TestAppend:
    """Tests for appending records."""

    @pytest.mark.asyncio
    async def test_append_assigns_id(self, store, make_record):
        """Should return the stored copy with a fresh id."""
        record = make_record()
        stored = await store.append(record)

        assert stored.id is not None
        assert record.id is None
        assert stored.actor == record.actor
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_append_same_record_twice_gets_two_ids(self, store, make_record):
        record = make_record()
        first = await store.append(record)
        second = await store.append(record)
        assert first.id != second.id
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_get_by_id(self, store, make_record):
        stored = await store.append(make_record(operation="purchase"))
        retrieved = await store.get(stored.id)
        assert retrieved == stored

    @pytest.mark.asyncio
    async def test_get_nonexistent(self, store):
        """Should return None for an unknown id."""
        assert await store.get(uuid4()) is None


class TestQueries:
    """Tests for read operations."""

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_lists(self, store, base_time):
        """Reads never raise for no results."""
        assert await store.find_by_actor("alice") == []
        assert await store.find_by_operation("login") == []
        assert await store.find_by_time_range(base_time, base_time) == []
        assert await store.find_recent(10) == []

    @pytest.mark.asyncio
    async def test_find_by_actor_is_chronological(self, store, make_record):
        for offset in (30, 10, 20):
            await store.append(make_record(actor="alice", offset_seconds=offset))
        await store.append(make_record(actor="bob"))

        results = await store.find_by_actor("alice")

        assert len(results) == 3
        assert all(r.actor == "alice" for r in results)
        assert [r.timestamp for r in results] == sorted(r.timestamp for r in results)

    @pytest.mark.asyncio
    async def test_find_by_operation(self, store, make_record):
        await store.append(make_record(operation="login"))
        await store.append(make_record(operation="purchase"))
        await store.append(make_record(actor="bob", operation="login"))

        results = await store.find_by_operation("login")

        assert {r.actor for r in results} == {"alice", "bob"}
        assert all(r.operation == "login" for r in results)

    @pytest.mark.asyncio
    async def test_time_range_is_inclusive(self, store, make_record, base_time):
        """Records exactly at the bounds are included."""
        for offset in (-1, 0, 5, 10, 11):
            await store.append(make_record(offset_seconds=offset))

        results = await store.find_by_time_range(
            base_time, base_time + timedelta(seconds=10)
        )

        offsets = [(r.timestamp - base_time).total_seconds() for r in results]
        assert offsets == [0, 5, 10]

    @pytest.mark.asyncio
    async def test_time_range_ignores_arrival_order(self, store, make_record, base_time):
        """Out-of-order arrival does not affect range membership."""
        offsets = list(range(-50, 51, 5))
        random.Random(7).shuffle(offsets)
        for offset in offsets:
            await store.append(make_record(offset_seconds=offset))

        start = base_time - timedelta(seconds=12)
        end = base_time + timedelta(seconds=20)
        results = await store.find_by_time_range(start, end)

        assert all(start <= r.timestamp <= end for r in results)
        expected = [o for o in offsets if -12 <= o <= 20]
        assert len(results) == len(expected)

    @pytest.mark.asyncio
    async def test_record_in_window_scenario(self, store, make_record, base_time):
        """A record at T is found in [T-1s, T+1s] and absent from [T+1s, T+2s]."""
        await store.append(make_record(actor="bob"))
        second = timedelta(seconds=1)

        hits = await store.find_by_time_range(base_time - second, base_time + second)
        misses = await store.find_by_time_range(base_time + second, base_time + 2 * second)

        assert [r.actor for r in hits] == ["bob"]
        assert misses == []

    @pytest.mark.asyncio
    async def test_find_recent_orders_by_timestamp_desc(self, store, make_record, base_time):
        for offset in (5, 1, 9, 3, 7):
            await store.append(make_record(offset_seconds=offset))

        results = await store.find_recent(3)

        timestamps = [r.timestamp for r in results]
        assert len(results) == 3
        assert timestamps == sorted(timestamps, reverse=True)
        assert results[0].timestamp == base_time + timedelta(seconds=9)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, -3])
    async def test_find_recent_non_positive_limit_returns_nothing(
        self, store, make_record, limit
    ):
        for offset in range(3):
            await store.append(make_record(offset_seconds=offset))

        assert await store.find_recent(limit) == []

    @pytest.mark.asyncio
    async def test_reads_return_snapshots(self, store, make_record):
        """Mutating a returned list does not affect the store."""
        await store.append(make_record())
        results = await store.find_by_actor("alice")
        results.clear()
        assert len(await store.find_by_actor("alice")) == 1


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_concurrent_task_appends(self, store, make_record):
        records = [make_record(offset_seconds=i) for i in range(200)]
        stored = await asyncio.gather(*(store.append(r) for r in records))
        assert len({r.id for r in stored}) == 200
        assert len(store) == 200

    def test_concurrent_thread_appends(self, make_record):
        """Appends from many threads are all kept."""
        store = InMemoryAuditStore()

        def worker(n: int) -> None:
            for i in range(50):
                asyncio.run(store.append(make_record(actor=f"user{n}", offset_seconds=i)))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 400

