"""Tests for ActivityAggregator."""

from datetime import timedelta

import pytest

from chronicle.audit.aggregation import ActivityAggregator
from chronicle.audit.query import AuditQueryService
from chronicle.db.errors import QueryValidationError


@pytest.fixture
def aggregator(store) -> ActivityAggregator:
    return ActivityAggregator(AuditQueryService(store))


class TestSummarize:
    @pytest.mark.asyncio
    async def test_summary_for_active_actor(self, aggregator, store, make_record, base_time):
        await store.append(make_record(operation="login", duration_ms=10, offset_seconds=0))
        await store.append(make_record(operation="purchase", duration_ms=30, offset_seconds=60))
        await store.append(make_record(operation="login", duration_ms=20, offset_seconds=120))
        await store.append(make_record(actor="bob", operation="login", duration_ms=999))

        summary = await aggregator.summarize("alice")

        assert summary.actor == "alice"
        assert summary.total_operations == 3
        assert summary.operation_counts == {"login": 2, "purchase": 1}
        assert summary.average_duration_ms == 20.0
        assert summary.first_operation == base_time
        assert summary.last_operation == base_time + timedelta(seconds=120)

    @pytest.mark.asyncio
    async def test_summary_for_unknown_actor_is_empty(self, aggregator):
        summary = await aggregator.summarize("ghost")

        assert summary.actor == "ghost"
        assert summary.total_operations == 0
        assert summary.operation_counts == {}
        assert summary.average_duration_ms == 0.0
        assert summary.first_operation is None
        assert summary.last_operation is None

    @pytest.mark.asyncio
    async def test_summary_average_is_fractional(self, aggregator, store, make_record):
        await store.append(make_record(duration_ms=1))
        await store.append(make_record(duration_ms=2))

        summary = await aggregator.summarize("alice")

        assert summary.average_duration_ms == 1.5

    @pytest.mark.asyncio
    async def test_blank_actor_rejected(self, aggregator):
        with pytest.raises(QueryValidationError):
            await aggregator.summarize("  ")

    def test_summarize_records_ignores_order(self, make_record, base_time):
        records = [make_record(offset_seconds=o) for o in (50, -10, 20)]

        summary = ActivityAggregator.summarize_records("alice", records)

        assert summary.first_operation == base_time - timedelta(seconds=10)
        assert summary.last_operation == base_time + timedelta(seconds=50)


class TestStatistics:
    @pytest.mark.asyncio
    async def test_statistics_across_actors(self, aggregator, store, make_record, base_time):
        await store.append(make_record(actor="alice", operation="login", duration_ms=10))
        await store.append(make_record(actor="alice", operation="purchase", duration_ms=50))
        await store.append(
            make_record(actor="bob", operation="login", duration_ms=30, succeeded=False)
        )
        await store.append(
            make_record(actor="carol", operation="login", duration_ms=0, offset_seconds=3600)
        )

        stats = await aggregator.statistics(base_time, base_time + timedelta(minutes=5))

        assert stats.period_start == base_time
        assert stats.total_operations == 3
        assert stats.failed_operations == 1
        assert stats.average_duration_ms == 30.0
        assert stats.operation_counts == {"login": 2, "purchase": 1}
        assert stats.actor_activity_counts == {"alice": 2, "bob": 1}
        assert stats.average_duration_by_operation == {"login": 20.0, "purchase": 50.0}
        assert stats.most_active_actor == "alice"
        assert stats.most_common_operation == "login"

    @pytest.mark.asyncio
    async def test_ties_go_to_smallest_name(self, aggregator, store, make_record, base_time):
        await store.append(make_record(actor="zoe", operation="search"))
        await store.append(make_record(actor="adam", operation="browse"))

        stats = await aggregator.statistics(base_time, base_time)

        assert stats.most_active_actor == "adam"
        assert stats.most_common_operation == "browse"

    @pytest.mark.asyncio
    async def test_empty_period(self, aggregator, base_time):
        stats = await aggregator.statistics(base_time, base_time + timedelta(days=1))

        assert stats.total_operations == 0
        assert stats.average_duration_ms == 0.0
        assert stats.operation_counts == {}
        assert stats.most_active_actor is None
        assert stats.most_common_operation is None

    @pytest.mark.asyncio
    async def test_inverted_period_rejected(self, aggregator, base_time):
        with pytest.raises(QueryValidationError):
            await aggregator.statistics(base_time, base_time - timedelta(seconds=1))
