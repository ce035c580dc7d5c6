"""In-memory implementation of AuditStore."""

import threading
from datetime import datetime
from uuid import UUID, uuid4

from chronicle.audit.models import AuditRecord
from chronicle.audit.models.record import ensure_utc
from chronicle.audit.store import AuditStore


class InMemoryAuditStore(AuditStore):
    """In-memory implementation of AuditStore for testing and development.

    Uses a plain list with linear scans for queries. A lock serializes
    appends and snapshot copies, so the store is safe to share between
    threads as well as tasks. Not suitable for production use.
    """

    def __init__(self) -> None:
        self._records: list[AuditRecord] = []
        self._lock = threading.Lock()

    async def append(self, record: AuditRecord) -> AuditRecord:
        """Store a record under a fresh id."""
        stored = record.with_id(uuid4())
        with self._lock:
            self._records.append(stored)
        return stored

    async def get(self, record_id: UUID) -> AuditRecord | None:
        """Get a record by id."""
        for record in self._snapshot():
            if record.id == record_id:
                return record
        return None

    async def find_by_actor(self, actor: str) -> list[AuditRecord]:
        """List records for an actor in chronological order."""
        results = [r for r in self._snapshot() if r.actor == actor]
        results.sort(key=lambda r: r.timestamp)
        return results

    async def find_by_time_range(
        self,
        start: datetime,
        end: datetime,
    ) -> list[AuditRecord]:
        """List records with start <= timestamp <= end, chronologically."""
        start, end = ensure_utc(start), ensure_utc(end)
        results = [r for r in self._snapshot() if start <= r.timestamp <= end]
        results.sort(key=lambda r: r.timestamp)
        return results

    async def find_by_operation(self, operation: str) -> list[AuditRecord]:
        """List records for an operation in chronological order."""
        results = [r for r in self._snapshot() if r.operation == operation]
        results.sort(key=lambda r: r.timestamp)
        return results

    async def find_recent(self, limit: int) -> list[AuditRecord]:
        """List up to limit records, most recent timestamp first."""
        results = self._snapshot()
        results.sort(key=lambda r: r.timestamp, reverse=True)
        return results[: max(limit, 0)]

    def _snapshot(self) -> list[AuditRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
