"""AuditStore abstract interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from chronicle.audit.models import AuditRecord


class AuditStore(ABC):
    """Abstract interface for audit storage.

    An append-only log of AuditRecords. Writes assign ids; reads return
    snapshots and never raise for empty results. Range queries filter by
    record timestamp, not by arrival order.

    Implementations raise StorageError when the backing medium is
    unavailable or rejects an operation.
    """

    @abstractmethod
    async def append(self, record: AuditRecord) -> AuditRecord:
        """Persist a record and return the stored copy with its id."""
        pass

    @abstractmethod
    async def get(self, record_id: UUID) -> AuditRecord | None:
        """Get a record by id."""
        pass

    @abstractmethod
    async def find_by_actor(self, actor: str) -> list[AuditRecord]:
        """List records for an actor in chronological order."""
        pass

    @abstractmethod
    async def find_by_time_range(
        self,
        start: datetime,
        end: datetime,
    ) -> list[AuditRecord]:
        """List records with start <= timestamp <= end, chronologically."""
        pass

    @abstractmethod
    async def find_by_operation(self, operation: str) -> list[AuditRecord]:
        """List records for an operation in chronological order."""
        pass

    @abstractmethod
    async def find_recent(self, limit: int) -> list[AuditRecord]:
        """List up to limit records, most recent timestamp first."""
        pass
