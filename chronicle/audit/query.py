"""Read-only query façade over an AuditStore."""

from datetime import datetime
from uuid import UUID

from chronicle.audit.models import AuditRecord
from chronicle.audit.models.record import ensure_utc
from chronicle.audit.store import AuditStore
from chronicle.config.models.audit import AuditConfig
from chronicle.db.errors import NotFoundError, QueryValidationError
from chronicle.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RECENT_LIMIT = 10


class AuditQueryService:
    """Validates query parameters and forwards them to the store.

    Parameter problems raise QueryValidationError before the store is
    touched. Store failures propagate unchanged, since reading is the
    whole point of a query.
    """

    def __init__(self, store: AuditStore, max_recent_limit: int = 100) -> None:
        """Initialize the service.

        Args:
            store: Store to read from
            max_recent_limit: Larger recent-record limits are clamped to this
        """
        if max_recent_limit <= 0:
            raise ValueError("max_recent_limit must be positive")
        self._store = store
        self._max_recent_limit = max_recent_limit

    @classmethod
    def from_config(cls, store: AuditStore, config: AuditConfig) -> "AuditQueryService":
        return cls(store, max_recent_limit=config.max_recent_limit)

    async def find_by_actor(self, actor: str) -> list[AuditRecord]:
        """List an actor's records in chronological order."""
        actor = self._require_text(actor, "Actor")
        logger.debug("querying_audit_by_actor", actor=actor)
        return await self._store.find_by_actor(actor)

    async def find_by_operation(self, operation: str) -> list[AuditRecord]:
        """List an operation's records in chronological order."""
        operation = self._require_text(operation, "Operation")
        logger.debug("querying_audit_by_operation", operation=operation)
        return await self._store.find_by_operation(operation)

    async def find_by_time_range(
        self,
        start: datetime,
        end: datetime,
    ) -> list[AuditRecord]:
        """List records with start <= timestamp <= end.

        Raises:
            QueryValidationError: If start is after end
        """
        start, end = self.validate_range(start, end)
        logger.debug(
            "querying_audit_by_time_range",
            start=start.isoformat(),
            end=end.isoformat(),
        )
        return await self._store.find_by_time_range(start, end)

    async def find_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[AuditRecord]:
        """List the most recent records, newest first.

        Limits above max_recent_limit are clamped to it.

        Raises:
            QueryValidationError: If limit is not positive
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise QueryValidationError("Limit must be greater than zero")
        effective = min(limit, self._max_recent_limit)
        if effective != limit:
            logger.debug("recent_limit_clamped", requested=limit, effective=effective)
        return await self._store.find_recent(effective)

    async def get(self, record_id: UUID) -> AuditRecord:
        """Get one record by id.

        Raises:
            NotFoundError: If no record has this id
        """
        record = await self._store.get(record_id)
        if record is None:
            raise NotFoundError(f"Audit record {record_id} not found")
        return record

    async def record(self, record: AuditRecord) -> AuditRecord:
        """Append a manually built record and return the stored copy.

        Unlike engine appends, storage failures propagate here.
        """
        if record.id is not None:
            raise QueryValidationError("Record already has an id; records are write-once")
        stored = await self._store.append(record)
        logger.info(
            "manual_audit_record_saved",
            record_id=str(stored.id),
            operation=stored.operation,
            actor=stored.actor,
        )
        return stored

    @staticmethod
    def validate_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
        """Normalize a time range to UTC and check its ordering."""
        if start is None or end is None:
            raise QueryValidationError("Start and end of the time range are required")
        start, end = ensure_utc(start), ensure_utc(end)
        if start > end:
            raise QueryValidationError("Start of the time range cannot be after its end")
        return start, end

    @staticmethod
    def _require_text(value: str, name: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise QueryValidationError(f"{name} cannot be empty")
        return value.strip()
