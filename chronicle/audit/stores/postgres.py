"""PostgreSQL implementation of AuditStore.

Uses asyncpg for async database access.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from chronicle.audit.models import AuditRecord
from chronicle.audit.models.record import ensure_utc
from chronicle.audit.store import AuditStore
from chronicle.db.errors import StorageError, StorageTimeoutError, StoreError
from chronicle.db.pool import PostgresPool
from chronicle.observability.logging import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS audit_records (
    id UUID PRIMARY KEY,
    actor TEXT NOT NULL CHECK (actor <> ''),
    operation TEXT NOT NULL CHECK (operation <> ''),
    method_name TEXT,
    occurred_at TIMESTAMPTZ NOT NULL,
    duration_ms BIGINT NOT NULL CHECK (duration_ms >= 0),
    succeeded BOOLEAN NOT NULL,
    detail TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_audit_records_actor
    ON audit_records (actor, occurred_at);
CREATE INDEX IF NOT EXISTS idx_audit_records_operation
    ON audit_records (operation, occurred_at);
CREATE INDEX IF NOT EXISTS idx_audit_records_occurred
    ON audit_records (occurred_at DESC);
"""

_COLUMNS = """
    id, actor, operation, method_name,
    occurred_at, duration_ms, succeeded, detail
"""


class PostgresAuditStore(AuditStore):
    """PostgreSQL implementation of AuditStore.

    Records are inserted once and never updated. Every statement runs
    with statement_timeout so a slow database surfaces as
    StorageTimeoutError instead of stalling the audited caller.
    """

    def __init__(self, pool: PostgresPool, statement_timeout: float = 5.0) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
            statement_timeout: Per-statement timeout in seconds
        """
        self._pool = pool
        self._timeout = statement_timeout

    async def ensure_schema(self) -> None:
        """Create the audit_records table and its indexes if missing."""
        async with self._errors("postgres_ensure_schema_error"):
            async with self._pool.acquire() as conn:
                await conn.execute(SCHEMA_SQL, timeout=self._timeout)
        logger.info("audit_schema_ready")

    async def append(self, record: AuditRecord) -> AuditRecord:
        """Insert a record under a fresh id."""
        stored = record.with_id(uuid4())
        async with self._errors("postgres_append_error", operation=record.operation):
            async with self._pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO audit_records (
                        id, actor, operation, method_name,
                        occurred_at, duration_ms, succeeded, detail
                    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                    """,
                    stored.id,
                    stored.actor,
                    stored.operation,
                    stored.method_name,
                    stored.timestamp,
                    stored.duration_ms,
                    stored.succeeded,
                    stored.detail,
                    timeout=self._timeout,
                )
        logger.debug("audit_record_saved", record_id=str(stored.id))
        return stored

    async def get(self, record_id: UUID) -> AuditRecord | None:
        """Get a record by id."""
        async with self._errors("postgres_get_error", record_id=str(record_id)):
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {_COLUMNS} FROM audit_records WHERE id = $1",
                    record_id,
                    timeout=self._timeout,
                )
        return self._row_to_record(row) if row else None

    async def find_by_actor(self, actor: str) -> list[AuditRecord]:
        """List records for an actor in chronological order."""
        return await self._fetch(
            "postgres_find_by_actor_error",
            f"""
            SELECT {_COLUMNS} FROM audit_records
            WHERE actor = $1
            ORDER BY occurred_at ASC
            """,
            actor,
        )

    async def find_by_time_range(
        self,
        start: datetime,
        end: datetime,
    ) -> list[AuditRecord]:
        """List records with start <= timestamp <= end, chronologically."""
        return await self._fetch(
            "postgres_find_by_time_range_error",
            f"""
            SELECT {_COLUMNS} FROM audit_records
            WHERE occurred_at BETWEEN $1 AND $2
            ORDER BY occurred_at ASC
            """,
            ensure_utc(start),
            ensure_utc(end),
        )

    async def find_by_operation(self, operation: str) -> list[AuditRecord]:
        """List records for an operation in chronological order."""
        return await self._fetch(
            "postgres_find_by_operation_error",
            f"""
            SELECT {_COLUMNS} FROM audit_records
            WHERE operation = $1
            ORDER BY occurred_at ASC
            """,
            operation,
        )

    async def find_recent(self, limit: int) -> list[AuditRecord]:
        """List up to limit records, most recent timestamp first."""
        return await self._fetch(
            "postgres_find_recent_error",
            f"""
            SELECT {_COLUMNS} FROM audit_records
            ORDER BY occurred_at DESC
            LIMIT $1
            """,
            limit,
        )

    # Helper methods
    async def _fetch(self, error_event: str, query: str, *params: Any) -> list[AuditRecord]:
        async with self._errors(error_event):
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(query, *params, timeout=self._timeout)
        return [self._row_to_record(row) for row in rows]

    @asynccontextmanager
    async def _errors(self, event: str, **fields: Any) -> AsyncIterator[None]:
        """Log and wrap backend exceptions as StorageError."""
        try:
            yield
        except StoreError as e:
            logger.error(event, error=str(e), **fields)
            raise
        except TimeoutError as e:
            logger.error(event, error="timeout", timeout=self._timeout, **fields)
            raise StorageTimeoutError(
                f"Audit statement exceeded {self._timeout}s", cause=e
            ) from e
        except Exception as e:
            logger.error(event, error=str(e), **fields)
            raise StorageError(f"Audit store operation failed: {e}", cause=e) from e

    def _row_to_record(self, row: Any) -> AuditRecord:
        """Convert database row to AuditRecord model."""
        return AuditRecord(
            id=row["id"],
            actor=row["actor"],
            operation=row["operation"],
            method_name=row["method_name"],
            timestamp=row["occurred_at"],
            duration_ms=row["duration_ms"],
            succeeded=row["succeeded"],
            detail=row["detail"],
        )
