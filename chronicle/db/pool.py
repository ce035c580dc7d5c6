"""PostgreSQL connection pool for the audit store."""

import asyncio
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from chronicle.db.errors import StorageError, StorageTimeoutError
from chronicle.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresPool:
    """Lazily connected asyncpg pool with bounded acquisition.

    Usage:
        pool = PostgresPool(dsn="postgresql://...")
        async with pool.acquire() as conn:
            await conn.fetch("SELECT ...")
        await pool.close()
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
        acquire_timeout: float = 5.0,
    ) -> None:
        """Initialize pool configuration.

        Args:
            dsn: Database connection string. Falls back to environment variables.
            min_size: Minimum number of connections to keep open.
            max_size: Maximum number of connections in the pool.
            command_timeout: Default timeout for queries (seconds).
            acquire_timeout: How long to wait for a free connection (seconds).
        """
        self._dsn = dsn or self._get_dsn_from_env()
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._acquire_timeout = acquire_timeout
        self._pool: asyncpg.Pool | None = None
        self._connect_lock = asyncio.Lock()

    @staticmethod
    def _get_dsn_from_env() -> str:
        """Get database DSN from environment variables."""
        dsn = os.environ.get("CHRONICLE_DATABASE_URL") or os.environ.get("DATABASE_URL")
        if dsn:
            return dsn

        host = os.environ.get("POSTGRES_HOST", "localhost")
        port = os.environ.get("POSTGRES_PORT", "5432")
        user = os.environ.get("POSTGRES_USER", "chronicle")
        password = os.environ.get("POSTGRES_PASSWORD", "chronicle")
        database = os.environ.get("POSTGRES_DB", "chronicle")

        return f"postgresql://{user}:{password}@{host}:{port}/{database}"

    async def connect(self) -> None:
        """Create the underlying pool if it does not exist yet.

        Concurrent first callers wait on one another and share a single pool.
        """
        if self._pool is not None:
            return

        async with self._connect_lock:
            if self._pool is not None:
                return
            await self._create_pool()

    async def _create_pool(self) -> None:
        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
        except Exception as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise StorageError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e

        logger.info(
            "postgres_pool_connected",
            min_size=self._min_size,
            max_size=self._max_size,
        )

    async def close(self) -> None:
        """Close the connection pool gracefully."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection, connecting on first use."""
        if self._pool is None:
            await self.connect()

        try:
            async with self._pool.acquire(timeout=self._acquire_timeout) as connection:
                yield connection
        except TimeoutError as e:
            logger.error("postgres_timeout", error=str(e))
            raise StorageTimeoutError("PostgreSQL operation timed out", cause=e) from e
        except asyncpg.PostgresError as e:
            logger.error("postgres_connection_error", error=str(e))
            raise StorageError(f"PostgreSQL error: {e}", cause=e) from e

    async def health_check(self) -> bool:
        """Return True if the pool is connected and answers a trivial query."""
        if self._pool is None:
            return False

        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except Exception as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False

    @property
    def is_connected(self) -> bool:
        """Check if pool is initialized."""
        return self._pool is not None
