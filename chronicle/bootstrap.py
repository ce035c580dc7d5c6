"""Wire up the audit stack from configuration.

Example usage:

    from chronicle.bootstrap import bootstrap

    ctx = bootstrap(actor_resolver=ContextActorResolver())

    @ctx.auditor.audited("create_habit")
    async def create_habit(...): ...

    summary = await ctx.aggregator.summarize("alice")
"""

from dataclasses import dataclass

from chronicle.audit.actor import ActorResolver
from chronicle.audit.aggregation import ActivityAggregator
from chronicle.audit.engine import Auditor
from chronicle.audit.query import AuditQueryService
from chronicle.audit.store import AuditStore
from chronicle.audit.stores.inmemory import InMemoryAuditStore
from chronicle.audit.stores.postgres import PostgresAuditStore
from chronicle.config import get_settings
from chronicle.config.settings import Settings
from chronicle.db.pool import PostgresPool
from chronicle.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class AuditContext:
    """Everything bootstrap() builds, sharing one store."""

    settings: Settings
    store: AuditStore
    auditor: Auditor
    queries: AuditQueryService
    aggregator: ActivityAggregator
    pool: PostgresPool | None = None

    async def close(self) -> None:
        """Release the database pool, if one was created."""
        if self.pool is not None:
            await self.pool.close()


def create_audit_store(
    settings: Settings,
    pool: PostgresPool | None = None,
) -> tuple[AuditStore, PostgresPool | None]:
    """Create the store selected by storage.audit.backend.

    Args:
        settings: Loaded settings
        pool: Existing pool to reuse for the postgres backend

    Returns:
        The store and the pool it uses (None for in-memory)
    """
    config = settings.storage.audit
    if config.backend == "inmemory":
        return InMemoryAuditStore(), None

    if pool is None:
        pool = PostgresPool(
            dsn=config.connection_url,
            min_size=config.min_pool_size,
            max_size=config.max_pool_size,
            command_timeout=config.command_timeout,
        )
    store = PostgresAuditStore(pool, statement_timeout=config.statement_timeout_seconds)
    return store, pool


def bootstrap(
    settings: Settings | None = None,
    actor_resolver: ActorResolver | None = None,
    store: AuditStore | None = None,
    configure_logging: bool = True,
) -> AuditContext:
    """Build the engine, query service and aggregator over one store.

    Args:
        settings: Settings to use (default: get_settings())
        actor_resolver: Resolver handed to the engine
        store: Use this store instead of creating one from settings
        configure_logging: Apply observability.logging settings to structlog

    Returns:
        AuditContext with all components
    """
    settings = settings or get_settings()

    if configure_logging:
        log_config = settings.observability.logging
        setup_logging(
            level=log_config.level,
            format=log_config.format,
            redact_pii=log_config.redact_pii,
        )

    pool = None
    if store is None:
        store, pool = create_audit_store(settings)

    auditor = Auditor.from_config(
        store,
        settings.audit,
        actor_resolver=actor_resolver,
        record_metrics=settings.observability.metrics.enabled,
    )
    queries = AuditQueryService.from_config(store, settings.audit)
    aggregator = ActivityAggregator(queries)

    logger.info(
        "audit_bootstrapped",
        backend=type(store).__name__,
        enabled=auditor.enabled,
        default_actor=auditor.default_actor,
    )

    return AuditContext(
        settings=settings,
        store=store,
        auditor=auditor,
        queries=queries,
        aggregator=aggregator,
        pool=pool,
    )
