"""Interception engine: runs operations and records an AuditRecord for each.

Auditing is transparent. The wrapped operation's return value and
exceptions reach the caller unchanged, and a failure to persist the
record is logged and counted but never raised.

Example:

    auditor = Auditor(store, actor_resolver=ContextActorResolver())

    @auditor.audited("create_habit")
    async def create_habit(user_id: str, name: str) -> Habit:
        ...

    with actor_scope("alice"):
        habit = await create_habit("u-1", "Read")
"""

import asyncio
import functools
import inspect
import time
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, TypeVar

from chronicle.audit.actor import ActorResolver
from chronicle.audit.models import AuditRecord
from chronicle.audit.models.record import utc_now
from chronicle.audit.store import AuditStore
from chronicle.config.models.audit import AuditConfig
from chronicle.observability.logging import get_logger
from chronicle.observability.metrics import (
    AUDIT_APPEND_FAILURES,
    AUDITED_OPERATION_DURATION,
    AUDITED_OPERATIONS,
)

logger = get_logger(__name__)

T = TypeVar("T")


def _check_operation(operation: str) -> str:
    operation = operation.strip() if isinstance(operation, str) else ""
    if not operation:
        raise ValueError("Audited operation name must be a non-empty string")
    return operation


def _describe(error: BaseException) -> str:
    """Render an error as "<Type>: <message>", tolerating a broken __str__."""
    try:
        message = str(error)
    except Exception:
        message = f"<unprintable {type(error).__name__}>"
    return f"{type(error).__name__}: {message}"


class Auditor:
    """Wraps units of work with audit capture.

    Holds no per-call state, so one instance can serve any number of
    concurrent callers. Each call carries its own timer and record.
    """

    def __init__(
        self,
        store: AuditStore,
        *,
        actor_resolver: ActorResolver | None = None,
        enabled: bool = True,
        default_actor: str = "anonymous",
        append_timeout: float = 5.0,
        record_metrics: bool = True,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Where records are appended
            actor_resolver: Resolver used when a call does not supply one
            enabled: When False, work runs directly and nothing is recorded
            default_actor: Actor recorded when resolution yields nothing
            append_timeout: Upper bound in seconds on each append
            record_metrics: Whether to update Prometheus collectors
        """
        if not default_actor or not default_actor.strip():
            raise ValueError("default_actor must be a non-empty string")
        self._store = store
        self._actor_resolver = actor_resolver
        self._enabled = enabled
        self._default_actor = default_actor.strip()
        self._append_timeout = append_timeout
        self._record_metrics = record_metrics

    @classmethod
    def from_config(
        cls,
        store: AuditStore,
        config: AuditConfig,
        *,
        actor_resolver: ActorResolver | None = None,
        record_metrics: bool = True,
    ) -> "Auditor":
        """Build an engine from the [audit] configuration section."""
        return cls(
            store,
            actor_resolver=actor_resolver,
            enabled=config.enabled,
            default_actor=config.default_actor,
            append_timeout=config.append_timeout_seconds,
            record_metrics=record_metrics,
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def default_actor(self) -> str:
        return self._default_actor

    async def audit(
        self,
        operation: str,
        work: Callable[[], T | Awaitable[T]],
        *,
        actor_resolver: ActorResolver | None = None,
        method_name: str | None = None,
    ) -> T:
        """Run work and append an AuditRecord describing the run.

        Args:
            operation: Name recorded for the audited action
            work: Zero-argument callable; may return a value or an awaitable
            actor_resolver: Overrides the engine's resolver for this call
            method_name: Recorded as the record's method_name

        Returns:
            Whatever work returns

        Raises:
            Whatever work raises, unchanged
        """
        operation = _check_operation(operation)

        if not self._enabled:
            result = work()
            if inspect.isawaitable(result):
                result = await result
            return result

        actor = self._resolve_actor(actor_resolver or self._actor_resolver)
        started_at = utc_now()
        started = time.perf_counter()

        try:
            result = work()
            if inspect.isawaitable(result):
                result = await result
        except (Exception, asyncio.CancelledError) as exc:
            await self._capture(
                operation, actor, started_at, started, method_name, error=exc
            )
            raise

        await self._capture(operation, actor, started_at, started, method_name)
        return result

    def wrap(
        self,
        operation: str,
        func: Callable[..., Any],
        *,
        actor_resolver: ActorResolver | None = None,
    ) -> Callable[..., Awaitable[Any]]:
        """Return an async callable that audits every call to func.

        func may be sync or async; the returned callable is always awaited.
        """
        operation = _check_operation(operation)
        method_name = getattr(func, "__qualname__", None) or repr(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await self.audit(
                operation,
                functools.partial(func, *args, **kwargs),
                actor_resolver=actor_resolver,
                method_name=method_name,
            )

        return wrapper

    def audited(
        self,
        operation: str,
        *,
        actor_resolver: ActorResolver | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Awaitable[Any]]]:
        """Decorator form of wrap()."""
        operation = _check_operation(operation)

        def decorator(func: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
            return self.wrap(operation, func, actor_resolver=actor_resolver)

        return decorator

    def _resolve_actor(self, resolver: ActorResolver | None) -> str:
        if resolver is None:
            return self._default_actor
        try:
            actor = resolver.resolve()
            if actor is not None and not isinstance(actor, str):
                raise TypeError(f"expected str or None, got {type(actor).__name__}")
        except Exception as e:
            logger.warning(
                "actor_resolution_failed",
                resolver=type(resolver).__name__,
                error=str(e),
            )
            return self._default_actor
        if not actor or not actor.strip():
            return self._default_actor
        return actor.strip()

    async def _capture(
        self,
        operation: str,
        actor: str,
        started_at: datetime,
        started: float,
        method_name: str | None,
        error: BaseException | None = None,
    ) -> None:
        """Build and append the record. Never raises."""
        elapsed = max(time.perf_counter() - started, 0.0)
        succeeded = error is None
        detail = None if succeeded else _describe(error)

        if self._record_metrics:
            outcome = "success" if succeeded else "failure"
            AUDITED_OPERATIONS.labels(operation=operation, outcome=outcome).inc()
            AUDITED_OPERATION_DURATION.labels(operation=operation).observe(elapsed)

        try:
            record = AuditRecord(
                actor=actor,
                operation=operation,
                timestamp=started_at,
                duration_ms=round(elapsed * 1000),
                succeeded=succeeded,
                detail=detail,
                method_name=method_name,
            )
            stored = await asyncio.wait_for(
                self._store.append(record), timeout=self._append_timeout
            )
        except Exception as e:
            error_type = "timeout" if isinstance(e, TimeoutError) else type(e).__name__
            logger.error(
                "audit_append_failed",
                operation=operation,
                actor=actor,
                error_type=error_type,
                error=str(e),
            )
            if self._record_metrics:
                AUDIT_APPEND_FAILURES.labels(
                    operation=operation, error_type=error_type
                ).inc()
            return

        logger.debug(
            "audit_record_appended",
            record_id=str(stored.id),
            operation=operation,
            actor=actor,
            succeeded=succeeded,
            duration_ms=stored.duration_ms,
        )
