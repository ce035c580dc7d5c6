"""Audit instrumentation: interception, immutable records, queries, statistics.

Public API
----------
- Auditor: wraps operations and appends an AuditRecord per call
- AuditStore: append-only storage interface (in-memory and PostgreSQL adapters)
- AuditQueryService: validated reads over a store
- ActivityAggregator: per-actor summaries and period statistics
- ActorResolver and implementations: who performed an operation
"""

from chronicle.audit.actor import (
    ActorResolver,
    CallableActorResolver,
    ContextActorResolver,
    StaticActorResolver,
    actor_scope,
    get_current_actor,
    reset_current_actor,
    set_current_actor,
)
from chronicle.audit.models import ActivitySummary, AuditRecord, AuditStatistics
from chronicle.audit.store import AuditStore
from chronicle.audit.engine import Auditor
from chronicle.audit.query import AuditQueryService
from chronicle.audit.aggregation import ActivityAggregator

__all__ = [
    "ActivityAggregator",
    "ActivitySummary",
    "ActorResolver",
    "AuditQueryService",
    "AuditRecord",
    "AuditStatistics",
    "AuditStore",
    "Auditor",
    "CallableActorResolver",
    "ContextActorResolver",
    "StaticActorResolver",
    "actor_scope",
    "get_current_actor",
    "reset_current_actor",
    "set_current_actor",
]
