"""Audit store implementations."""

from chronicle.audit.store import AuditStore
from chronicle.audit.stores.inmemory import InMemoryAuditStore
from chronicle.audit.stores.postgres import PostgresAuditStore

__all__ = [
    "AuditStore",
    "InMemoryAuditStore",
    "PostgresAuditStore",
]
