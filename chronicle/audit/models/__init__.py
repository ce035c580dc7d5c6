"""Audit domain models.

- AuditRecord for the immutable audit log
- ActivitySummary and AuditStatistics for derived, on-demand statistics
"""

from chronicle.audit.models.record import AuditRecord
from chronicle.audit.models.summary import ActivitySummary, AuditStatistics

__all__ = [
    "AuditRecord",
    "ActivitySummary",
    "AuditStatistics",
]
