"""Prometheus metrics for audited operations."""

from prometheus_client import Counter, Histogram

AUDITED_OPERATIONS = Counter(
    "chronicle_audited_operations_total",
    "Total number of audited operations executed",
    labelnames=["operation", "outcome"],
)

AUDITED_OPERATION_DURATION = Histogram(
    "chronicle_audited_operation_duration_seconds",
    "Wall-clock duration of audited operations in seconds",
    labelnames=["operation"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Append failures never reach the audited caller, so this is the only signal.
AUDIT_APPEND_FAILURES = Counter(
    "chronicle_audit_append_failures_total",
    "Total number of audit records that could not be persisted",
    labelnames=["operation", "error_type"],
)
