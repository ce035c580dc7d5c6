"""Activity statistics computed from audit records.

Nothing here is persisted or cached; every call folds over the records
the query service returns at that moment.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime

from chronicle.audit.models import ActivitySummary, AuditRecord, AuditStatistics
from chronicle.audit.query import AuditQueryService
from chronicle.observability.logging import get_logger

logger = get_logger(__name__)


def _leader(counts: Counter[str]) -> str | None:
    """Key with the highest count; ties go to the lexically smallest key."""
    if not counts:
        return None
    return min(counts, key=lambda key: (-counts[key], key))


class ActivityAggregator:
    """Per-actor summaries and period-wide statistics."""

    def __init__(self, queries: AuditQueryService) -> None:
        self._queries = queries

    async def summarize(self, actor: str) -> ActivitySummary:
        """Summarize all of an actor's records.

        An actor with no records gets an empty summary (zero counts,
        0.0 average, no first/last timestamps) rather than an error.

        Raises:
            QueryValidationError: If actor is empty
        """
        records = await self._queries.find_by_actor(actor)
        summary = self.summarize_records(actor.strip(), records)
        logger.debug(
            "activity_summarized",
            actor=summary.actor,
            total_operations=summary.total_operations,
        )
        return summary

    @staticmethod
    def summarize_records(actor: str, records: Iterable[AuditRecord]) -> ActivitySummary:
        """Fold records into an ActivitySummary. Order does not matter."""
        total = 0
        duration_sum = 0
        operation_counts: Counter[str] = Counter()
        first: datetime | None = None
        last: datetime | None = None

        for record in records:
            total += 1
            duration_sum += record.duration_ms
            operation_counts[record.operation] += 1
            if first is None or record.timestamp < first:
                first = record.timestamp
            if last is None or record.timestamp > last:
                last = record.timestamp

        return ActivitySummary(
            actor=actor,
            total_operations=total,
            operation_counts=dict(operation_counts),
            average_duration_ms=duration_sum / total if total else 0.0,
            first_operation=first,
            last_operation=last,
        )

    async def statistics(self, start: datetime, end: datetime) -> AuditStatistics:
        """Statistics across every actor for records in [start, end].

        Raises:
            QueryValidationError: If start is after end
        """
        start, end = AuditQueryService.validate_range(start, end)
        records = await self._queries.find_by_time_range(start, end)

        operation_counts: Counter[str] = Counter()
        actor_counts: Counter[str] = Counter()
        duration_by_operation: Counter[str] = Counter()
        failed = 0
        duration_sum = 0

        for record in records:
            operation_counts[record.operation] += 1
            actor_counts[record.actor] += 1
            duration_by_operation[record.operation] += record.duration_ms
            duration_sum += record.duration_ms
            if not record.succeeded:
                failed += 1

        total = len(records)
        stats = AuditStatistics(
            period_start=start,
            period_end=end,
            total_operations=total,
            failed_operations=failed,
            average_duration_ms=duration_sum / total if total else 0.0,
            operation_counts=dict(operation_counts),
            actor_activity_counts=dict(actor_counts),
            average_duration_by_operation={
                op: duration_by_operation[op] / count
                for op, count in operation_counts.items()
            },
            most_active_actor=_leader(actor_counts),
            most_common_operation=_leader(operation_counts),
        )
        logger.info(
            "audit_statistics_computed",
            start=start.isoformat(),
            end=end.isoformat(),
            total_operations=total,
        )
        return stats
