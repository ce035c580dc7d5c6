"""Derived statistics over audit records. Computed on demand, never stored."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ActivitySummary(BaseModel):
    """Per-actor activity statistics."""

    model_config = ConfigDict(frozen=True)

    actor: str = Field(..., description="Actor the summary describes")
    total_operations: int = Field(default=0, ge=0, description="Record count")
    operation_counts: dict[str, int] = Field(
        default_factory=dict, description="Operation name -> record count"
    )
    average_duration_ms: float = Field(
        default=0.0, ge=0, description="Mean duration across all records"
    )
    first_operation: datetime | None = Field(
        default=None, description="Earliest record timestamp"
    )
    last_operation: datetime | None = Field(
        default=None, description="Latest record timestamp"
    )


class AuditStatistics(BaseModel):
    """Statistics across all actors for a time period."""

    model_config = ConfigDict(frozen=True)

    period_start: datetime = Field(..., description="Inclusive period start")
    period_end: datetime = Field(..., description="Inclusive period end")
    total_operations: int = Field(default=0, ge=0)
    failed_operations: int = Field(default=0, ge=0)
    average_duration_ms: float = Field(default=0.0, ge=0)
    operation_counts: dict[str, int] = Field(default_factory=dict)
    actor_activity_counts: dict[str, int] = Field(default_factory=dict)
    average_duration_by_operation: dict[str, float] = Field(default_factory=dict)
    most_active_actor: str | None = Field(
        default=None, description="Actor with the most records, None if empty"
    )
    most_common_operation: str | None = Field(
        default=None, description="Operation with the most records, None if empty"
    )
