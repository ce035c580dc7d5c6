"""AuditRecord model for audit domain."""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class AuditRecord(BaseModel):
    """Immutable record of one audited operation.

    The id is assigned by the store on append; a record built by the
    engine or by hand has no id until it is persisted.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID | None = Field(default=None, description="Store-assigned identifier")
    actor: str = Field(..., description="Who performed the operation")
    operation: str = Field(..., description="Audited action name")
    timestamp: datetime = Field(
        default_factory=utc_now, description="When the operation began"
    )
    duration_ms: int = Field(..., ge=0, description="Elapsed wall-clock time")
    succeeded: bool = Field(..., description="Whether the operation returned normally")
    detail: str | None = Field(default=None, description="Additional context")
    method_name: str | None = Field(
        default=None, description="Qualified name of the wrapped callable"
    )

    @field_validator("actor", "operation")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def with_id(self, record_id: UUID) -> "AuditRecord":
        """Return a persisted copy of this record carrying record_id."""
        return self.model_copy(update={"id": record_id})
