"""Audit engine configuration."""

from pydantic import BaseModel, Field


class AuditConfig(BaseModel):
    """Configuration consumed by the interception engine and query service."""

    enabled: bool = Field(
        default=True,
        description="When false, audited operations run without producing records",
    )
    default_actor: str = Field(
        default="anonymous",
        min_length=1,
        description="Actor recorded when no actor can be resolved",
    )
    append_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound on a single audit append",
    )
    max_recent_limit: int = Field(
        default=100,
        gt=0,
        description="Largest limit accepted by recent-record queries",
    )
