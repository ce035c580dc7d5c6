"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

AuditBackendType = Literal["inmemory", "postgres"]


class AuditStoreConfig(BaseModel):
    """Configuration for the audit store backend."""

    backend: AuditBackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    connection_url: str | None = Field(
        default=None,
        description="Connection URL (falls back to CHRONICLE_DATABASE_URL)",
    )
    min_pool_size: int = Field(
        default=2,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum connections in pool",
    )
    command_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )
    statement_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout applied to each audit statement (seconds)",
    )


class StorageConfig(BaseModel):
    """Configuration for all storage backends."""

    audit: AuditStoreConfig = Field(
        default_factory=AuditStoreConfig,
        description="AuditStore backend",
    )
