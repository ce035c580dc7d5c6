"""Configuration model exports.

    from chronicle.config.models import AuditConfig, StorageConfig
"""

from chronicle.config.models.audit import AuditConfig
from chronicle.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from chronicle.config.models.storage import AuditStoreConfig, StorageConfig

__all__ = [
    "AuditConfig",
    "AuditStoreConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "StorageConfig",
]
