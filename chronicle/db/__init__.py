"""Database utilities for Chronicle.

This module contains:
- Connection pool management
- Store error hierarchy
"""

from chronicle.db.errors import (
    NotFoundError,
    QueryValidationError,
    StorageError,
    StorageTimeoutError,
    StoreError,
)

__all__ = [
    "StoreError",
    "StorageError",
    "StorageTimeoutError",
    "NotFoundError",
    "QueryValidationError",
]
