"""Store error hierarchy for audit storage and queries.

Store implementations wrap backend-specific errors in one of these so callers
can tell a storage outage from a malformed query.
"""


class StoreError(Exception):
    """Base exception for all store errors.

    Carries the backend exception that triggered it, if any.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StorageError(StoreError):
    """Raised when the durable medium is unreachable or rejects an operation.

    Examples:
        - Database connection refused
        - Write rejected by a constraint
        - Pool exhausted
    """

    pass


class StorageTimeoutError(StorageError):
    """Raised when a store operation exceeds its timeout."""

    pass


class NotFoundError(StoreError):
    """Raised when a specific record lookup fails.

    Never raised for empty search results.
    """

    pass


class QueryValidationError(StoreError):
    """Raised on malformed query parameters.

    Examples:
        - Empty actor or operation name
        - Start of a time range after its end
        - Non-positive result limit
    """

    pass
