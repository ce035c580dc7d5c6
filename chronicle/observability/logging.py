"""Structured logging configuration using structlog.

JSON output for production, console output for development. Audit records
carry actor names and failure messages, so a redaction processor can scrub
credentials and e-mail addresses before anything reaches the log stream.
"""

import logging
import re
import sys
from collections.abc import Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

SENSITIVE_KEYS: frozenset[str] = frozenset({
    "password",
    "secret",
    "token",
    "api_key",
    "authorization",
    "credentials",
    "access_token",
    "refresh_token",
    "dsn",
    "connection_url",
})

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


class PIIRedactor:
    """Processor that masks sensitive keys and e-mail addresses.

    Keys are matched case-insensitively against SENSITIVE_KEYS; string
    values (including those nested in dicts and lists) are scanned for
    e-mail addresses.
    """

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._redact(event_dict))

    def _redact(self, value: Any, key: str | None = None) -> Any:
        if key is not None and key.lower() in SENSITIVE_KEYS:
            return "[REDACTED]"
        if isinstance(value, str):
            return EMAIL_PATTERN.sub("[EMAIL]", value)
        if isinstance(value, Mapping):
            return {k: self._redact(v, k) for k, v in value.items()}
        if isinstance(value, list | tuple):
            return [self._redact(item) for item in value]
        return value


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format - "json" for production, "console" for development
        redact_pii: Whether to redact credentials and e-mail addresses
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_pii:
        processors.append(PIIRedactor())

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    level_num = logging.getLevelName(level.upper())
    if not isinstance(level_num, int):
        level_num = logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        A bound structlog logger
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
