"""Shared test fixtures for the Chronicle test suite."""

import os
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from chronicle.audit.models import AuditRecord
from chronicle.audit.stores import InMemoryAuditStore


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"CHRONICLE_DEBUG": "true"}):
                ...
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    return _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from chronicle.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> InMemoryAuditStore:
    """Create a fresh in-memory store for each test."""
    return InMemoryAuditStore()


@pytest.fixture
def base_time() -> datetime:
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_record(base_time: datetime) -> Callable[..., AuditRecord]:
    """Factory for unsaved audit records.

    Usage:
        record = make_record(actor="alice", operation="login", offset_seconds=5)
    """

    def _make(
        actor: str = "alice",
        operation: str = "login",
        duration_ms: int = 10,
        succeeded: bool = True,
        offset_seconds: float = 0,
        detail: str | None = None,
    ) -> AuditRecord:
        return AuditRecord(
            actor=actor,
            operation=operation,
            timestamp=base_time + timedelta(seconds=offset_seconds),
            duration_ms=duration_ms,
            succeeded=succeeded,
            detail=detail,
        )

    return _make
