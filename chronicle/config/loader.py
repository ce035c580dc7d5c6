"""TOML configuration loader with deep merge support."""

import os
import tomllib
from pathlib import Path
from typing import Any


def get_config_dir() -> Path:
    """Get the configuration directory path.

    CHRONICLE_CONFIG_DIR overrides the default of ./config relative to the
    working directory.
    """
    config_dir_env = os.environ.get("CHRONICLE_CONFIG_DIR")
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    return Path.cwd() / "config"


def get_environment() -> str:
    """Get the current environment from CHRONICLE_ENV, default 'development'."""
    return os.environ.get("CHRONICLE_ENV", "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config() -> dict[str, Any]:
    """Load configuration from TOML files.

    Loading order:
    1. config/default.toml (optional; model defaults apply when absent)
    2. config/{CHRONICLE_ENV}.toml (optional)

    Returns:
        Merged configuration dictionary
    """
    config_dir = get_config_dir()
    env = get_environment()

    config: dict[str, Any] = {}

    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = load_toml(default_path)

    env_path = config_dir / f"{env}.toml"
    if env_path.exists():
        config = deep_merge(config, load_toml(env_path))

    return config
