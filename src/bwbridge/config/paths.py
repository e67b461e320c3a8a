"""Platform-specific paths for bwbridge configuration and data."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir
from platformdirs import user_data_dir

PACKAGE_NAME = "bwbridge"


def _get_env_path(env_var: str, fallback: Path) -> Path:
    """Get path from environment variable or fallback."""
    if env_value := os.environ.get(env_var):
        return Path(env_value)
    return fallback


def config_dir() -> Path:
    """Get user config directory.

    Respects BWBRIDGE_CONFIG_DIR environment variable.
    """
    base_dir = Path(user_config_dir(PACKAGE_NAME))
    return _get_env_path("BWBRIDGE_CONFIG_DIR", base_dir)


def data_dir() -> Path:
    """Get user data directory holding the key-value store.

    Respects BWBRIDGE_DATA_DIR environment variable.
    """
    base_dir = Path(user_data_dir(PACKAGE_NAME))
    return _get_env_path("BWBRIDGE_DATA_DIR", base_dir)


def config_file() -> Path:
    """Get main config.toml path."""
    return config_dir() / "config.toml"


def store_file() -> Path:
    """Get the file-backed key-value store path."""
    return data_dir() / "store.json"

