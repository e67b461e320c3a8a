"""Configuration structures and loading for bwbridge."""

import os
import sys
import tomllib
from pathlib import Path
from typing import Literal

import msgspec


# Default values
DEFAULT_SERVER = "https://vault.bitwarden.com"
DEFAULT_COMMAND = "bw"
DEFAULT_SESSION_HOURS = 12.0
DEFAULT_REFRESH_INTERVAL_MINUTES = 5.0


def _default_extra_path() -> list[str]:
    # GUI hosts often start without the shell's PATH
    if sys.platform == "win32":
        return []
    return ["/usr/local/bin", "/usr/local/sbin", "/opt/homebrew/bin"]


# External CLI configuration
class CLIConfig(msgspec.Struct, omit_defaults=True):
    """How the Bitwarden CLI is invoked."""

    command: str = DEFAULT_COMMAND
    extra_path: list[str] = msgspec.field(default_factory=_default_extra_path)


# Session configuration
class SessionConfig(msgspec.Struct, omit_defaults=True):
    """Session lifetime settings."""

    duration_hours: float = DEFAULT_SESSION_HOURS


# Vault cache configuration
class CacheConfig(msgspec.Struct, omit_defaults=True):
    """Vault cache behavior settings."""

    refresh_interval_minutes: float = DEFAULT_REFRESH_INTERVAL_MINUTES
    failure_policy: Literal["reset", "keep"] = "reset"


# Storage configuration
class StorageConfig(msgspec.Struct, omit_defaults=True):
    """Where settings and the session are persisted."""

    backend: Literal["file", "keyring", "memory"] = "file"


# Display configuration
class DisplayConfig(msgspec.Struct, omit_defaults=True):
    """Display settings."""

    theme: Literal["auto", "light", "dark"] = "auto"


# Main configuration
class Config(msgspec.Struct, omit_defaults=True):
    """Main configuration structure."""

    default_server: str = DEFAULT_SERVER
    cli: CLIConfig = msgspec.field(default_factory=CLIConfig)
    session: SessionConfig = msgspec.field(default_factory=SessionConfig)
    cache: CacheConfig = msgspec.field(default_factory=CacheConfig)
    storage: StorageConfig = msgspec.field(default_factory=StorageConfig)
    display: DisplayConfig = msgspec.field(default_factory=DisplayConfig)


def _load_from_toml(path: Path) -> dict:
    """Load configuration from TOML file."""
    if not path.exists():
        return {}

    with path.open("rb") as f:
        return tomllib.load(f)


def _save_to_toml(data: dict, path: Path) -> None:
    """Save configuration to TOML file."""
    import tomli_w

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(data, f)


def convert_config(data: dict) -> Config:
    """Convert raw dict to Config struct."""
    return msgspec.convert(data, type=Config)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config.

    BWBRIDGE_CLI: Path or name of the bw executable
    BWBRIDGE_STORAGE: Storage backend (file, keyring, memory)
    BWBRIDGE_SERVER: Default server used when settings carry none
    """
    if command := os.environ.get("BWBRIDGE_CLI"):
        cli = msgspec.structs.replace(config.cli, command=command)
        config = msgspec.structs.replace(config, cli=cli)

    if backend := os.environ.get("BWBRIDGE_STORAGE"):
        storage = msgspec.convert({"backend": backend}, type=StorageConfig)
        config = msgspec.structs.replace(config, storage=storage)

    if server := os.environ.get("BWBRIDGE_SERVER"):
        config = msgspec.structs.replace(config, default_server=server)

    return config


# Sections of config.toml and the struct each one maps to
CONFIG_SECTIONS: dict[str, type[msgspec.Struct]] = {
    "cli": CLIConfig,
    "session": SessionConfig,
    "cache": CacheConfig,
    "storage": StorageConfig,
    "display": DisplayConfig,
}


def config_to_dict(config: Config) -> dict:
    """Every config value as builtins, defaults included."""
    return {
        name: msgspec.structs.asdict(value) if isinstance(value, msgspec.Struct) else value
        for name, value in msgspec.structs.asdict(config).items()
    }


# Config state storage
_config: Config | None = None


def get_config() -> Config:
    """Get the current configuration (singleton)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(path: Path | None = None) -> Config:
    """Reload configuration from disk."""
    global _config
    _config = load_config(path)
    return _config


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file with defaults."""
    from .paths import config_file

    config_path = path or config_file()

    raw_data = _load_from_toml(config_path)
    if not raw_data:
        config = Config()
    else:
        config = convert_config(raw_data)

    return _apply_env_overrides(config)


def save_config(config: Config, path: Path | None = None) -> None:
    """Save configuration to file."""
    from .paths import config_file

    config_path = path or config_file()
    _save_to_toml(msgspec.to_builtins(config), config_path)

    # Update singleton
    global _config
    _config = config


def set_config_value(key: str, value: str, path: Path | None = None) -> Config:
    """Set one dotted key, such as ``cache.failure_policy``, in the config file.

    The value is coerced to the field's type; list fields take a
    comma-separated string. Environment overrides are not written back.

    Raises:
        KeyError: The key names no config field.
        msgspec.ValidationError: The value does not fit the field.
    """
    from .paths import config_file

    config_path = path or config_file()
    data = _load_from_toml(config_path)

    section, _, name = key.rpartition(".")
    if section:
        struct_type = CONFIG_SECTIONS.get(section)
        if struct_type is None:
            raise KeyError(key)
        target = data.setdefault(section, {})
    else:
        if name in CONFIG_SECTIONS:
            raise KeyError(key)
        struct_type, target = Config, data
    if name not in struct_type.__struct_fields__:
        raise KeyError(key)

    if isinstance(getattr(struct_type(), name), list):
        target[name] = [part.strip() for part in value.split(",") if part.strip()]
    else:
        target[name] = value

    config = msgspec.convert(data, type=Config, strict=False)
    save_config(config, config_path)
    return reload_config(config_path)


def reset_config(path: Path | None = None) -> Config:
    """Delete the config file and fall back to defaults."""
    from .paths import config_file

    config_path = path or config_file()
    config_path.unlink(missing_ok=True)
    return reload_config(config_path)
