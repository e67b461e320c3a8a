"""Configuration and storage for bwbridge."""

from bwbridge.config.crypto import Cipher, derive_key, generate_passphrase
from bwbridge.config.keyring import KeyringStore, keyring_available
from bwbridge.config.paths import (
    config_dir,
    config_file,
    data_dir,
    store_file,
)
from bwbridge.config.settings import (
    CacheConfig,
    CLIConfig,
    Config,
    DisplayConfig,
    SessionConfig,
    StorageConfig,
    config_to_dict,
    get_config,
    load_config,
    reload_config,
    reset_config,
    save_config,
    set_config_value,
)
from bwbridge.config.store import (
    ENCRYPTION_KEY,
    SESSION_KEY,
    SETTINGS_KEY,
    EncryptedStoreAdapter,
    FileStore,
    KeyValueStore,
    MemoryStore,
    PlainStoreAdapter,
    StoreAdapter,
)

__all__ = [
    # paths
    "config_dir",
    "data_dir",
    "config_file",
    "store_file",
    # settings
    "Config",
    "CLIConfig",
    "SessionConfig",
    "CacheConfig",
    "StorageConfig",
    "DisplayConfig",
    "get_config",
    "load_config",
    "reload_config",
    "save_config",
    "set_config_value",
    "reset_config",
    "config_to_dict",
    # crypto
    "Cipher",
    "derive_key",
    "generate_passphrase",
    # stores
    "SETTINGS_KEY",
    "SESSION_KEY",
    "ENCRYPTION_KEY",
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "KeyringStore",
    "keyring_available",
    "StoreAdapter",
    "PlainStoreAdapter",
    "EncryptedStoreAdapter",
]
