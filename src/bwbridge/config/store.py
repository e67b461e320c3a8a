"""Key-value stores and the adapters that encode values into them."""

from __future__ import annotations

import json
import logging
import stat
from abc import ABC
from abc import abstractmethod
from pathlib import Path
from typing import Any

import msgspec

from bwbridge.config.crypto import Cipher
from bwbridge.config.crypto import generate_passphrase
from bwbridge.errors.types import DecodeError
from bwbridge.errors.types import StoreError

logger = logging.getLogger(__name__)

# Persisted keys
SETTINGS_KEY = "bwbridge-settings"
SESSION_KEY = "bwbridge-session"
ENCRYPTION_KEY = "encryption-key"


class KeyValueStore(ABC):
    """Host-provided persistent string store."""

    @abstractmethod
    def get_item(self, key: str) -> str | None: ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...


class MemoryStore(KeyValueStore):
    """Process-local store, lost on exit."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class FileStore(KeyValueStore):
    """JSON object file with owner-only permissions."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Store {self.path} is not a JSON object")
        return data

    def _read_for_update(self) -> dict[str, str]:
        try:
            return self._read_all()
        except StoreError as e:
            # The rewrite replaces unreadable contents
            logger.warning("Discarding unreadable store: %s", e)
            return {}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            # Write to temp file first, then rename for atomicity
            temp_path = self.path.with_suffix(".tmp")
            temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            temp_path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 0o600
            temp_path.replace(self.path)
        except OSError as e:
            raise StoreError(f"Cannot write store {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_for_update()
        if data.pop(key, None) is not None:
            self._write_all(data)


class StoreAdapter(ABC):
    """Reads and writes objects through a KeyValueStore."""

    cipher: Cipher | None = None

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    @abstractmethod
    def encode(self, value: Any) -> str: ...

    @abstractmethod
    def decode(self, raw: str) -> Any:
        """Decode a stored string; raises DecodeError on a corrupt payload."""

    def read(self, key: str) -> Any | None:
        """Read and decode a value, returning None if absent."""
        raw = self.store.get_item(key)
        if raw is None:
            return None
        return self.decode(raw)

    def write(self, key: str, value: Any) -> None:
        self.store.set_item(key, self.encode(value))

    def remove(self, key: str) -> None:
        self.store.remove_item(key)


class PlainStoreAdapter(StoreAdapter):
    """Stores plain JSON; for backends that encrypt on their own."""

    def encode(self, value: Any) -> str:
        return msgspec.json.encode(value).decode("utf-8")

    def decode(self, raw: str) -> Any:
        try:
            return msgspec.json.decode(raw)
        except msgspec.DecodeError as e:
            raise DecodeError(f"Corrupt stored value: {e}") from e


class EncryptedStoreAdapter(StoreAdapter):
    """Encrypts values locally before handing them to the store.

    The passphrase is generated on first use and kept in the same store.
    """

    def __init__(self, store: KeyValueStore, install_id: str | None = None) -> None:
        super().__init__(store)
        self._install_id = install_id
        self.cipher = Cipher(self._passphrase)

    def _passphrase(self) -> str:
        try:
            passphrase = self.store.get_item(ENCRYPTION_KEY)
        except StoreError as e:
            # Values encrypted under an unreadable key are lost already
            logger.warning("Encryption key unreadable, generating a new one: %s", e)
            passphrase = None
        if not passphrase:
            passphrase = generate_passphrase(self._install_id)
            self.store.set_item(ENCRYPTION_KEY, passphrase)
        return passphrase

    def encode(self, value: Any) -> str:
        return self.cipher.encrypt(value)

    def decode(self, raw: str) -> Any:
        value = self.cipher.decrypt(raw)
        if value is None:
            raise DecodeError("Stored value could not be decrypted")
        return value
