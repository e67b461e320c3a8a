"""System keyring backend for hosts that encrypt stored values natively."""

from __future__ import annotations

from bwbridge.config.store import KeyValueStore
from bwbridge.errors.types import StoreError

SERVICE_NAME = "bwbridge"


def keyring_available() -> bool:
    """Check if a usable keyring backend is installed."""
    try:
        import keyring
        from keyring.backends import fail

        return not isinstance(keyring.get_keyring(), fail.Keyring)
    except Exception:
        return False


class KeyringStore(KeyValueStore):
    """KeyValueStore backed by the system keyring."""

    def __init__(self, service: str = SERVICE_NAME) -> None:
        self.service = service

    def get_item(self, key: str) -> str | None:
        import keyring
        from keyring.errors import KeyringError

        try:
            return keyring.get_password(self.service, key)
        except KeyringError as e:
            raise StoreError(f"Keyring read failed for {key}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        import keyring
        from keyring.errors import KeyringError

        try:
            keyring.set_password(self.service, key, value)
        except KeyringError as e:
            raise StoreError(f"Keyring write failed for {key}: {e}") from e

    def remove_item(self, key: str) -> None:
        import keyring
        from keyring.errors import KeyringError
        from keyring.errors import PasswordDeleteError

        try:
            keyring.delete_password(self.service, key)
        except PasswordDeleteError:
            return
        except KeyringError as e:
            raise StoreError(f"Keyring delete failed for {key}: {e}") from e
