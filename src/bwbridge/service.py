"""Public API consumed by UI layers.

A ``BridgeService`` owns one session, one vault cache, one store and one
command runner. Separate instances share nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from datetime import timedelta
from typing import Any

from bwbridge.config.keyring import KeyringStore
from bwbridge.config.keyring import keyring_available
from bwbridge.config.paths import store_file
from bwbridge.config.settings import Config
from bwbridge.config.settings import get_config
from bwbridge.config.store import EncryptedStoreAdapter
from bwbridge.config.store import FileStore
from bwbridge.config.store import MemoryStore
from bwbridge.config.store import PlainStoreAdapter
from bwbridge.config.store import StoreAdapter
from bwbridge.core.bw import BitwardenCLI
from bwbridge.core.runner import CommandRunner
from bwbridge.core.session import SessionManager
from bwbridge.core.session import utc_now
from bwbridge.core.settings import Notifier
from bwbridge.core.settings import SettingsManager
from bwbridge.core.settings import log_notifier
from bwbridge.core.vault import FAILURE_POLICIES
from bwbridge.core.vault import VaultCacheManager
from bwbridge.errors.messages import get_error_message
from bwbridge.errors.types import AuthError
from bwbridge.errors.types import CLIError
from bwbridge.errors.types import StoreError
from bwbridge.models import BridgeContext
from bwbridge.models import OperationResult
from bwbridge.models import Settings
from bwbridge.models import VaultItem
from bwbridge.theme import Theme
from bwbridge.theme import get_theme

logger = logging.getLogger(__name__)


def create_store(config: Config) -> StoreAdapter:
    """Build the store adapter for the configured backend."""
    backend = config.storage.backend
    if backend == "keyring":
        if keyring_available():
            return PlainStoreAdapter(KeyringStore())
        logger.warning("No usable keyring backend, using the encrypted file store")
    elif backend == "memory":
        return EncryptedStoreAdapter(MemoryStore())
    return EncryptedStoreAdapter(FileStore(store_file()))


class BridgeService:
    """Settings, session and vault access behind one object."""

    def __init__(
        self,
        store: StoreAdapter,
        *,
        config: Config | None = None,
        cli: BitwardenCLI | None = None,
        notify: Notifier = log_notifier,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config or Config()
        self.store = store
        self.context = BridgeContext()

        if cli is None:
            runner = CommandRunner(
                self.context,
                command=self.config.cli.command,
                extra_path=self.config.cli.extra_path,
            )
            cli = BitwardenCLI(runner)
        self.cli = cli

        self.sessions = SessionManager(
            self.context,
            cli,
            store,
            duration=timedelta(hours=self.config.session.duration_hours),
            default_server=self.config.default_server,
            clock=clock,
        )
        self.vault = VaultCacheManager(
            self.context,
            self.sessions,
            cli,
            refresh_interval=timedelta(minutes=self.config.cache.refresh_interval_minutes),
            on_refresh_failure=FAILURE_POLICIES[self.config.cache.failure_policy],
            clock=clock,
        )
        self.settings = SettingsManager(store, notify=notify, on_change=self._reset_state)

        self.sessions.restore()

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        notify: Notifier = log_notifier,
    ) -> BridgeService:
        """Build a service with the configured storage backend and bw executable."""
        config = config or get_config()
        return cls(create_store(config), config=config, notify=notify)

    def _reset_state(self) -> None:
        self.sessions.clear()
        self.vault.invalidate()

    def load_settings(self) -> Settings:
        return self.settings.load()

    def save_settings(self, settings: Settings | dict) -> OperationResult:
        return self.settings.save(settings)

    async def verify_login(self, settings: Settings | None = None) -> OperationResult:
        """Try to obtain a session token with the given (or saved) settings."""
        if settings is None:
            settings = self.load_settings()
        try:
            await self.sessions.get_token(settings)
        except (AuthError, CLIError) as e:
            logger.info("Login verification failed: %s", e)
            return OperationResult.fail(get_error_message(e))
        return OperationResult.ok("Verified")

    async def get_vault_items(self) -> list[VaultItem]:
        """Return login items, from cache when warm."""
        return await self.vault.get_items(self.load_settings())

    async def search_vault(self, text: str) -> list[VaultItem]:
        """Filter vault items by name, username or URI; blank text matches all."""
        items = await self.get_vault_items()
        needle = text.strip()
        if not needle:
            return list(items)
        return [item for item in items if item.matches(needle)]

    def lock(self) -> None:
        """Forget the session and cached items without touching settings."""
        self._reset_state()

    def encrypt(self, data: Any) -> str:
        if self.store.cipher is None:
            raise StoreError("Encryption is handled by the storage backend")
        return self.store.cipher.encrypt(data)

    def decrypt(self, ciphertext: str) -> Any | None:
        if self.store.cipher is None:
            raise StoreError("Encryption is handled by the storage backend")
        return self.store.cipher.decrypt(ciphertext)

    def get_theme(self, dark: bool | None = None) -> Theme:
        return get_theme(dark, self.config.display.theme)

    async def aclose(self) -> None:
        """Let an in-flight background refresh finish."""
        await self.vault.wait_for_refresh()
