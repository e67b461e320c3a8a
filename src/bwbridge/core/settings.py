"""Loading and saving of the user's Bitwarden credentials."""
from __future__ import annotations

import logging
from collections.abc import Callable

import msgspec

from bwbridge.config.store import SETTINGS_KEY
from bwbridge.config.store import StoreAdapter
from bwbridge.errors.types import DecodeError
from bwbridge.errors.types import StoreError
from bwbridge.models import OperationResult
from bwbridge.models import Settings

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


def log_notifier(message: str) -> None:
    logger.warning(message)


class SettingsManager:
    """Persists Settings through a store adapter.

    ``on_change`` runs before every save so dependent state (session,
    vault cache) is dropped when credentials change.
    """

    def __init__(
        self,
        store: StoreAdapter,
        *,
        notify: Notifier = log_notifier,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.notify = notify
        self.on_change = on_change

    def load(self) -> Settings:
        """Load settings, falling back to empty defaults."""
        try:
            data = self.store.read(SETTINGS_KEY)
        except (DecodeError, StoreError) as e:
            self.notify(f"Failed to load settings: {e}")
            return Settings()

        if data is None:
            return Settings()
        if isinstance(data, dict):
            # Absent and null fields both mean empty
            data = {k: v for k, v in data.items() if v is not None}

        try:
            return msgspec.convert(data, type=Settings).normalized()
        except msgspec.ValidationError as e:
            self.notify(f"Failed to load settings: {e}")
            return Settings()

    def save(self, settings: Settings | dict) -> OperationResult:
        """Save settings, invalidating the session and vault cache."""
        if isinstance(settings, dict):
            settings = Settings.from_mapping(settings)
        else:
            settings = settings.normalized()

        if self.on_change is not None:
            self.on_change()

        try:
            self.store.write(SETTINGS_KEY, settings)
        except StoreError as e:
            logger.warning("Could not save settings: %s", e)
            return OperationResult.fail(e.message)

        logger.info("Settings saved")
        return OperationResult.ok("Settings saved")
