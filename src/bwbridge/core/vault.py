"""Cached vault contents with single-flight background refresh."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from datetime import timedelta

from bwbridge.core.bw import BitwardenCLI
from bwbridge.core.bw import VaultStatus
from bwbridge.core.session import SessionManager
from bwbridge.core.session import utc_now
from bwbridge.errors.types import AuthError
from bwbridge.models import BridgeContext
from bwbridge.models import Settings
from bwbridge.models import VaultCache
from bwbridge.models import VaultItem
from bwbridge.models import filter_login_items

logger = logging.getLogger(__name__)

REFRESH_INTERVAL = timedelta(minutes=5)

FailurePolicy = Callable[[VaultCache], None]


def reset_cache(cache: VaultCache) -> None:
    """Drop the cached items so the next read re-authenticates."""
    cache.items = None
    cache.last_update = None
    cache.is_unlocked = False


def keep_cache(cache: VaultCache) -> None:
    """Keep the last good items but mark them stale."""
    cache.last_update = None


FAILURE_POLICIES: dict[str, FailurePolicy] = {
    "reset": reset_cache,
    "keep": keep_cache,
}


class VaultCacheManager:
    """Serves vault items from memory, refreshing them behind the caller's back.

    A cold cache is filled synchronously and errors reach the caller. A warm
    but stale cache is returned as is while one background refresh runs;
    its errors are logged and handed to ``on_refresh_failure``.
    """

    def __init__(
        self,
        context: BridgeContext,
        sessions: SessionManager,
        cli: BitwardenCLI,
        *,
        refresh_interval: timedelta = REFRESH_INTERVAL,
        on_refresh_failure: FailurePolicy = reset_cache,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.context = context
        self.sessions = sessions
        self.cli = cli
        self.refresh_interval = refresh_interval
        self.on_refresh_failure = on_refresh_failure
        self.clock = clock
        self._refresh_task: asyncio.Task | None = None

    @property
    def cache(self) -> VaultCache:
        return self.context.cache

    @property
    def is_updating(self) -> bool:
        task = self._refresh_task
        return self.cache.is_updating or (task is not None and not task.done())

    def invalidate(self) -> None:
        """Reset the cache; an in-flight refresh is left to finish."""
        self.context.cache = VaultCache()

    async def _fetch(self) -> list[VaultItem]:
        await self.cli.sync()
        records = await self.cli.list_items()
        return filter_login_items(records)

    def _store(self, items: list[VaultItem]) -> list[VaultItem]:
        cache = self.cache
        cache.items = items
        cache.last_update = self.clock()
        cache.is_unlocked = True
        return items

    async def get_items(self, settings: Settings) -> list[VaultItem]:
        """Return vault login items.

        Raises:
            AuthError: The cache was cold and the vault could not be unlocked.
            CLIError: The cache was cold and sync or list failed.
        """
        cache = self.cache
        if cache.items is not None:
            if not self.is_updating and cache.is_stale(self.clock(), self.refresh_interval):
                self.schedule_refresh(settings)
            return cache.items

        await self.sessions.get_token(settings)
        items = await self._fetch()
        logger.debug("Loaded %d login items", len(items))
        return self._store(items)

    def schedule_refresh(self, settings: Settings) -> asyncio.Task | None:
        """Start a background refresh unless one is already running."""
        if self._refresh_task is not None and not self._refresh_task.done():
            return self._refresh_task
        if self.cache.is_updating:
            return None

        task = asyncio.create_task(self.refresh(settings))
        self._refresh_task = task
        task.add_done_callback(self._refresh_done)
        return task

    def _refresh_done(self, task: asyncio.Task) -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    async def refresh(self, settings: Settings) -> None:
        """Re-read the vault into the cache; never raises."""
        if self.cache.is_updating:
            return

        self.cache.is_updating = True
        try:
            await self.sessions.get_token(settings)
            status = await self.cli.status()
            if status is not VaultStatus.UNLOCKED:
                raise AuthError(f"Vault is {status} after unlock")
            items = await self._fetch()
            self._store(items)
            logger.debug("Background refresh loaded %d login items", len(items))
        except Exception as e:
            logger.warning("Background vault refresh failed: %s", e)
            self.on_refresh_failure(self.cache)
        finally:
            self.cache.is_updating = False

    async def wait_for_refresh(self) -> None:
        """Wait for the in-flight background refresh, if any."""
        task = self._refresh_task
        if task is not None:
            await task
