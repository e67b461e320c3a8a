"""Session token lifecycle: validation, re-authentication and persistence."""
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import UTC
from datetime import datetime
from datetime import timedelta

import msgspec

from bwbridge.config.settings import DEFAULT_SERVER
from bwbridge.config.store import SESSION_KEY
from bwbridge.config.store import StoreAdapter
from bwbridge.core.bw import BitwardenCLI
from bwbridge.core.bw import VaultStatus
from bwbridge.errors.types import AuthError
from bwbridge.errors.types import CLIError
from bwbridge.errors.types import DecodeError
from bwbridge.errors.types import MissingCredentialError
from bwbridge.errors.types import StoreError
from bwbridge.models import BridgeContext
from bwbridge.models import Session
from bwbridge.models import Settings

logger = logging.getLogger(__name__)

SESSION_DURATION = timedelta(hours=12)

_TRAILING_SLASHES = re.compile(r"/+$")


def utc_now() -> datetime:
    return datetime.now(UTC)


def normalize_server_url(url: str | None) -> str | None:
    """Normalize a server URL for comparison.

    Blank input yields None; a missing scheme becomes https; trailing
    slashes are dropped.
    """
    if not url:
        return None
    url = url.strip()
    if not url:
        return None
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return _TRAILING_SLASHES.sub("", url)


class SessionManager:
    """Hands out a bw session token, re-authenticating when needed.

    The token lives on the shared context so the command runner can inject
    it into every invocation.
    """

    def __init__(
        self,
        context: BridgeContext,
        cli: BitwardenCLI,
        store: StoreAdapter,
        *,
        duration: timedelta = SESSION_DURATION,
        default_server: str = DEFAULT_SERVER,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.context = context
        self.cli = cli
        self.store = store
        self.duration = duration
        self.default_server = default_server
        self.clock = clock

    @property
    def session(self) -> Session:
        return self.context.session

    def restore(self) -> Session:
        """Load a persisted session if one exists and has not expired."""
        try:
            data = self.store.read(SESSION_KEY)
        except (DecodeError, StoreError) as e:
            logger.debug("Ignoring persisted session: %s", e)
            data = None

        session = Session()
        if data is not None:
            try:
                candidate = msgspec.convert(data, type=Session)
            except msgspec.ValidationError as e:
                logger.debug("Ignoring malformed persisted session: %s", e)
            else:
                if candidate.is_valid(self.clock()):
                    session = candidate

        self.context.session = session
        return session

    def persist(self) -> None:
        """Save the session; failures are logged and ignored."""
        try:
            self.store.write(SESSION_KEY, self.session)
        except StoreError as e:
            logger.warning("Could not persist session: %s", e)

    def clear(self) -> None:
        """Forget the session and its persisted copy."""
        self.context.session = Session()
        try:
            self.store.remove(SESSION_KEY)
        except StoreError as e:
            logger.debug("Could not remove persisted session: %s", e)

    async def _cached_token(self) -> str | None:
        """Return the cached token if it is in date and the vault is unlocked."""
        session = self.session
        if not session.is_valid(self.clock()):
            return None
        try:
            status = await self.cli.status()
        except CLIError as e:
            logger.debug("Status check failed, re-authenticating: %s", e)
            return None
        if status is VaultStatus.UNLOCKED:
            return session.token
        logger.debug("Vault is %s, re-authenticating", status)
        return None

    async def _switch_server(self, settings: Settings) -> None:
        new_url = normalize_server_url(settings.server_url)
        cached_url = normalize_server_url(self.session.server_url)
        if new_url == cached_url:
            return

        logger.info("Server changed to %s", new_url or self.default_server)
        try:
            await self.cli.logout()
        except CLIError as e:
            logger.debug("Logout before server switch failed: %s", e)

        if new_url:
            await self.cli.config_server(new_url)
        elif cached_url:
            await self.cli.config_server(self.default_server)

        # Recorded even if the rest of authentication fails
        self.session.server_url = settings.server_url

    async def get_token(self, settings: Settings) -> str:
        """Return a usable session token.

        Raises:
            MissingCredentialError: No master password is configured.
            AuthError: Any login, unlock or server switch step failed.
        """
        if (token := await self._cached_token()) is not None:
            return token

        try:
            await self._switch_server(settings)

            status = await self.cli.status()
            if status is VaultStatus.UNAUTHENTICATED:
                logger.info("Logging in with API key")
                await self.cli.login_apikey(settings.client_id, settings.client_secret)

            if not settings.master_password:
                raise MissingCredentialError("Master password is not set")

            token = await self.cli.unlock(settings.master_password)
        except CLIError as e:
            raise AuthError(e.message) from e

        if not token:
            raise AuthError("bw unlock returned an empty session key")

        self.context.session = Session(
            token=token,
            expires_at=self.clock() + self.duration,
            server_url=settings.server_url,
        )
        self.persist()
        logger.info("Vault unlocked")
        return token
