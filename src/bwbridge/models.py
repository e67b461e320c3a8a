"""Data models for bwbridge.

Defines the records shared by the session, cache and settings layers.
Persisted records use camelCase field names on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timedelta

import msgspec

# Record type discriminator bw uses for login entries
LOGIN_ITEM_TYPE = 1


class Settings(msgspec.Struct, rename="camel"):
    """User-supplied credentials for the Bitwarden CLI."""

    client_id: str = ""
    client_secret: str = ""
    server_url: str = ""
    master_password: str = ""

    @classmethod
    def from_mapping(cls, data: dict) -> Settings:
        """Build settings from a loose mapping, treating missing or None as empty."""
        known = {
            name: data.get(name) or data.get(encoded) or ""
            for name, encoded in zip(cls.__struct_fields__, cls.__struct_encode_fields__)
        }
        return cls(**{name: str(value) for name, value in known.items()})

    def normalized(self) -> Settings:
        """Return a copy with every None field replaced by an empty string."""
        return Settings(
            client_id=self.client_id or "",
            client_secret=self.client_secret or "",
            server_url=self.server_url or "",
            master_password=self.master_password or "",
        )


class Session(msgspec.Struct, rename="camel"):
    """An unlocked bw session and the server it was issued against."""

    token: str | None = None
    expires_at: datetime | None = None
    server_url: str | None = None

    def is_valid(self, now: datetime) -> bool:
        """Check if the token is present and not yet expired."""
        return (
            self.token is not None
            and self.expires_at is not None
            and now < self.expires_at
        )


class Uri(msgspec.Struct, omit_defaults=True):
    """A URI attached to a login item."""

    uri: str | None = None
    match: int | None = None


class LoginInfo(msgspec.Struct):
    """Login fields of a vault item."""

    username: str = ""
    password: str = ""
    uris: list[Uri] = []


class VaultItem(msgspec.Struct):
    """A login entry from the vault, reduced to what the UI needs."""

    id: str
    name: str
    login: LoginInfo = msgspec.field(default_factory=LoginInfo)
    notes: str = ""

    def matches(self, text: str) -> bool:
        """Case-insensitive match against name, username and URIs."""
        needle = text.lower()
        if needle in self.name.lower():
            return True
        if needle in self.login.username.lower():
            return True
        return any(u.uri and needle in u.uri.lower() for u in self.login.uris)


class RawLogin(msgspec.Struct):
    """Login block of a record as emitted by `bw list items`."""

    username: str | None = None
    password: str | None = None
    uris: list[Uri] | None = None


class RawRecord(msgspec.Struct):
    """A vault record as emitted by `bw list items`."""

    type: int
    id: str
    name: str = ""
    login: RawLogin | None = None
    notes: str | None = None


def to_vault_item(record: RawRecord) -> VaultItem:
    """Map a raw record to a VaultItem, defaulting missing fields."""
    login = record.login or RawLogin()
    return VaultItem(
        id=record.id,
        name=record.name or "",
        login=LoginInfo(
            username=login.username or "",
            password=login.password or "",
            uris=list(login.uris or []),
        ),
        notes=record.notes or "",
    )


def filter_login_items(records: list[RawRecord]) -> list[VaultItem]:
    """Keep login records only and map them to VaultItems."""
    return [to_vault_item(r) for r in records if r.type == LOGIN_ITEM_TYPE]


class VaultCache(msgspec.Struct):
    """In-memory view of the vault."""

    items: list[VaultItem] | None = None
    last_update: datetime | None = None
    is_updating: bool = False
    is_unlocked: bool = False

    def is_stale(self, now: datetime, max_age: timedelta) -> bool:
        """Check if the cache has never been stamped or is older than max_age."""
        if self.last_update is None:
            return True
        return now - self.last_update > max_age


class OperationResult(msgspec.Struct, frozen=True):
    """Result of a boundary operation that reports instead of raising."""

    success: bool
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> OperationResult:
        return cls(success=True, message=message)

    @classmethod
    def fail(cls, message: str) -> OperationResult:
        return cls(success=False, message=message)


@dataclass
class BridgeContext:
    """Mutable state shared by one service's managers and runner."""

    session: Session = field(default_factory=Session)
    cache: VaultCache = field(default_factory=VaultCache)
