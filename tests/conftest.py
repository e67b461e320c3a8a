"""Pytest configuration and shared fixtures for bwbridge tests."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import msgspec
import pytest

from bwbridge.config import settings as settings_module
from bwbridge.config.store import EncryptedStoreAdapter, MemoryStore
from bwbridge.core.bw import BitwardenCLI, VaultStatus
from bwbridge.models import BridgeContext, RawRecord, Settings

SAMPLE_LIST_ITEMS = b"""[
  {
    "object": "item", "id": "login-1", "type": 1, "name": "GitHub",
    "notes": "work account", "favorite": false,
    "login": {
      "username": "octocat", "password": "hunter2", "totp": null,
      "uris": [{"match": null, "uri": "https://github.com"}]
    }
  },
  {
    "object": "item", "id": "note-1", "type": 2, "name": "Recovery codes",
    "notes": "1234-5678", "secureNote": {"type": 0}
  },
  {
    "object": "item", "id": "login-2", "type": 1, "name": "Bare login",
    "notes": null, "login": null
  },
  {
    "object": "item", "id": "card-1", "type": 3, "name": "Visa",
    "notes": null, "card": {"brand": "Visa"}
  },
  {
    "object": "item", "id": "login-3", "type": 1, "name": "Mail",
    "notes": null,
    "login": {"username": null, "password": "s3cret", "uris": null}
  }
]"""


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point config and data directories at a temporary location."""
    monkeypatch.setenv("BWBRIDGE_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("BWBRIDGE_DATA_DIR", str(tmp_path / "data"))
    for var in ("BWBRIDGE_CLI", "BWBRIDGE_STORAGE", "BWBRIDGE_SERVER", "COLORFGBG"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(settings_module, "_config", None)
    yield tmp_path


@pytest.fixture(autouse=True)
def restore_logger() -> Generator[None, None, None]:
    """Undo handlers and levels installed by configure_logging."""
    logger = logging.getLogger("bwbridge")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def utc_now() -> datetime:
    """Fixed UTC datetime for consistent testing."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(utc_now: datetime) -> FakeClock:
    return FakeClock(utc_now)


@pytest.fixture
def context() -> BridgeContext:
    return BridgeContext()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(memory_store: MemoryStore) -> EncryptedStoreAdapter:
    """Encrypted adapter over an in-memory store."""
    return EncryptedStoreAdapter(memory_store, install_id="test-install")


@pytest.fixture
def raw_records() -> list[RawRecord]:
    """Five vault records, three of them logins."""
    return msgspec.json.decode(SAMPLE_LIST_ITEMS, type=list[RawRecord])


@pytest.fixture
def mock_cli(raw_records: list[RawRecord]) -> MagicMock:
    """BitwardenCLI double with an unlocked vault."""
    cli = MagicMock(spec=BitwardenCLI)
    cli.status = AsyncMock(return_value=VaultStatus.UNLOCKED)
    cli.logout = AsyncMock()
    cli.config_server = AsyncMock()
    cli.login_apikey = AsyncMock()
    cli.unlock = AsyncMock(return_value="session-token")
    cli.sync = AsyncMock()
    cli.list_items = AsyncMock(return_value=raw_records)
    return cli


@pytest.fixture
def settings() -> Settings:
    return Settings(
        client_id="user.1234",
        client_secret="client-secret",
        server_url="",
        master_password="correct horse battery staple",
    )
