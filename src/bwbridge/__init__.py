"""bwbridge: Cached, encrypted access to a Bitwarden vault through the bw CLI."""

from __future__ import annotations

__version__ = "0.1.0"

from bwbridge.models import LoginInfo
from bwbridge.models import OperationResult
from bwbridge.models import Session
from bwbridge.models import Settings
from bwbridge.models import Uri
from bwbridge.models import VaultCache
from bwbridge.models import VaultItem
from bwbridge.service import BridgeService
from bwbridge.theme import Theme

__all__ = [
    "__version__",
    "BridgeService",
    "Settings",
    "Session",
    "VaultCache",
    "VaultItem",
    "LoginInfo",
    "Uri",
    "OperationResult",
    "Theme",
]


def main() -> None:
    """Entry point for the bwbridge CLI."""
    from bwbridge.cli.app import run_app

    run_app()
