"""Core session and vault cache logic for bwbridge."""

from bwbridge.core.bw import BitwardenCLI, VaultStatus
from bwbridge.core.runner import CommandRunner
from bwbridge.core.session import SessionManager, normalize_server_url
from bwbridge.core.settings import SettingsManager
from bwbridge.core.vault import (
    FAILURE_POLICIES,
    VaultCacheManager,
    keep_cache,
    reset_cache,
)

__all__ = [
    "BitwardenCLI",
    "VaultStatus",
    "CommandRunner",
    "SessionManager",
    "normalize_server_url",
    "SettingsManager",
    "VaultCacheManager",
    "FAILURE_POLICIES",
    "reset_cache",
    "keep_cache",
]
