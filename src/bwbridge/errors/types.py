"""Error types and classifications."""

from __future__ import annotations

from enum import StrEnum


class ErrorCategory(StrEnum):
    """Error categories for handling decisions."""

    AUTHENTICATION = "authentication"
    NETWORK = "network"
    CLI = "cli"
    PARSE = "parse"
    STORAGE = "storage"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class BridgeError(Exception):
    """Base class for every error raised by bwbridge."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(BridgeError):
    """Authentication, API key login or unlock failed."""

    category = ErrorCategory.AUTHENTICATION


class MissingCredentialError(AuthError):
    """A credential required for unlocking is not configured."""


class CLIError(BridgeError):
    """The external bw command failed or produced unusable output."""

    category = ErrorCategory.CLI

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        stderr: str | None = None,
        command: str | None = None,
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr
        self.command = command


class DecodeError(BridgeError):
    """A stored payload could not be decrypted or decoded."""

    category = ErrorCategory.PARSE


class StoreError(BridgeError):
    """The backing key-value store could not be read or written."""

    category = ErrorCategory.STORAGE
