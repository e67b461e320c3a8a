"""Human-readable messages for errors surfaced to the user."""

from __future__ import annotations

from bwbridge.errors.types import AuthError
from bwbridge.errors.types import BridgeError
from bwbridge.errors.types import ErrorCategory

INVALID_API_KEY = "Invalid API key"
CANNOT_REACH_SERVER = "Cannot reach server"
VERIFY_FAILED = "Verification failed"

# Substrings the bw CLI (a Node program) emits for unreachable servers
NETWORK_ERROR_PATTERNS: tuple[str, ...] = (
    "ECONNREFUSED",
    "ENOTFOUND",
    "EAI_AGAIN",
    "ETIMEDOUT",
    "getaddrinfo",
    "Connection refused",
)

UNAUTHORIZED_PATTERNS: tuple[str, ...] = (
    "Unauthorized",
    "invalid_client",
)

REMEDIATION: dict[ErrorCategory, str] = {
    ErrorCategory.AUTHENTICATION: (
        "Check your API key and master password with "
        "'[cyan]bwbridge settings set[/cyan]'."
    ),
    ErrorCategory.NETWORK: (
        "Check your network connection and the configured server URL."
    ),
    ErrorCategory.CLI: (
        "Make sure the Bitwarden CLI ([cyan]bw[/cyan]) is installed and on PATH."
    ),
    ErrorCategory.STORAGE: (
        "Check permissions on the bwbridge data directory."
    ),
    ErrorCategory.CONFIGURATION: (
        "Run '[cyan]bwbridge settings show[/cyan]' to check your settings."
    ),
}


def is_network_message(text: str) -> bool:
    """Check whether an error message describes an unreachable server."""
    return any(pattern in text for pattern in NETWORK_ERROR_PATTERNS)


def is_unauthorized_message(text: str) -> bool:
    """Check whether an error message describes rejected API credentials."""
    return any(pattern in text for pattern in UNAUTHORIZED_PATTERNS)


def classify_error(error: BaseException) -> ErrorCategory:
    """Classify an exception into an error category.

    Network failures surface from bw as ordinary CLI failures, so the
    message is inspected before falling back to the exception's own category.
    """
    text = str(error)
    if is_network_message(text):
        return ErrorCategory.NETWORK
    if is_unauthorized_message(text):
        return ErrorCategory.AUTHENTICATION
    if isinstance(error, BridgeError):
        return error.category
    return ErrorCategory.UNKNOWN


def get_error_message(error: BaseException) -> str:
    """Map an exception to the message shown to the user."""
    text = str(error)
    if is_unauthorized_message(text):
        return INVALID_API_KEY
    if is_network_message(text):
        return CANNOT_REACH_SERVER
    if not text:
        return VERIFY_FAILED if isinstance(error, AuthError) else type(error).__name__
    return text


def get_remediation(category: ErrorCategory) -> str | None:
    """Get a remediation hint for an error category."""
    return REMEDIATION.get(category)
