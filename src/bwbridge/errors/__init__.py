"""Error handling for bwbridge."""

from bwbridge.errors.messages import (
    CANNOT_REACH_SERVER,
    INVALID_API_KEY,
    classify_error,
    get_error_message,
    get_remediation,
)
from bwbridge.errors.types import (
    AuthError,
    BridgeError,
    CLIError,
    DecodeError,
    ErrorCategory,
    MissingCredentialError,
    StoreError,
)

__all__ = [
    # Core types
    "ErrorCategory",
    "BridgeError",
    "AuthError",
    "MissingCredentialError",
    "CLIError",
    "DecodeError",
    "StoreError",
    # Messages
    "INVALID_API_KEY",
    "CANNOT_REACH_SERVER",
    "classify_error",
    "get_error_message",
    "get_remediation",
]
