"""JSON output utilities for bwbridge."""

from __future__ import annotations

import sys
from typing import Any

import msgspec
from rich.text import Text

from bwbridge.errors.messages import classify_error
from bwbridge.errors.messages import get_error_message
from bwbridge.errors.messages import get_remediation

__all__ = [
    "encode_json",
    "output_json",
    "output_json_pretty",
    "output_json_error",
]


def encode_json(data: Any) -> bytes:
    """Encode data (Structs, lists, dicts) as compact JSON."""
    return msgspec.json.encode(data)


def output_json(data: Any) -> None:
    """Write compact JSON to stdout."""
    sys.stdout.write(encode_json(data).decode("utf-8"))
    sys.stdout.write("\n")


def output_json_pretty(data: Any) -> None:
    """Write indented JSON to stdout."""
    formatted = msgspec.json.format(encode_json(data), indent=2)
    sys.stdout.write(formatted.decode("utf-8"))
    sys.stdout.write("\n")


def output_json_error(error: BaseException) -> None:
    """Write an error object to stdout."""
    category = classify_error(error)
    data: dict[str, Any] = {
        "message": get_error_message(error),
        "category": str(category),
    }
    if remediation := get_remediation(category):
        data["remediation"] = Text.from_markup(remediation).plain
    output_json_pretty({"error": data})
