"""Colour tokens for UIs built on bwbridge."""

from __future__ import annotations

import os

import msgspec


class Theme(msgspec.Struct, frozen=True, rename="camel"):
    """Colour tokens for one appearance."""

    background: str
    text_color: str
    text_secondary: str
    border_color: str
    item_background: str
    error_background: str
    error_color: str
    loading_color: str
    hover_background: str


LIGHT = Theme(
    background="#f5f5f5",
    text_color="#333",
    text_secondary="#666",
    border_color="#eee",
    item_background="#fff",
    error_background="#fce8e6",
    error_color="#d93025",
    loading_color="#666",
    hover_background="#f0f0f0",
)

DARK = Theme(
    background="#1e1e1e",
    text_color="#e0e0e0",
    text_secondary="#999",
    border_color="#333",
    item_background="#2d2d2d",
    error_background="#4a1f1b",
    error_color="#ff8a80",
    loading_color="#999",
    hover_background="#383838",
)


def prefers_dark() -> bool:
    """Guess the terminal appearance from COLORFGBG ("fg;bg")."""
    value = os.environ.get("COLORFGBG", "")
    background = value.rsplit(";", 1)[-1]
    if not background.isdigit():
        return False
    # Colours 0-6 and 8 are the dark half of the 16-colour palette
    return int(background) in (0, 1, 2, 3, 4, 5, 6, 8)


def get_theme(dark: bool | None = None, preference: str = "auto") -> Theme:
    """Pick the theme for an explicit choice, a configured preference, or the terminal."""
    if dark is None:
        if preference == "dark":
            dark = True
        elif preference == "light":
            dark = False
        else:
            dark = prefers_dark()
    return DARK if dark else LIGHT
