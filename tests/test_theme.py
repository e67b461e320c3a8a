"""Tests for theme tokens."""

from __future__ import annotations

import msgspec
import pytest

from bwbridge.theme import DARK, LIGHT, get_theme, prefers_dark


class TestTokens:
    """Tests for the light and dark token sets."""

    def test_light_values(self):
        assert LIGHT.background == "#f5f5f5"
        assert LIGHT.text_color == "#333"
        assert LIGHT.error_color == "#d93025"

    def test_dark_values(self):
        assert DARK.background == "#1e1e1e"
        assert DARK.text_color == "#e0e0e0"
        assert DARK.hover_background == "#383838"

    def test_camel_case_keys(self):
        data = msgspec.json.decode(msgspec.json.encode(DARK))
        assert set(data) == {
            "background",
            "textColor",
            "textSecondary",
            "borderColor",
            "itemBackground",
            "errorBackground",
            "errorColor",
            "loadingColor",
            "hoverBackground",
        }


class TestPrefersDark:
    """Tests for prefers_dark."""

    @pytest.mark.parametrize("value,expected", [("15;0", True), ("0;8", True), ("0;15", False), ("0;7", False)])
    def test_colorfgbg(self, monkeypatch, value, expected):
        monkeypatch.setenv("COLORFGBG", value)
        assert prefers_dark() is expected

    def test_unset(self):
        assert prefers_dark() is False

    def test_garbage(self, monkeypatch):
        monkeypatch.setenv("COLORFGBG", "default;default")
        assert prefers_dark() is False


class TestGetTheme:
    """Tests for get_theme."""

    def test_explicit_choice_wins(self):
        assert get_theme(True, "light") is DARK
        assert get_theme(False, "dark") is LIGHT

    def test_preference(self):
        assert get_theme(None, "dark") is DARK
        assert get_theme(None, "light") is LIGHT

    def test_auto_follows_terminal(self, monkeypatch):
        monkeypatch.setenv("COLORFGBG", "15;0")
        assert get_theme() is DARK
        monkeypatch.setenv("COLORFGBG", "0;15")
        assert get_theme() is LIGHT
