"""Tests for cli/app.py (main CLI application)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import typer
from rich.console import Console
from typer.testing import CliRunner

from bwbridge import __version__
from bwbridge.cli.app import ExitCode, app, exit_code_for, get_service, main
from bwbridge.errors.types import AuthError, BridgeError, CLIError, DecodeError, StoreError
from bwbridge.service import BridgeService

runner = CliRunner()


class TestExitCode:
    """Tests for ExitCode enum."""

    def test_exit_code_values(self):
        assert ExitCode.SUCCESS == 0
        assert ExitCode.GENERAL_ERROR == 1
        assert ExitCode.AUTH_ERROR == 2
        assert ExitCode.NETWORK_ERROR == 3
        assert ExitCode.CONFIG_ERROR == 4

    @pytest.mark.parametrize(
        "error,expected",
        [
            (AuthError("Invalid master password."), ExitCode.AUTH_ERROR),
            (CLIError("Unauthorized"), ExitCode.AUTH_ERROR),
            (CLIError("connect ECONNREFUSED 127.0.0.1:443"), ExitCode.NETWORK_ERROR),
            (StoreError("disk full"), ExitCode.CONFIG_ERROR),
            (CLIError("bw not found in PATH"), ExitCode.GENERAL_ERROR),
            (DecodeError("corrupt"), ExitCode.GENERAL_ERROR),
            (BridgeError("?"), ExitCode.GENERAL_ERROR),
        ],
    )
    def test_exit_code_for(self, error, expected):
        assert exit_code_for(error) == expected


class TestMain:
    """Tests for main callback function."""

    def test_main_sets_context_meta(self):
        ctx = MagicMock()
        ctx.meta = {}
        ctx.invoked_subcommand = "items"

        main(ctx, json=True, verbose=True, quiet=False, version=False)

        assert ctx.meta == {"json": True, "verbose": True, "quiet": False}

    def test_quiet_overrides_verbose(self):
        ctx = MagicMock()
        ctx.meta = {}
        ctx.invoked_subcommand = "items"

        with patch("bwbridge.log.configure_logging") as mock_configure:
            main(ctx, json=False, verbose=True, quiet=True, version=False)

        mock_configure.assert_called_once_with(verbose=False, quiet=True)
        assert ctx.meta["verbose"] is False

    def test_version_exits(self):
        ctx = MagicMock()
        with patch("bwbridge.cli.app.typer.echo") as mock_echo:
            with pytest.raises(typer.Exit):
                main(ctx, json=False, verbose=False, quiet=False, version=True)
        mock_echo.assert_called_once_with(f"bwbridge {__version__}")


class TestInvocation:
    """Invoking the app end to end."""

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"bwbridge {__version__}" in result.output

    def test_no_command_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "Usage" in result.output
        assert "items" in result.output

    def test_unknown_command(self):
        result = runner.invoke(app, ["frobnicate"])
        assert result.exit_code != 0


class TestGetService:
    """Tests for get_service."""

    def test_builds_service_from_config(self, monkeypatch):
        monkeypatch.setenv("BWBRIDGE_STORAGE", "memory")

        service = get_service(Console())

        assert isinstance(service, BridgeService)

    def test_notifications_go_to_console(self, monkeypatch):
        monkeypatch.setenv("BWBRIDGE_STORAGE", "memory")
        console = MagicMock()

        service = get_service(console)
        service.settings.notify("Failed to load settings: corrupt")

        console.print.assert_called_once()
        assert "Failed to load settings" in console.print.call_args.args[0]
