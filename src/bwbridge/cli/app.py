"""Main CLI application for bwbridge."""

from __future__ import annotations

from enum import IntEnum

import typer
from rich.console import Console

from bwbridge.cli.atyper import ATyper
from bwbridge.errors.messages import classify_error
from bwbridge.errors.types import ErrorCategory

# Create the main app
app = ATyper(
    name="bwbridge",
    help="Cached, encrypted access to a Bitwarden vault through the bw CLI",
    add_completion=True,
    no_args_is_help=False,
    invoke_without_command=True,
)


class ExitCode(IntEnum):
    """Exit codes for bwbridge."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 2
    NETWORK_ERROR = 3
    CONFIG_ERROR = 4


_CATEGORY_EXIT_CODES: dict[ErrorCategory, ExitCode] = {
    ErrorCategory.AUTHENTICATION: ExitCode.AUTH_ERROR,
    ErrorCategory.NETWORK: ExitCode.NETWORK_ERROR,
    ErrorCategory.CONFIGURATION: ExitCode.CONFIG_ERROR,
    ErrorCategory.STORAGE: ExitCode.CONFIG_ERROR,
}


def exit_code_for(error: BaseException) -> ExitCode:
    """Pick the process exit code for an error."""
    return _CATEGORY_EXIT_CODES.get(classify_error(error), ExitCode.GENERAL_ERROR)


@app.callback()
def main(
    ctx: typer.Context,
    json: bool = typer.Option(False, "--json", "-j", help="Enable JSON output mode"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """bwbridge - Cached, encrypted access to a Bitwarden vault."""
    if version:
        from bwbridge import __version__

        typer.echo(f"bwbridge {__version__}")
        raise typer.Exit()

    # quiet takes precedence
    if verbose and quiet:
        verbose = False

    from bwbridge.log import configure_logging

    configure_logging(verbose=verbose, quiet=quiet)

    ctx.meta["json"] = json
    ctx.meta["verbose"] = verbose
    ctx.meta["quiet"] = quiet

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def get_service(console: Console):
    """Build the service for a command, reporting store warnings on the console."""
    from bwbridge.service import BridgeService

    def notify(message: str) -> None:
        console.print(f"[yellow]{message}[/yellow]")

    return BridgeService.from_config(notify=notify)


def run_app() -> None:
    """Run the CLI app."""
    app()


# Import command modules - they register themselves via @app.command() decorators
# These imports must come after app is defined
from bwbridge.cli.commands import auth  # noqa: E402,F401
from bwbridge.cli.commands import theme  # noqa: E402,F401
from bwbridge.cli.commands import vault  # noqa: E402,F401
from bwbridge.cli.commands import settings as settings_cmd  # noqa: E402

app.add_typer(settings_cmd.settings_app, name="settings")
from bwbridge.cli.commands import config as config_cmd  # noqa: E402

app.add_typer(config_cmd.config_app, name="config")
