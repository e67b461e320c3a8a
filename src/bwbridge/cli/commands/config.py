"""Config commands for bwbridge."""

from __future__ import annotations

import msgspec
import tomli_w
import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from bwbridge.cli.app import ExitCode
from bwbridge.cli.atyper import ATyper
from bwbridge.config.paths import config_dir
from bwbridge.config.paths import config_file
from bwbridge.config.paths import data_dir
from bwbridge.config.paths import store_file
from bwbridge.config.settings import config_to_dict
from bwbridge.config.settings import get_config
from bwbridge.config.settings import reset_config
from bwbridge.config.settings import set_config_value

config_app = ATyper(help="Manage bwbridge configuration.")


@config_app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Display current settings, defaults included."""
    console = Console()
    data = config_to_dict(get_config())
    path = config_file()

    if ctx.meta.get("json", False):
        from bwbridge.display.json import output_json_pretty

        output_json_pretty({**data, "path": str(path)})
        return

    if ctx.meta.get("quiet", False):
        typer.echo(str(path))
        return

    console.print(
        Panel(
            Syntax(tomli_w.dumps(data), "toml", theme="monokai", word_wrap=True),
            title=f"Config: {path}",
            border_style="dim",
        )
    )

    if ctx.meta.get("verbose", False):
        state = "exists" if path.exists() else "not created, defaults in use"
        console.print(f"\n[dim]Config file {state}[/dim]")


@config_app.command("path")
def path_command(ctx: typer.Context) -> None:
    """Show the directories and files bwbridge uses."""
    paths = {
        "config_dir": config_dir(),
        "config_file": config_file(),
        "data_dir": data_dir(),
        "store_file": store_file(),
    }

    if ctx.meta.get("json", False):
        from bwbridge.display.json import output_json_pretty

        output_json_pretty({name: str(path) for name, path in paths.items()})
        return

    console = Console()
    if ctx.meta.get("quiet", False):
        typer.echo(str(paths["config_file"]))
        return

    for name, path in paths.items():
        console.print(f"[bold]{name.replace('_', ' ').capitalize()}:[/bold] {path}")


@config_app.command("set")
def set_command(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Dotted key, e.g. cache.failure_policy"),
    value: str = typer.Argument(..., help="New value; lists are comma-separated"),
) -> None:
    """Change one configuration value."""
    console = Console()
    try:
        config = set_config_value(key, value)
    except KeyError:
        console.print(f"[red]Unknown config key:[/red] {key}")
        raise typer.Exit(ExitCode.CONFIG_ERROR) from None
    except msgspec.ValidationError as e:
        console.print(f"[red]Invalid value for {key}:[/red] {e}")
        raise typer.Exit(ExitCode.CONFIG_ERROR) from None

    if ctx.meta.get("json", False):
        from bwbridge.display.json import output_json_pretty

        output_json_pretty({**config_to_dict(config), "path": str(config_file())})
        return

    if not ctx.meta.get("quiet", False):
        console.print(f"[green]✓[/green] Set {key} = {value}")


@config_app.command("reset")
def reset_command(
    ctx: typer.Context,
    confirm: bool = typer.Option(
        False, "--confirm", "-y", help="Skip confirmation prompt"
    ),
) -> None:
    """Reset configuration to defaults."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    if not confirm and not json_mode:
        if not typer.confirm("Reset all configuration to defaults?"):
            console.print("[yellow]Reset cancelled[/yellow]")
            return

    reset_config()

    if json_mode:
        from bwbridge.display.json import output_json_pretty

        output_json_pretty({"success": True, "path": str(config_file())})
        return

    if not ctx.meta.get("quiet", False):
        console.print("[green]✓[/green] Configuration reset to defaults")
