"""Theme token command."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from bwbridge.cli.app import app
from bwbridge.config.settings import get_config
from bwbridge.theme import get_theme


@app.command("theme")
def theme_command(
    ctx: typer.Context,
    dark: Optional[bool] = typer.Option(
        None, "--dark/--light", help="Force dark or light tokens"
    ),
) -> None:
    """Show the UI colour tokens for the current appearance."""
    theme = get_theme(dark, get_config().display.theme)

    if ctx.meta.get("json", False):
        from bwbridge.display.json import output_json_pretty

        output_json_pretty(theme)
        return

    console = Console()
    table = Table(title="Theme", show_header=True, header_style="bold")
    table.add_column("Token", style="cyan")
    table.add_column("Value")
    table.add_column("")

    for name in theme.__struct_fields__:
        value = getattr(theme, name)
        table.add_row(name, value, f"[on {value}]    [/]")

    console.print(table)
