"""Vault listing and search commands."""

from __future__ import annotations

from enum import StrEnum

import typer
from rich.console import Console

from bwbridge.cli.app import ExitCode
from bwbridge.cli.app import app
from bwbridge.cli.app import exit_code_for
from bwbridge.cli.app import get_service
from bwbridge.cli.display import items_table
from bwbridge.cli.display import print_error
from bwbridge.errors.types import BridgeError
from bwbridge.models import VaultItem


class ItemField(StrEnum):
    """Fields `bwbridge get` can print."""

    PASSWORD = "password"
    USERNAME = "username"
    NOTES = "notes"
    URI = "uri"


def _emit_error(console: Console, error: BridgeError, json_mode: bool) -> None:
    if json_mode:
        from bwbridge.display.json import output_json_error

        output_json_error(error)
    else:
        print_error(console, error)
    raise typer.Exit(exit_code_for(error)) from error


def _show_items(
    console: Console,
    items: list[VaultItem],
    json_mode: bool,
    title: str,
) -> None:
    if json_mode:
        from bwbridge.display.json import output_json_pretty

        output_json_pretty(items)
        return

    if not items:
        console.print("[dim]No matching items[/dim]")
        return

    console.print(items_table(items, title=title))


@app.command("items")
async def items_command(ctx: typer.Context) -> None:
    """List login items in the vault."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    service = get_service(console)
    try:
        items = await service.get_vault_items()
    except BridgeError as e:
        _emit_error(console, e, json_mode)
    finally:
        await service.aclose()

    _show_items(console, items, json_mode, title=f"Vault Items ({len(items)})")


@app.command("search")
async def search_command(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Text to match against name, username or URI"),
) -> None:
    """Search login items."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    service = get_service(console)
    try:
        items = await service.search_vault(text)
    except BridgeError as e:
        _emit_error(console, e, json_mode)
    finally:
        await service.aclose()

    _show_items(console, items, json_mode, title=f"Matches for '{text}'")


@app.command("get")
async def get_command(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Item ID, or text matching exactly one item"),
    field: ItemField = typer.Option(
        ItemField.PASSWORD, "--field", "-f", help="Field to print"
    ),
) -> None:
    """Print one field of a single item, for use in scripts."""
    console = Console()
    err_console = Console(stderr=True)
    json_mode = ctx.meta.get("json", False)

    service = get_service(err_console)
    try:
        items = await service.get_vault_items()
    except BridgeError as e:
        _emit_error(err_console, e, json_mode)
    finally:
        await service.aclose()

    matches = [item for item in items if item.id == query]
    if not matches:
        matches = [item for item in items if item.matches(query)]

    if len(matches) != 1:
        reason = "No item matches" if not matches else f"{len(matches)} items match"
        err_console.print(f"[red]✗[/red] {reason} '{query}'")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    item = matches[0]
    if field is ItemField.URI:
        value = next((u.uri for u in item.login.uris if u.uri), "")
    elif field is ItemField.NOTES:
        value = item.notes
    else:
        value = getattr(item.login, field.value)

    if json_mode:
        from bwbridge.display.json import output_json_pretty

        output_json_pretty({"id": item.id, "field": field.value, "value": value})
        return

    console.print(value, markup=False, highlight=False, soft_wrap=True)
