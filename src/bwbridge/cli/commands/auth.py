"""Login verification and lock commands."""

from __future__ import annotations

import typer
from rich.console import Console

from bwbridge.cli.app import ExitCode
from bwbridge.cli.app import app
from bwbridge.cli.app import get_service
from bwbridge.errors.messages import CANNOT_REACH_SERVER


@app.command("login")
async def login_command(ctx: typer.Context) -> None:
    """Verify the saved settings by unlocking the vault."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    service = get_service(console)
    try:
        with console.status("Unlocking vault...", spinner="dots"):
            result = await service.verify_login()
    finally:
        await service.aclose()

    if json_mode:
        from bwbridge.display.json import output_json_pretty

        output_json_pretty(result)
    elif result.success:
        console.print("[green]✓[/green] Vault unlocked")
    else:
        console.print(f"[red]✗[/red] {result.message}")

    if not result.success:
        if result.message == CANNOT_REACH_SERVER:
            raise typer.Exit(ExitCode.NETWORK_ERROR)
        raise typer.Exit(ExitCode.AUTH_ERROR)


@app.command("lock")
def lock_command(ctx: typer.Context) -> None:
    """Forget the cached session; the next command unlocks again."""
    console = Console()
    service = get_service(console)
    service.lock()

    if ctx.meta.get("json", False):
        from bwbridge.display.json import output_json_pretty

        output_json_pretty({"success": True, "message": "Session cleared"})
        return

    console.print("[green]✓[/green] Session cleared")
