"""Settings commands for bwbridge."""

from __future__ import annotations

import typer
from rich.console import Console

from bwbridge.cli.app import ExitCode
from bwbridge.cli.app import get_service
from bwbridge.cli.atyper import ATyper
from bwbridge.cli.display import mask
from bwbridge.cli.display import settings_table
from bwbridge.config.paths import store_file
from bwbridge.config.settings import get_config
from bwbridge.models import Settings

settings_app = ATyper(help="Manage Bitwarden API key, server and master password.")


@settings_app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Show saved settings with secrets masked."""
    console = Console()
    config = get_config()
    service = get_service(console)
    settings = service.load_settings()

    if ctx.meta.get("json", False):
        from bwbridge.display.json import output_json_pretty

        output_json_pretty(
            {
                "clientId": settings.client_id,
                "clientSecret": mask(settings.client_secret),
                "serverUrl": settings.server_url,
                "masterPassword": mask(settings.master_password),
                "storage": config.storage.backend,
            }
        )
        return

    console.print(settings_table(settings, config.default_server))
    if ctx.meta.get("verbose", False):
        console.print(f"\n[dim]Storage backend: {config.storage.backend}[/dim]")
        if config.storage.backend == "file":
            console.print(f"[dim]Store file: {store_file()}[/dim]")
        runner = service.cli.runner
        found = "found" if runner.is_available() else "[red]not found[/red]"
        console.print(f"[dim]bw executable: {runner.command} ({found})[/dim]")


@settings_app.command("set")
def set_command(
    ctx: typer.Context,
    client_id: str = typer.Option(None, "--client-id", help="API key client_id"),
    client_secret: str = typer.Option(
        None, "--client-secret", help="API key client_secret"
    ),
    server_url: str = typer.Option(
        None, "--server-url", help="Self-hosted server URL (empty for the default)"
    ),
    prompt_password: bool = typer.Option(
        False, "--prompt-password", "-p", help="Prompt for the master password"
    ),
) -> None:
    """Update saved settings; options not given keep their current value.

    Saving always clears the cached session and vault items.
    """
    console = Console()
    service = get_service(console)
    current = service.load_settings()

    # The master password is only read from the prompt
    master_password = current.master_password
    if prompt_password or not master_password:
        master_password = typer.prompt("Master password", hide_input=True)

    updated = Settings(
        client_id=current.client_id if client_id is None else client_id,
        client_secret=current.client_secret if client_secret is None else client_secret,
        server_url=current.server_url if server_url is None else server_url,
        master_password=master_password,
    )
    result = service.save_settings(updated)

    if ctx.meta.get("json", False):
        from bwbridge.display.json import output_json_pretty

        output_json_pretty(result)
    elif result.success:
        console.print(f"[green]✓[/green] {result.message}")
    else:
        console.print(f"[red]Error saving settings:[/red] {result.message}")

    if not result.success:
        raise typer.Exit(ExitCode.CONFIG_ERROR)
