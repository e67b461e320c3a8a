"""Console rendering helpers for bwbridge commands."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from bwbridge.errors.messages import classify_error
from bwbridge.errors.messages import get_error_message
from bwbridge.errors.messages import get_remediation
from bwbridge.models import Settings
from bwbridge.models import VaultItem


def mask(value: str) -> str:
    """Mask a secret, keeping a short prefix of longer values."""
    if not value:
        return "—"
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}…"


def items_table(items: list[VaultItem], title: str = "Vault Items") -> Table:
    """Render login items as a table."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Username")
    table.add_column("URI", style="dim")
    table.add_column("ID", style="dim", no_wrap=True)

    for item in items:
        first_uri = next((u.uri for u in item.login.uris if u.uri), None)
        table.add_row(
            item.name,
            item.login.username or "—",
            first_uri or "—",
            item.id,
        )
    return table


def settings_table(settings: Settings, default_server: str) -> Table:
    """Render settings with secrets masked."""
    table = Table(title="Settings", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    table.add_row("Client ID", settings.client_id or "—")
    table.add_row("Client secret", mask(settings.client_secret))
    table.add_row(
        "Server URL",
        settings.server_url or f"[dim]{default_server} (default)[/dim]",
    )
    table.add_row("Master password", mask(settings.master_password))
    return table


def print_error(console: Console, error: BaseException) -> None:
    """Print a humanized error with a remediation hint."""
    console.print(f"[red]✗[/red] {get_error_message(error)}")
    if remediation := get_remediation(classify_error(error)):
        console.print(f"[dim]{remediation}[/dim]")
