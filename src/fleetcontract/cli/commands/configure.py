"""Configure and init-db command implementations."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from fleetcontract.cli.commands.submit import database_url_for
from fleetcontract.cli.ui import error_panel, success_panel
from fleetcontract.core.config import SettingsManager
from fleetcontract.core.keychain import DatabaseKeychain
from fleetcontract.core.orchestrator import error_text
from fleetcontract.exceptions import ConfigError, GatewayError
from fleetcontract.gateway import MEMORY_URL
from fleetcontract.gateway.sql import SqlGateway

logger = logging.getLogger(__name__)
console = Console()


def mask_url(url: str) -> str:
    """Hide the password part of a database URL."""
    scheme, sep, rest = url.partition("://")
    if not sep or "@" not in rest:
        return url
    credentials, _, host = rest.rpartition("@")
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"


def run_configure(
    database_url: Optional[str] = None,
    export_dir: Optional[Path] = None,
    show: bool = False,
    reset: bool = False,
) -> None:
    """Run the configure command."""
    manager = SettingsManager()

    if reset:
        _handle_reset(manager)
        return

    try:
        settings = manager.load()
    except ConfigError as e:
        console.print()
        console.print(error_panel(e.message, e.details))
        raise typer.Exit(1)

    changed = False
    if database_url:
        DatabaseKeychain.store(database_url)
        console.print()
        console.print(success_panel("Database URL stored in the OS keychain."))
    if export_dir:
        settings = settings.model_copy(update={"export_dir": export_dir})
        changed = True

    if changed:
        manager.save(settings)
        console.print()
        console.print(success_panel("Settings saved."))

    if show or not (database_url or export_dir):
        _show(manager)


def _show(manager: SettingsManager) -> None:
    settings = manager.load()
    stored = DatabaseKeychain.exists()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Settings file", str(manager.config_path))
    table.add_row("Database", mask_url(database_url_for(None)))
    table.add_row("Keychain URL", "[green]stored[/green]" if stored else "[dim]not set[/dim]")
    table.add_row("Export dir", str(settings.export_dir) if settings.export_dir else "[dim]current directory[/dim]")

    console.print()
    console.print(Panel(table, title="Settings", border_style="blue", padding=(1, 2)))


def _handle_reset(manager: SettingsManager) -> None:
    console.print()
    if Confirm.ask("[yellow]Delete settings and the stored database URL?[/yellow]", default=False):
        deleted = manager.delete()
        DatabaseKeychain.delete()
        if deleted:
            console.print(success_panel("Settings deleted."))
        else:
            console.print("[dim]No settings file found; keychain entry cleared.[/dim]")
    else:
        console.print("[dim]Cancelled.[/dim]")


def run_init_db(database_url: Optional[str] = None) -> None:
    """Create missing tables in the configured database."""
    url = database_url_for(database_url)
    if url == MEMORY_URL:
        console.print()
        console.print("[dim]  The in-memory backend needs no setup.[/dim]")
        return

    try:
        gateway = SqlGateway(url)
        try:
            gateway.create_schema()
        finally:
            gateway.engine.dispose()
    except GatewayError as e:
        logger.error("init-db failed: %s", e.details)
        console.print()
        console.print(error_panel("Could not initialize the database.", error_text(e)))
        raise typer.Exit(1)

    console.print()
    console.print(success_panel(f"Tables ready in {mask_url(url)}"))
