"""Export command implementation."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from fleetcontract.cli.commands.validate import load_form, report_errors
from fleetcontract.cli.ui import error_panel, success_panel
from fleetcontract.core.config import SettingsManager
from fleetcontract.exceptions import ConfigError, ExportError

logger = logging.getLogger(__name__)
console = Console()


def export_directory(output_dir: Optional[Path]) -> Path:
    """Explicit directory, else the configured one, else the working dir."""
    if output_dir:
        return output_dir
    try:
        settings = SettingsManager().load()
    except ConfigError as e:
        logger.warning("Ignoring unreadable settings: %s", e.details)
        return Path.cwd()
    return settings.export_dir or Path.cwd()


def run_export(path: Path, output_dir: Optional[Path] = None) -> None:
    """Run the export command."""
    form = load_form(path)
    directory = export_directory(output_dir)

    try:
        written = form.export(directory)
    except ExportError as e:
        console.print()
        console.print(error_panel(e.message, e.details))
        raise typer.Exit(1)

    if written is None:
        if not form.draft.vehicles:
            console.print()
            console.print(error_panel("The draft has no vehicles."))
        else:
            report_errors(form)
        raise typer.Exit(1)

    console.print()
    console.print(success_panel(f"Spreadsheet written to {written}"))
