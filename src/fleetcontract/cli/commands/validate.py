"""Validate command implementation."""

from pathlib import Path

import typer
from rich.console import Console

from fleetcontract.cli.ui import (
    create_errors_table,
    create_vehicles_table,
    error_panel,
    success_panel,
)
from fleetcontract.core.drafts import DraftStore
from fleetcontract.core.form import ContractForm
from fleetcontract.exceptions import DraftError

console = Console()


def load_form(path: Path, form: ContractForm | None = None) -> ContractForm:
    """Load a draft file into a form, exiting with a panel on error."""
    try:
        draft = DraftStore.load(path)
    except DraftError as e:
        console.print()
        console.print(error_panel(e.message, e.details))
        raise typer.Exit(1)

    form = form or ContractForm()
    form.load(draft)
    return form


def report_errors(form: ContractForm) -> None:
    """Print the error table, first error highlighted."""
    ordered = form.errors.ordered(form.draft)
    first_path, first_message = ordered[0]
    console.print()
    console.print(error_panel(
        f"{len(ordered)} problem(s) found.",
        f"First: {first_path} - {first_message}",
    ))
    console.print()
    console.print(create_errors_table(ordered))


def run_validate(path: Path) -> None:
    """Run the validate command."""
    form = load_form(path)

    if not form.draft.vehicles:
        console.print()
        console.print(error_panel("The draft has no vehicles."))
        raise typer.Exit(1)

    if not form.validate_all():
        report_errors(form)
        raise typer.Exit(1)

    console.print()
    console.print(create_vehicles_table(form.draft))
    console.print()
    console.print(success_panel("All fields valid."))
