"""Submit command implementation."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from fleetcontract.cli.commands.validate import load_form, report_errors
from fleetcontract.cli.ui import error_panel, print_result
from fleetcontract.core.config import SettingsManager, resolve_database_url
from fleetcontract.core.form import FIX_ERRORS, ContractForm
from fleetcontract.core.orchestrator import ContractSubmitter
from fleetcontract.exceptions import ConfigError, FleetContractError
from fleetcontract.gateway import open_backend
from fleetcontract.models import ContractType, SubmissionResult

logger = logging.getLogger(__name__)
console = Console()


def database_url_for(explicit: Optional[str]) -> str:
    """Resolve the database URL, exiting with a panel on a bad settings file."""
    try:
        settings = SettingsManager().load()
    except ConfigError as e:
        console.print()
        console.print(error_panel(e.message, e.details))
        raise typer.Exit(1)
    return resolve_database_url(explicit, settings)


async def submit_form(
    form: ContractForm,
    contract_type: ContractType,
    database_url: str,
) -> SubmissionResult:
    """Open the backend, submit, and close it again."""
    gateway, numbers = open_backend(database_url, create_schema=True)
    form.submitter = ContractSubmitter(gateway, numbers)
    try:
        return await form.submit(contract_type)
    finally:
        await gateway.close()


def run_submit(
    path: Path,
    contract_type: ContractType,
    database_url: Optional[str] = None,
) -> None:
    """Run the submit command."""
    form = load_form(path)
    url = database_url_for(database_url)
    logger.info("Submitting %s from %s", contract_type.value, path)

    console.print()
    console.print(f"  Recording [bold]{contract_type.value}[/bold] contract...")

    try:
        result = asyncio.run(submit_form(form, contract_type, url))
    except FleetContractError as e:
        logger.error("Submission not started: %s", e.message)
        console.print()
        console.print(error_panel(e.message, e.details))
        raise typer.Exit(1)

    if not result.success and result.error_message == FIX_ERRORS:
        report_errors(form)
        raise typer.Exit(1)

    print_result(result)
    if not result.success:
        raise typer.Exit(1)
