"""Main CLI application."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from fleetcontract import __version__
from fleetcontract.logging import setup_logging
from fleetcontract.models import ContractType

app = typer.Typer(
    name="fleetcontract",
    help="Collect fleet maintenance contract requests and record them.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
    ),
) -> None:
    """fleetcontract - fleet contract requests from the command line."""
    if version:
        console.print(f"fleetcontract v{__version__}")
        raise typer.Exit()
    setup_logging()


@app.command()
def new(
    save: Optional[Path] = typer.Option(None, "--save", help="Save the draft to this file when done"),
    database_url: Optional[str] = typer.Option(None, "--database-url", help="Database to record contracts in"),
) -> None:
    """Fill in a contract request interactively."""
    from fleetcontract.cli.commands.new import run_new

    run_new(save_path=save, database_url=database_url)


@app.command()
def validate(
    draft: Path = typer.Argument(..., help="Draft file (TOML)"),
) -> None:
    """Check a draft file and list every problem."""
    from fleetcontract.cli.commands.validate import run_validate

    run_validate(draft)


@app.command()
def submit(
    draft: Path = typer.Argument(..., help="Draft file (TOML)"),
    contract_type: ContractType = typer.Option(..., "--type", "-t", help="Contract type"),
    database_url: Optional[str] = typer.Option(None, "--database-url", help="Database to record contracts in"),
) -> None:
    """Validate a draft and record it as a new contract."""
    from fleetcontract.cli.commands.submit import run_submit

    run_submit(draft, contract_type, database_url=database_url)


@app.command()
def export(
    draft: Path = typer.Argument(..., help="Draft file (TOML)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for the spreadsheet"),
) -> None:
    """Validate a draft and write the request spreadsheet."""
    from fleetcontract.cli.commands.export import run_export

    run_export(draft, output_dir=output)


@app.command("init-db")
def init_db(
    database_url: Optional[str] = typer.Option(None, "--database-url", help="Database to initialize"),
) -> None:
    """Create the contract tables."""
    from fleetcontract.cli.commands.configure import run_init_db

    run_init_db(database_url=database_url)


@app.command()
def configure(
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="Store the database URL in the OS keychain"
    ),
    export_dir: Optional[Path] = typer.Option(None, "--export-dir", help="Default spreadsheet directory"),
    show: bool = typer.Option(False, "--show", help="Show current settings"),
    reset: bool = typer.Option(False, "--reset", help="Delete settings and stored URL"),
) -> None:
    """View or change settings."""
    from fleetcontract.cli.commands.configure import run_configure

    run_configure(
        database_url=database_url,
        export_dir=export_dir,
        show=show,
        reset=reset,
    )


if __name__ == "__main__":
    app()
