"""Rich console UI helpers."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fleetcontract.models import Draft, SubmissionResult

console = Console()


def success_panel(message: str) -> Panel:
    """Create a success message panel."""
    return Panel(
        f"[green]✓[/green] {message}",
        border_style="green",
        padding=(0, 1),
    )


def error_panel(message: str, details: str | None = None) -> Panel:
    """Create an error message panel."""
    content = f"[red]✗[/red] {message}"
    if details:
        content += f"\n\n[dim]{details}[/dim]"
    return Panel(
        content,
        title="Error",
        border_style="red",
        padding=(0, 1),
    )


def warning_panel(message: str) -> Panel:
    """Create a warning message panel."""
    return Panel(
        f"[yellow]⚠[/yellow] {message}",
        border_style="yellow",
        padding=(0, 1),
    )


ROLLBACK_WARNING = "Some records could not be rolled back. Check the debug log."


def result_panel(result: SubmissionResult) -> Panel:
    """Banner for a submission outcome."""
    if result.success:
        return success_panel(result.banner)
    return error_panel(result.banner)


def print_result(result: SubmissionResult) -> None:
    """Print the outcome banner, plus a warning when cleanup was partial."""
    console.print()
    console.print(result_panel(result))
    if not result.rollback_complete:
        console.print(warning_panel(ROLLBACK_WARNING))


def format_distance(km: int | str) -> str:
    """Thousands-separated km figure, "-" when blank."""
    if km in ("", None):
        return "-"
    try:
        return f"{int(km):,} km"
    except (TypeError, ValueError):
        return str(km)


def create_errors_table(errors: list[tuple[str, str]]) -> Table:
    """Table of (field path, message) pairs."""
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Problem", style="red")
    for path, message in errors:
        table.add_row(path, message)
    return table


def create_client_table(draft: Draft) -> Table:
    """Two-column table of the client block."""
    client = draft.client
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Company", client.company_name or "N/A")
    table.add_row("NIF", client.tax_id or "N/A")
    table.add_row("Province", client.province or "N/A")
    table.add_row("Address", client.address or "N/A")
    table.add_row("Email", client.company_email or "-")
    table.add_row(
        "Contact",
        f"{client.contact_name or 'N/A'} ({client.contact_role or 'N/A'})",
    )
    table.add_row("Contact email", client.contact_email or "N/A")
    table.add_row("Contact phone", client.contact_phone or "N/A")

    return table


def create_vehicles_table(draft: Draft) -> Table:
    """One row per vehicle with its contract terms."""
    table = Table(title="Vehicles", show_lines=False)
    table.add_column("#", style="dim", width=3)
    table.add_column("Make / model")
    table.add_column("Plate", style="bold")
    table.add_column("VIN", style="dim")
    table.add_column("Months", justify="right")
    table.add_column("Contract km", justify="right")
    table.add_column("Start")

    for i, v in enumerate(draft.vehicles, 1):
        total = format_distance(v.total_distance)
        if v.total_distance_overridden:
            total += " [dim](manual)[/dim]"
        table.add_row(
            str(i),
            f"{v.make} {v.model}".strip() or "[dim]-[/dim]",
            v.plate or "[dim]-[/dim]",
            v.vin or "[dim]-[/dim]",
            v.duration_months or "-",
            total,
            v.start_date or "-",
        )

    return table


def summary_panel(summary: dict) -> Panel:
    """Contract summary: company, vehicle count, total km."""
    return Panel(
        f"[bold]{summary['company']}[/bold]\n"
        f"{summary['vehicles']} vehicle(s) · "
        f"{format_distance(summary['total_distance'])} contracted",
        title="Contract summary",
        border_style="blue",
        padding=(1, 2),
    )
