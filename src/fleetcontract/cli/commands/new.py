"""Interactive contract request form."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from fleetcontract import __version__
from fleetcontract.cli.commands.export import export_directory
from fleetcontract.cli.commands.submit import database_url_for, submit_form
from fleetcontract.cli.ui import (
    create_client_table,
    create_errors_table,
    create_vehicles_table,
    error_panel,
    print_result,
    success_panel,
    summary_panel,
)
from fleetcontract.core.drafts import DraftStore
from fleetcontract.core.form import ContractForm
from fleetcontract.exceptions import ExportError, FleetContractError
from fleetcontract.models import (
    OPERATION_TYPES,
    PROVINCES,
    VEHICLE_MAKES,
    ContractType,
    VehicleDraft,
    models_for,
)

logger = logging.getLogger(__name__)
console = Console()

CLIENT_PROMPTS = [
    ("company_name", "Company name"),
    ("tax_id", "NIF"),
    ("province", "Province"),
    ("address", "Address"),
    ("company_email", "General email (optional)"),
    ("contact_name", "Contact name"),
    ("contact_role", "Contact role"),
    ("contact_email", "Contact email"),
    ("contact_phone", "Contact phone"),
]

VEHICLE_PROMPTS = [
    ("make", "Make"),
    ("model", "Model"),
    ("plate", "Plate"),
    ("vin", "VIN (17 characters)"),
    ("year", "Year of manufacture"),
    ("odometer", "Current km"),
    ("monthly_distance", "Estimated km per month"),
    ("operation_type", "Operation type"),
    ("duration_months", "Duration in months (1-60)"),
    ("total_distance", "Contract total km"),
    ("start_date", "Start date (YYYY-MM-DD)"),
    ("notes", "Notes (optional)"),
]


def run_new(save_path: Optional[Path] = None, database_url: Optional[str] = None) -> None:
    """Run the interactive form."""
    FormSession(save_path=save_path, database_url=database_url).run()


class FormSession:
    """Prompts for one contract request, then offers save/export actions."""

    def __init__(
        self,
        save_path: Optional[Path] = None,
        database_url: Optional[str] = None,
        form: Optional[ContractForm] = None,
    ) -> None:
        self.form = form or ContractForm()
        self.save_path = save_path
        self.database_url = database_url

    def run(self) -> None:
        """Main entry point."""
        console.print()
        console.print(
            Panel.fit(
                f"[bold]Contract request[/bold] [dim]fleetcontract v{__version__}[/dim]\n\n"
                "Fill in the client, then each vehicle and its contract terms.",
                border_style="blue",
            )
        )

        try:
            self._collect_client()
            vehicle = self.form.draft.vehicles[0]
            while True:
                self._collect_vehicle(vehicle)
                if not Confirm.ask("  Add another vehicle?", default=False):
                    break
                vehicle = self.form.add_vehicle()
            self._loop()
        except KeyboardInterrupt:
            console.print()
            console.print("[yellow]Cancelled.[/yellow]")
            self._autosave()
            raise typer.Exit(1)

    # --- Prompts ---

    def _ask(self, label: str, current: str, options: Optional[list[str]] = None) -> str:
        """Prompt for one value; numbered options accept a number or the text."""
        if options:
            for i, option in enumerate(options, 1):
                console.print(f"    [dim]{i:>2}.[/dim] {option}")
        answer = Prompt.ask(f"  {label}", default=current, show_default=bool(current))
        answer = answer.strip()
        if options and answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]
        return answer

    def _collect_client(self) -> None:
        console.print()
        console.print("[bold cyan]--- Client ---[/bold cyan]")
        console.print()

        client = self.form.draft.client
        for name, label in CLIENT_PROMPTS:
            options = PROVINCES if name == "province" else None
            while True:
                value = self._ask(label, getattr(client, name), options)
                self.form.update_client_field(name, value)
                message = self.form.blur_client_field(name)
                if message is None:
                    break
                console.print(f"  [red]{message}[/red]")

    def _vehicle_options(self, vehicle: VehicleDraft, field: str) -> Optional[list[str]]:
        if field == "make":
            return VEHICLE_MAKES
        if field == "model":
            return models_for(vehicle.make)
        if field == "operation_type":
            return OPERATION_TYPES
        return None

    def _collect_vehicle(self, vehicle: VehicleDraft) -> None:
        index = self.form.draft.index_of(vehicle.id) + 1
        console.print()
        console.print(f"[bold cyan]--- Vehicle {index} ---[/bold cyan]")
        console.print()

        for field, label in VEHICLE_PROMPTS:
            while True:
                current = getattr(vehicle, field)
                value = self._ask(label, current, self._vehicle_options(vehicle, field))
                # Unchanged answers keep dependent fields (model, total km) as they are
                if value != current:
                    self.form.update_vehicle_field(vehicle.id, field, value)
                message = self.form.blur_vehicle_field(vehicle.id, field)
                if message is None:
                    break
                console.print(f"  [red]{message}[/red]")

    def _pick_vehicle(self, prompt_text: str) -> Optional[VehicleDraft]:
        """Pick a vehicle. Auto-selects if only one."""
        vehicles = self.form.draft.vehicles
        if not vehicles:
            return None
        if len(vehicles) == 1:
            return vehicles[0]

        console.print()
        console.print(f"  [bold]{prompt_text}[/bold]")
        for i, vehicle in enumerate(vehicles, 1):
            console.print(f"    {i}. {vehicle.label}")
        choice = Prompt.ask("  Vehicle #", default="1")

        try:
            idx = int(choice) - 1
            if 0 <= idx < len(vehicles):
                return vehicles[idx]
        except ValueError:
            pass

        console.print("  [red]Invalid selection.[/red]")
        return None

    # --- Main loop ---

    def _build_actions(self) -> dict:
        actions = {
            "a": {"label": "Add a vehicle", "handler": self._action_add},
        }
        if self.form.draft.vehicles:
            actions["e"] = {"label": "Edit a vehicle", "handler": self._action_edit}
            actions["x"] = {"label": "Remove a vehicle", "handler": self._action_remove}
        actions["k"] = {"label": "Edit client", "handler": self._collect_client}
        actions["c"] = {
            "label": "Save as CM contract",
            "handler": lambda: self._action_submit(ContractType.CM),
        }
        actions["p"] = {
            "label": "Save as APV contract",
            "handler": lambda: self._action_submit(ContractType.APV),
        }
        actions["s"] = {"label": "Export spreadsheet", "handler": self._action_export}
        actions["d"] = {"label": "Save draft file", "handler": self._action_save_draft}
        actions["q"] = {"label": "Quit", "handler": lambda: None}
        return actions

    def _show_dashboard(self) -> None:
        console.print()
        console.print(summary_panel(self.form.summary()))
        console.print(create_client_table(self.form.draft))
        console.print()
        console.print(create_vehicles_table(self.form.draft))

    def _loop(self) -> None:
        while True:
            self._show_dashboard()
            actions = self._build_actions()
            console.print()
            for key, action in actions.items():
                console.print(f"  [bold cyan]\\[{key}][/bold cyan] {action['label']}")
            console.print()

            choice = Prompt.ask("  [bold]>[/bold]").strip().lower()

            if choice == "q":
                self._autosave()
                console.print()
                console.print("[dim]Goodbye![/dim]")
                return

            action = actions.get(choice)
            if action is None:
                console.print("  [red]Invalid choice.[/red]")
                continue

            if action["handler"]() is True:
                return

    # --- Actions ---

    def _action_add(self) -> None:
        self._collect_vehicle(self.form.add_vehicle())

    def _action_edit(self) -> None:
        vehicle = self._pick_vehicle("Edit which vehicle?")
        if vehicle:
            self.form.toggle_vehicle(vehicle.id)
            self._collect_vehicle(vehicle)

    def _action_remove(self) -> None:
        vehicle = self._pick_vehicle("Remove which vehicle?")
        if not vehicle:
            return
        console.print()
        if not Confirm.ask(
            f"  Remove [bold]{vehicle.label}[/bold]? Its technical and contract data will be lost.",
            default=False,
        ):
            console.print("  [dim]Cancelled.[/dim]")
            return
        self.form.remove_vehicle(vehicle.id)
        console.print(success_panel(f"{vehicle.label} removed."))

    def _show_errors(self) -> None:
        ordered = self.form.errors.ordered(self.form.draft)
        if not ordered:
            console.print()
            console.print(error_panel("Add at least one vehicle."))
            return
        path, message = ordered[0]
        console.print()
        console.print(error_panel(
            "Please fix the errors in the form.",
            f"First: {path} - {message}",
        ))
        console.print(create_errors_table(ordered))

    def _action_submit(self, contract_type: ContractType) -> bool:
        """Validate and record the contract. Returns True to end the session."""
        if not self.form.draft.vehicles or not self.form.validate_all():
            self._show_errors()
            return False

        url = database_url_for(self.database_url)
        console.print()
        console.print(f"  Recording [bold]{contract_type.value}[/bold] contract...")

        draft = self.form.draft.model_copy(deep=True)
        try:
            result = asyncio.run(submit_form(self.form, contract_type, url))
        except FleetContractError as e:
            console.print(error_panel(e.message, e.details))
            return False

        print_result(result)
        if result.success and self.save_path:
            # The form is cleared after success; keep what was recorded
            DraftStore.save(draft, self.save_path)
            console.print(f"[dim]  Draft kept in {self.save_path}[/dim]")
        return result.success

    def _action_export(self) -> None:
        try:
            written = self.form.export(export_directory(None))
        except ExportError as e:
            console.print(error_panel(e.message, e.details))
            return
        if written is None:
            self._show_errors()
            return
        console.print()
        console.print(success_panel(f"Spreadsheet written to {written}"))

    def _action_save_draft(self) -> None:
        if self.save_path is None:
            answer = Prompt.ask("  Draft file", default="contract_request.toml")
            self.save_path = Path(answer)
        DraftStore.save(self.form.draft, self.save_path)
        console.print(success_panel(f"Draft saved to {self.save_path}"))

    def _autosave(self) -> None:
        if self.save_path is not None:
            DraftStore.save(self.form.draft, self.save_path)
            logger.debug("Draft saved to %s", self.save_path)
