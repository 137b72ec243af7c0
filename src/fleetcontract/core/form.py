"""Form controller: owns the draft and its error map."""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from fleetcontract.core.derived import parse_int, total_distance_for
from fleetcontract.core.errors import ErrorMap
from fleetcontract.core.export import export_workbook
from fleetcontract.core.orchestrator import ContractSubmitter
from fleetcontract.core.validation import (
    client_field_error,
    validate_draft,
    vehicle_field_error,
)
from fleetcontract.models.catalog import ContractType
from fleetcontract.models.draft import CLIENT_FIELDS, VEHICLE_FIELDS, Draft, VehicleDraft
from fleetcontract.models.results import SubmissionResult

logger = logging.getLogger(__name__)

FIX_ERRORS = "Please fix the errors in the form before saving."
NO_VEHICLES = "Add at least one vehicle."


class ContractForm:
    """Draft editing, validation and submission for one operator session.

    Edits follow two rules. A change only ever clears an existing error for
    that field once the new value is valid; it never adds one. A blur sets or
    clears the field's error. Neither touches other fields.
    """

    def __init__(
        self,
        submitter: Optional[ContractSubmitter] = None,
        clock: Callable[[], date] = date.today,
        reset_delay: float = 0.0,
    ) -> None:
        """Initialize the form.

        Args:
            submitter: Used by submit(); optional for validate/export only use
            clock: Source of "today" for date checks and export names
            reset_delay: Seconds to wait before clearing the form after a
                successful submission (0 clears immediately)
        """
        self.submitter = submitter
        self.clock = clock
        self.reset_delay = reset_delay
        self.draft = Draft()
        self.errors = ErrorMap()
        self.expanded_vehicle_id: Optional[str] = self.draft.vehicles[0].id
        self.last_result: Optional[SubmissionResult] = None
        self._pending: set[ContractType] = set()

    # --- Draft lifecycle ---

    def load(self, draft: Draft) -> None:
        """Replace the draft, e.g. with one read from a file."""
        self.draft = draft
        self.errors.clear()
        self.expanded_vehicle_id = draft.vehicles[0].id if draft.vehicles else None

    def reset(self) -> None:
        """Start over with an empty draft."""
        logger.debug("Form reset")
        self.load(Draft())

    # --- Client fields ---

    def update_client_field(self, name: str, value: str) -> None:
        if name not in CLIENT_FIELDS:
            raise ValueError(f"Unknown client field: {name}")
        setattr(self.draft.client, name, value)
        if self.errors.has(name) and client_field_error(name, value) is None:
            self.errors.discard(name)

    def blur_client_field(self, name: str) -> Optional[str]:
        """Validate one client field and record the result."""
        message = client_field_error(name, getattr(self.draft.client, name))
        self.errors.put(name, message)
        return message

    # --- Vehicles ---

    def _vehicle(self, vehicle_id: str) -> VehicleDraft:
        vehicle = self.draft.get_vehicle(vehicle_id)
        if vehicle is None:
            raise KeyError(vehicle_id)
        return vehicle

    def add_vehicle(self) -> VehicleDraft:
        """Append an empty vehicle and expand it."""
        vehicle = VehicleDraft()
        self.draft.vehicles.append(vehicle)
        self.expanded_vehicle_id = vehicle.id
        return vehicle

    def remove_vehicle(self, vehicle_id: str) -> None:
        """Remove a vehicle and every error recorded for it."""
        vehicle = self._vehicle(vehicle_id)
        self.draft.vehicles.remove(vehicle)
        self.errors.purge_vehicle(vehicle_id)
        if self.expanded_vehicle_id == vehicle_id:
            self.expanded_vehicle_id = None

    def toggle_vehicle(self, vehicle_id: str) -> None:
        """Expand a vehicle, or collapse it if already expanded."""
        self._vehicle(vehicle_id)
        if self.expanded_vehicle_id == vehicle_id:
            self.expanded_vehicle_id = None
        else:
            self.expanded_vehicle_id = vehicle_id

    def update_vehicle_field(self, vehicle_id: str, field: str, value: str) -> None:
        """Set a vehicle field and apply its dependent updates.

        * make: clears model, whose options depend on the make
        * duration_months: recomputes total_distance
        * total_distance: marks the total as set by hand
        """
        if field not in VEHICLE_FIELDS:
            raise ValueError(f"Unknown vehicle field: {field}")
        vehicle = self._vehicle(vehicle_id)

        if field == "vin":
            value = value.upper()

        setattr(vehicle, field, value)

        if field == "make":
            vehicle.model = ""
            self.errors.discard("model", vehicle_id)
        elif field == "duration_months":
            vehicle.total_distance = total_distance_for(value)
            vehicle.total_distance_overridden = False
            self.errors.discard("total_distance", vehicle_id)
        elif field == "total_distance":
            vehicle.total_distance_overridden = True

        if self.errors.has(field, vehicle_id):
            message = vehicle_field_error(field, value, vehicle, today=self.clock())
            if message is None:
                self.errors.discard(field, vehicle_id)

    def blur_vehicle_field(self, vehicle_id: str, field: str) -> Optional[str]:
        """Validate one vehicle field and record the result."""
        vehicle = self._vehicle(vehicle_id)
        message = vehicle_field_error(field, getattr(vehicle, field), vehicle, today=self.clock())
        self.errors.put(field, message, vehicle_id)
        return message

    # --- Whole form ---

    def validate_all(self) -> bool:
        """Validate the whole draft, replacing the error map.

        On failure the first vehicle (in list order) with an error is
        expanded.
        """
        self.errors = validate_draft(self.draft, today=self.clock())
        if not self.errors:
            return True

        with_errors = self.errors.vehicle_ids()
        for vehicle in self.draft.vehicles:
            if vehicle.id in with_errors:
                self.expanded_vehicle_id = vehicle.id
                break
        logger.debug("Validation failed: %d error(s)", len(self.errors))
        return False

    def first_error(self) -> Optional[tuple[str, str]]:
        """(path, message) of the first error on screen, if any."""
        ordered = self.errors.ordered(self.draft)
        return ordered[0] if ordered else None

    def error_paths(self) -> dict[str, str]:
        return self.errors.as_paths(self.draft)

    def summary(self) -> dict:
        """Totals for the summary panel."""
        return {
            "company": self.draft.client.company_name or "New company",
            "vehicles": len(self.draft.vehicles),
            "total_distance": sum(parse_int(v.total_distance) or 0 for v in self.draft.vehicles),
        }

    # --- Outputs ---

    def is_submitting(self, contract_type: ContractType | str) -> bool:
        return ContractType(contract_type) in self._pending

    async def submit(self, contract_type: ContractType | str) -> SubmissionResult:
        """Validate and store the draft as a contract of the given type.

        Only one submission per contract type may be in flight; the other type
        can run at the same time. The submitter works on a copy of the draft
        taken now, so later edits don't leak into the stored records.
        """
        contract_type = ContractType(contract_type)

        if contract_type in self._pending:
            return SubmissionResult.failed(
                f"A {contract_type.value} submission is already in progress"
            )
        if not self.draft.vehicles:
            return SubmissionResult.failed(NO_VEHICLES)
        if not self.validate_all():
            return SubmissionResult.failed(FIX_ERRORS)
        if self.submitter is None:
            return SubmissionResult.failed("No database configured")

        snapshot = self.draft.model_copy(deep=True)
        self._pending.add(contract_type)
        try:
            result = await self.submitter.submit(snapshot, contract_type)
        finally:
            self._pending.discard(contract_type)

        self.last_result = result
        if result.success:
            self._schedule_reset()
        return result

    def _schedule_reset(self) -> None:
        if self.reset_delay <= 0:
            self.reset()
            return
        asyncio.get_running_loop().call_later(self.reset_delay, self.reset)

    def export(self, directory: Path) -> Optional[Path]:
        """Validate and write the spreadsheet.

        Returns:
            Path of the written file, or None if the draft is invalid
        """
        if not self.draft.vehicles or not self.validate_all():
            return None
        return export_workbook(self.draft, directory, today=self.clock())
