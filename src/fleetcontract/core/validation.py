"""Field validation for the contract form.

Two tiers:

* ``validate_client_field`` / ``validate_vehicle_field`` are the rules every
  caller applies: required fields, email shape, VIN length, start date.
* ``check_client_constraint`` / ``check_vehicle_constraint`` hold the limits a
  graphical form would enforce in its widgets (option lists, numeric ranges).
  A command-line form has no such widgets, so ``field_error`` combines both.

All functions are pure. Date checks take ``today`` explicitly; it defaults to
the current date only when omitted.
"""

import re
from datetime import date
from typing import Optional

from fleetcontract.core.derived import parse_int
from fleetcontract.core.errors import ErrorMap
from fleetcontract.models.catalog import (
    OPERATION_TYPES,
    PROVINCES,
    VEHICLE_MAKES,
    models_for,
)
from fleetcontract.models.draft import CLIENT_FIELDS, VEHICLE_FIELDS, Draft, VehicleDraft

REQUIRED = "This field is required"
INVALID_EMAIL = "Please enter a valid email"
PAST_DATE = "The date cannot be in the past"
INVALID_DATE = "Enter a date as YYYY-MM-DD"

VIN_LENGTH = 17
DURATION_RANGE = (1, 60)
YEAR_RANGE = (2000, 2030)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_CLIENT_FIELDS = frozenset({
    "company_name",
    "tax_id",
    "province",
    "address",
    "contact_name",
    "contact_role",
    "contact_phone",
    "contact_email",
})

REQUIRED_VEHICLE_FIELDS = frozenset({
    "make",
    "model",
    "plate",
    "year",
    "odometer",
    "operation_type",
    "monthly_distance",
    "duration_months",
})

# Fields skipped by full-form validation
UNCHECKED_VEHICLE_FIELDS = frozenset({"id", "notes"})

NON_NEGATIVE_FIELDS = ("odometer", "monthly_distance", "total_distance")


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def parse_iso_date(value: str) -> Optional[date]:
    """Parse YYYY-MM-DD, None when malformed."""
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def validate_client_field(name: str, value: str) -> Optional[str]:
    """Error message for a client field, or None when valid."""
    if name in REQUIRED_CLIENT_FIELDS and _blank(value):
        return REQUIRED

    if name in ("contact_email", "company_email"):
        if not _blank(value) and not EMAIL_RE.match(value.strip()):
            return INVALID_EMAIL

    return None


def validate_vehicle_field(
    field: str,
    value: str,
    today: Optional[date] = None,
) -> Optional[str]:
    """Error message for a vehicle field, or None when valid.

    Only looks at the one value. The duration range is not checked here, see
    ``check_vehicle_constraint``.
    """
    if field == "vin":
        if _blank(value):
            return "VIN is required"
        if len(value) != VIN_LENGTH:
            return f"VIN must have {VIN_LENGTH} characters (current: {len(value)})"
        return None

    if field in REQUIRED_VEHICLE_FIELDS and _blank(value):
        return REQUIRED

    if field == "start_date":
        if _blank(value):
            return REQUIRED
        selected = parse_iso_date(value)
        if selected is None:
            return INVALID_DATE
        if selected < (today or date.today()):
            return PAST_DATE

    return None


def check_client_constraint(name: str, value: str) -> Optional[str]:
    """Option-list check for client fields. Blank values pass."""
    if _blank(value):
        return None
    if name == "province" and value not in PROVINCES:
        return "Select a province from the list"
    return None


def _check_range(value: str, low: int, high: int) -> Optional[str]:
    number = parse_int(value)
    if number is None:
        return "Enter a whole number"
    if not low <= number <= high:
        return f"Must be between {low} and {high}"
    return None


def check_vehicle_constraint(
    field: str,
    value: str,
    vehicle: Optional[VehicleDraft] = None,
) -> Optional[str]:
    """Option-list and numeric checks for vehicle fields. Blank values pass.

    ``vehicle`` supplies the make when checking a model.
    """
    if _blank(value):
        return None

    if field == "make" and value not in VEHICLE_MAKES:
        return f"Select one of: {', '.join(VEHICLE_MAKES)}"

    if field == "model":
        make = vehicle.make if vehicle else ""
        if not make:
            return "Select the make first"
        if value not in models_for(make):
            return f"Not a {make} model"

    if field == "operation_type" and value not in OPERATION_TYPES:
        return "Select an operation type from the list"

    if field == "duration_months":
        return _check_range(value, *DURATION_RANGE)

    if field == "year":
        return _check_range(value, *YEAR_RANGE)

    if field in NON_NEGATIVE_FIELDS:
        number = parse_int(value)
        if number is None:
            return "Enter a whole number"
        if number < 0:
            return "Cannot be negative"

    return None


def client_field_error(name: str, value: str) -> Optional[str]:
    """Engine rule first, then the input constraint."""
    return validate_client_field(name, value) or check_client_constraint(name, value)


def vehicle_field_error(
    field: str,
    value: str,
    vehicle: Optional[VehicleDraft] = None,
    today: Optional[date] = None,
) -> Optional[str]:
    """Engine rule first, then the input constraint."""
    return (
        validate_vehicle_field(field, value, today=today)
        or check_vehicle_constraint(field, value, vehicle)
    )


def validate_draft(
    draft: Draft,
    today: Optional[date] = None,
    constraints: bool = True,
) -> ErrorMap:
    """Validate every client field and every vehicle field except id and notes.

    With ``constraints=False`` only the engine rules run.
    """
    today = today or date.today()
    errors = ErrorMap()

    for name in CLIENT_FIELDS:
        value = getattr(draft.client, name)
        if constraints:
            errors.put(name, client_field_error(name, value))
        else:
            errors.put(name, validate_client_field(name, value))

    for vehicle in draft.vehicles:
        for field in VEHICLE_FIELDS:
            if field in UNCHECKED_VEHICLE_FIELDS:
                continue
            value = getattr(vehicle, field)
            if constraints:
                message = vehicle_field_error(field, value, vehicle, today=today)
            else:
                message = validate_vehicle_field(field, value, today=today)
            errors.put(field, message, vehicle.id)

    return errors
