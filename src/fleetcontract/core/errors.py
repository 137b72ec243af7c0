"""Error map for the contract form.

Vehicle errors are keyed by the vehicle's draft id, not by its position, so
removing or reordering vehicles never moves a message onto another vehicle.
Positional paths (``vehicles.<index>.<field>``) are only rendered on demand.
"""

from typing import Iterator, NamedTuple, Optional

from fleetcontract.models.draft import CLIENT_FIELDS, VEHICLE_FIELDS, Draft


class FieldKey(NamedTuple):
    """Address of one form field. ``vehicle_id`` is None for client fields."""

    vehicle_id: Optional[str]
    field: str


class ErrorMap:
    """Mapping of field keys to error messages."""

    def __init__(self) -> None:
        self._errors: dict[FieldKey, str] = {}

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __contains__(self, key: object) -> bool:
        return key in self._errors

    def __iter__(self) -> Iterator[FieldKey]:
        return iter(self._errors)

    def items(self):
        return self._errors.items()

    def get(self, field: str, vehicle_id: Optional[str] = None) -> Optional[str]:
        """Message for a field, or None."""
        return self._errors.get(FieldKey(vehicle_id, field))

    def has(self, field: str, vehicle_id: Optional[str] = None) -> bool:
        return FieldKey(vehicle_id, field) in self._errors

    def put(self, field: str, message: Optional[str], vehicle_id: Optional[str] = None) -> None:
        """Set the message for a field; a None message clears it."""
        key = FieldKey(vehicle_id, field)
        if message:
            self._errors[key] = message
        else:
            self._errors.pop(key, None)

    def discard(self, field: str, vehicle_id: Optional[str] = None) -> None:
        self._errors.pop(FieldKey(vehicle_id, field), None)

    def purge_vehicle(self, vehicle_id: str) -> int:
        """Drop every entry of one vehicle. Returns how many were dropped."""
        stale = [key for key in self._errors if key.vehicle_id == vehicle_id]
        for key in stale:
            del self._errors[key]
        return len(stale)

    def clear(self) -> None:
        self._errors.clear()

    def vehicle_ids(self) -> set[str]:
        """Ids of vehicles with at least one error."""
        return {key.vehicle_id for key in self._errors if key.vehicle_id is not None}

    def ordered(self, draft: Draft) -> list[tuple[str, str]]:
        """(path, message) pairs in on-screen order.

        Client fields come first in form order, then each vehicle in list
        order. Entries of vehicles no longer in the draft are skipped.
        """
        result = []
        for field in CLIENT_FIELDS:
            message = self.get(field)
            if message:
                result.append((field, message))
        for index, vehicle in enumerate(draft.vehicles):
            for field in VEHICLE_FIELDS:
                message = self.get(field, vehicle.id)
                if message:
                    result.append((f"vehicles.{index}.{field}", message))
        return result

    def as_paths(self, draft: Draft) -> dict[str, str]:
        """Render the map with positional paths for the current vehicle order."""
        return dict(self.ordered(draft))
