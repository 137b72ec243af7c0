"""Draft form models.

Every field is kept as the raw string the operator typed. Checking values is
the job of ``fleetcontract.core.validation``, so a draft can always hold an
invalid or half-filled form.
"""

from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

CLIENT_FIELDS = (
    "company_name",
    "tax_id",
    "province",
    "address",
    "contact_name",
    "contact_role",
    "contact_email",
    "contact_phone",
    "company_email",
)

VEHICLE_FIELDS = (
    "make",
    "model",
    "vin",
    "plate",
    "year",
    "odometer",
    "monthly_distance",
    "operation_type",
    "duration_months",
    "total_distance",
    "start_date",
    "notes",
)


def new_vehicle_id() -> str:
    """Generate a stable id for a draft vehicle."""
    return str(uuid4())


class ClientDraft(BaseModel):
    """Client company and its primary contact."""

    company_name: str = ""
    tax_id: str = Field(default="", description="NIF, unique per client")
    province: str = ""
    address: str = ""
    contact_name: str = ""
    contact_role: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    company_email: str = Field(default="", description="Optional general email")


class VehicleDraft(BaseModel):
    """One vehicle plus its contract terms."""

    id: str = Field(default_factory=new_vehicle_id)

    # Vehicle specs
    make: str = ""
    model: str = ""
    vin: str = ""
    plate: str = ""
    year: str = ""
    odometer: str = Field(default="", description="Current odometer (km)")
    monthly_distance: str = Field(default="", description="Estimated km per month")
    operation_type: str = ""

    # Contract terms
    duration_months: str = ""
    total_distance: str = Field(default="", description="Contracted km for the term")
    start_date: str = Field(default="", description="ISO date, YYYY-MM-DD")
    notes: str = ""

    total_distance_overridden: bool = False

    @field_validator("vin")
    @classmethod
    def normalize_vin(cls, v: str) -> str:
        """VINs are stored uppercase, as the form enters them."""
        return v.strip().upper()

    @property
    def label(self) -> str:
        """Short description for lists and prompts."""
        parts = [p for p in (self.make, self.plate or self.vin) if p]
        return " ".join(parts) or "New vehicle"


class Draft(BaseModel):
    """The whole contract request form."""

    client: ClientDraft = Field(default_factory=ClientDraft)
    vehicles: list[VehicleDraft] = Field(default_factory=lambda: [VehicleDraft()])

    def get_vehicle(self, vehicle_id: str) -> VehicleDraft | None:
        """Find a vehicle by its draft id."""
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def index_of(self, vehicle_id: str) -> int:
        """Current position of a vehicle, -1 if absent."""
        for i, vehicle in enumerate(self.vehicles):
            if vehicle.id == vehicle_id:
                return i
        return -1
