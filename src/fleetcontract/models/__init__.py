"""Data models for fleetcontract."""

from fleetcontract.models.catalog import (
    OPERATION_TYPES,
    PROVINCES,
    VEHICLE_MAKES,
    VEHICLE_MODELS,
    ContractStatus,
    ContractType,
    VehicleStatus,
    models_for,
)
from fleetcontract.models.draft import (
    CLIENT_FIELDS,
    VEHICLE_FIELDS,
    ClientDraft,
    Draft,
    VehicleDraft,
)
from fleetcontract.models.results import SubmissionResult
from fleetcontract.models.settings import Settings

__all__ = [
    # Catalog
    "ContractType",
    "ContractStatus",
    "VehicleStatus",
    "PROVINCES",
    "VEHICLE_MAKES",
    "VEHICLE_MODELS",
    "OPERATION_TYPES",
    "models_for",
    # Draft
    "CLIENT_FIELDS",
    "VEHICLE_FIELDS",
    "ClientDraft",
    "VehicleDraft",
    "Draft",
    # Results
    "SubmissionResult",
    # Settings
    "Settings",
]
