"""Persistence gateways and contract number generators."""

from fleetcontract.gateway.base import (
    Entity,
    IdentifierGenerator,
    PersistenceGateway,
    Record,
)
from fleetcontract.gateway.registry import MEMORY_URL, open_backend

__all__ = [
    "Entity",
    "IdentifierGenerator",
    "PersistenceGateway",
    "Record",
    "MEMORY_URL",
    "open_backend",
]
