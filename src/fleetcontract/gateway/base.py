"""Abstract persistence gateway and contract number generator."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from fleetcontract.models.catalog import ContractType

Record = dict[str, Any]


class Entity(str, Enum):
    """Stored entities, valued by their table name."""

    CLIENT = "clientes"
    CONTACT = "responsaveis"
    VEHICLE = "viaturas"
    CONTRACT = "contratos"
    CONTRACT_VEHICLE = "contrato_viaturas"


# Business key column per entity that supports find_by_key
BUSINESS_KEYS: dict[Entity, str] = {
    Entity.CLIENT: "nif",
    Entity.VEHICLE: "vin",
    Entity.CONTRACT: "numero_contrato",
}


def business_key(entity: Entity) -> str:
    """Key column for an entity.

    Raises:
        ValueError: If the entity has no business key
    """
    try:
        return BUSINESS_KEYS[entity]
    except KeyError:
        raise ValueError(f"{entity.value} has no business key") from None


class PersistenceGateway(ABC):
    """Row-level access to the backing store.

    Every record carries a generated ``id``. Lookups by business key return
    None when nothing matches; every other failure raises ``GatewayError``.
    """

    @abstractmethod
    async def find_by_key(self, entity: Entity, key: str) -> Optional[Record]:
        """Find a record by its business key.

        Returns:
            The record, or None if no record has that key

        Raises:
            GatewayError: If the store could not be queried
        """
        ...

    @abstractmethod
    async def create(self, entity: Entity, fields: Record) -> Record:
        """Insert a record and return it with its generated id.

        Raises:
            DuplicateKeyError: If the business key is already taken
            GatewayError: If the insert fails
        """
        ...

    @abstractmethod
    async def update(self, entity: Entity, record_id: str, fields: Record) -> Record:
        """Update some fields of a record and return the stored record.

        Raises:
            RecordNotFoundError: If no record has that id
            GatewayError: If the update fails
        """
        ...

    @abstractmethod
    async def delete(self, entity: Entity, record_id: str) -> None:
        """Delete a record.

        Raises:
            RecordNotFoundError: If no record has that id
            GatewayError: If the delete fails
        """
        ...

    async def close(self) -> None:
        """Release connections. Default does nothing."""


class IdentifierGenerator(ABC):
    """Source of contract numbers."""

    @abstractmethod
    async def next(self, contract_type: ContractType) -> str:
        """Return a contract number never issued before for this type.

        Raises:
            IdentifierGenerationError: If no number could be issued
        """
        ...


def format_contract_number(contract_type: ContractType, year: int, sequence: int) -> str:
    """Contract number layout, e.g. ``CM-2026-0007``."""
    return f"{contract_type.value}-{year}-{sequence:04d}"
