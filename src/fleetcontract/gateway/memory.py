"""In-memory backend, used for dry runs and tests."""

import copy
from datetime import date, datetime
from typing import Callable, Optional
from uuid import uuid4

from fleetcontract.exceptions import DuplicateKeyError, RecordNotFoundError
from fleetcontract.gateway.base import (
    BUSINESS_KEYS,
    Entity,
    IdentifierGenerator,
    PersistenceGateway,
    Record,
    format_contract_number,
)
from fleetcontract.models.catalog import ContractType


class InMemoryGateway(PersistenceGateway):
    """Dict-backed store with the same semantics as the SQL gateway."""

    def __init__(self) -> None:
        self.tables: dict[Entity, dict[str, Record]] = {entity: {} for entity in Entity}

    def rows(self, entity: Entity) -> list[Record]:
        """Copies of all rows of an entity, in insertion order."""
        return [copy.deepcopy(r) for r in self.tables[entity].values()]

    async def find_by_key(self, entity: Entity, key: str) -> Optional[Record]:
        column = BUSINESS_KEYS[entity]
        for record in self.tables[entity].values():
            if record.get(column) == key:
                return copy.deepcopy(record)
        return None

    async def create(self, entity: Entity, fields: Record) -> Record:
        column = BUSINESS_KEYS.get(entity)
        if column and await self.find_by_key(entity, fields.get(column)) is not None:
            raise DuplicateKeyError(entity.value, str(fields.get(column)))

        now = datetime.now()
        record = {"id": str(uuid4()), **copy.deepcopy(fields), "created_at": now}
        if entity is not Entity.CONTRACT_VEHICLE and entity is not Entity.CONTACT:
            record["updated_at"] = now
        self.tables[entity][record["id"]] = record
        return copy.deepcopy(record)

    async def update(self, entity: Entity, record_id: str, fields: Record) -> Record:
        record = self.tables[entity].get(record_id)
        if record is None:
            raise RecordNotFoundError(entity.value, record_id)
        record.update(copy.deepcopy(fields))
        if "updated_at" in record:
            record["updated_at"] = datetime.now()
        return copy.deepcopy(record)

    async def delete(self, entity: Entity, record_id: str) -> None:
        if self.tables[entity].pop(record_id, None) is None:
            raise RecordNotFoundError(entity.value, record_id)


class InMemoryNumberGenerator(IdentifierGenerator):
    """Per-type, per-year counters."""

    def __init__(self, clock: Callable[[], date] = date.today) -> None:
        self._clock = clock
        self._counters: dict[tuple[ContractType, int], int] = {}

    async def next(self, contract_type: ContractType) -> str:
        year = self._clock().year
        key = (contract_type, year)
        self._counters[key] = self._counters.get(key, 0) + 1
        return format_contract_number(contract_type, year, self._counters[key])
