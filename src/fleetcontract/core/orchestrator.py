"""Contract submission.

Turns a validated draft into stored records:

1. find or create the client (new clients also get a primary contact)
2. issue a contract number for the contract type
3. create the contract, dated from the first vehicle's terms
4. find or create each vehicle, point it at the new contract, link it

Calls run one at a time, each awaited before the next. The store offers no
transaction across these writes, so every committed write records an undo
action; when a later step fails the undo actions run newest first.
"""

import logging
from datetime import date
from typing import Awaitable, Callable, Optional

from fleetcontract.core.derived import add_months, parse_int
from fleetcontract.exceptions import FleetContractError
from fleetcontract.gateway.base import Entity, IdentifierGenerator, PersistenceGateway, Record
from fleetcontract.models.catalog import ContractStatus, ContractType, VehicleStatus
from fleetcontract.models.draft import ClientDraft, Draft, VehicleDraft
from fleetcontract.models.results import SubmissionResult

logger = logging.getLogger(__name__)

UndoAction = Callable[[], Awaitable[object]]


def error_text(error: Exception) -> str:
    """Message shown to the operator for a failed step."""
    if isinstance(error, FleetContractError):
        if error.details:
            return f"{error.message}: {error.details}"
        return error.message
    return str(error) or type(error).__name__


def _or_none(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


class UndoLog:
    """Compensating actions for writes already committed."""

    def __init__(self) -> None:
        self._actions: list[tuple[str, UndoAction]] = []

    def __len__(self) -> int:
        return len(self._actions)

    def record(self, description: str, action: UndoAction) -> None:
        self._actions.append((description, action))

    async def rollback(self) -> bool:
        """Run all actions newest first.

        Returns:
            True if every action succeeded
        """
        complete = True
        while self._actions:
            description, action = self._actions.pop()
            try:
                await action()
                logger.info("Rolled back: %s", description)
            except Exception:
                complete = False
                logger.exception("Rollback step failed: %s", description)
        return complete


class ContractSubmitter:
    """Creates a contract and its related records from a draft."""

    def __init__(self, gateway: PersistenceGateway, numbers: IdentifierGenerator) -> None:
        self.gateway = gateway
        self.numbers = numbers

    async def submit(self, draft: Draft, contract_type: ContractType | str) -> SubmissionResult:
        """Store a draft as a new contract.

        Not idempotent: every call creates a new contract and new links,
        reusing clients and vehicles found by tax id and VIN.

        Args:
            draft: A draft that already passed full validation
            contract_type: CM or APV

        Returns:
            SubmissionResult; failures never raise
        """
        try:
            contract_type = ContractType(contract_type)
        except ValueError:
            return SubmissionResult.failed(f"Unknown contract type: {contract_type}")

        if not draft.vehicles:
            return SubmissionResult.failed("At least one vehicle is required")

        logger.info(
            "Submitting %s contract: nif=%s vehicles=%d",
            contract_type.value,
            draft.client.tax_id,
            len(draft.vehicles),
        )
        undo = UndoLog()

        try:
            client = await self._resolve_client(draft.client, undo)

            number = await self.numbers.next(contract_type)
            logger.info("Issued contract number %s", number)

            contract = await self._create_contract(draft, contract_type, number, client, undo)

            for vehicle in draft.vehicles:
                await self._attach_vehicle(vehicle, client, contract, undo)

        except Exception as e:
            logger.exception("Submission of %s contract failed", contract_type.value)
            complete = await undo.rollback()
            if not complete:
                logger.error("Rollback incomplete; stored data may be partial")
            return SubmissionResult.failed(error_text(e), rollback_complete=complete)

        logger.info("Contract %s created with %d vehicle(s)", number, len(draft.vehicles))
        return SubmissionResult(
            success=True,
            contract_number=number,
            contract_id=contract["id"],
            message=f"Contract {contract_type.value} {number} created!",
        )

    # ─────────────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────────────

    async def _resolve_client(self, client: ClientDraft, undo: UndoLog) -> Record:
        """Find the client by tax id, or create it with a primary contact.

        An existing client is reused as stored, even if the draft differs.
        """
        existing = await self.gateway.find_by_key(Entity.CLIENT, client.tax_id)
        if existing is not None:
            logger.debug("Reusing client %s (nif=%s)", existing["id"], client.tax_id)
            return existing

        record = await self.gateway.create(
            Entity.CLIENT,
            {
                "nif": client.tax_id,
                "nome_empresa": client.company_name,
                "provincia": client.province,
                "morada": client.address,
                "email_empresa": _or_none(client.company_email),
            },
        )
        undo.record(f"client {record['id']}", self._deleter(Entity.CLIENT, record["id"]))
        logger.debug("Created client %s", record["id"])

        contact = await self.gateway.create(
            Entity.CONTACT,
            {
                "cliente_id": record["id"],
                "nome": client.contact_name,
                "cargo": _or_none(client.contact_role),
                "email": client.contact_email,
                "telefone": _or_none(client.contact_phone),
                "is_primary": True,
            },
        )
        undo.record(f"contact {contact['id']}", self._deleter(Entity.CONTACT, contact["id"]))
        return record

    async def _create_contract(
        self,
        draft: Draft,
        contract_type: ContractType,
        number: str,
        client: Record,
        undo: UndoLog,
    ) -> Record:
        """Create the contract row.

        Only the first vehicle's start date and duration set the contract
        window. km_total is the sum over all vehicles.
        """
        first = draft.vehicles[0]
        start = date.fromisoformat(first.start_date.strip())
        months = int(first.duration_months.strip())
        end = add_months(start, months)
        km_total = sum(parse_int(v.total_distance) or 0 for v in draft.vehicles)

        record = await self.gateway.create(
            Entity.CONTRACT,
            {
                "numero_contrato": number,
                "tipo": contract_type.value,
                "cliente_id": client["id"],
                "data_inicio": start,
                "data_fim": end,
                "duracao_meses": months,
                "km_total": km_total,
                "status": ContractStatus.ACTIVE.value,
            },
        )
        undo.record(f"contract {number}", self._deleter(Entity.CONTRACT, record["id"]))
        logger.debug("Created contract %s: %s → %s, %d km", number, start, end, km_total)
        return record

    async def _attach_vehicle(
        self,
        vehicle: VehicleDraft,
        client: Record,
        contract: Record,
        undo: UndoLog,
    ) -> None:
        """Find or create a vehicle by VIN and link it to the contract.

        A vehicle already on file only has its active contract moved; its
        other fields are left as stored.
        """
        existing = await self.gateway.find_by_key(Entity.VEHICLE, vehicle.vin)

        if existing is None:
            record = await self.gateway.create(
                Entity.VEHICLE,
                {
                    "cliente_id": client["id"],
                    "vin": vehicle.vin,
                    "matricula": vehicle.plate,
                    "marca": vehicle.make,
                    "modelo": vehicle.model,
                    "ano_fabrico": parse_int(vehicle.year),
                    "tipo_operacao": vehicle.operation_type,
                    "km_atual": parse_int(vehicle.odometer),
                    "km_mensal_estimado": parse_int(vehicle.monthly_distance),
                    "contrato_ativo_id": contract["id"],
                    "status": VehicleStatus.ACTIVE.value,
                },
            )
            undo.record(f"vehicle {vehicle.vin}", self._deleter(Entity.VEHICLE, record["id"]))
            logger.debug("Created vehicle %s", vehicle.vin)
        else:
            previous = existing.get("contrato_ativo_id")
            record = await self.gateway.update(
                Entity.VEHICLE,
                existing["id"],
                {"contrato_ativo_id": contract["id"]},
            )
            undo.record(
                f"active contract of vehicle {vehicle.vin}",
                self._updater(Entity.VEHICLE, existing["id"], {"contrato_ativo_id": previous}),
            )
            logger.debug("Vehicle %s moved to contract %s", vehicle.vin, contract["id"])

        link = await self.gateway.create(
            Entity.CONTRACT_VEHICLE,
            {
                "contrato_id": contract["id"],
                "viatura_id": record["id"],
                "km_contrato": parse_int(vehicle.total_distance) or 0,
            },
        )
        undo.record(f"link {link['id']}", self._deleter(Entity.CONTRACT_VEHICLE, link["id"]))

    def _deleter(self, entity: Entity, record_id: str) -> UndoAction:
        return lambda: self.gateway.delete(entity, record_id)

    def _updater(self, entity: Entity, record_id: str, fields: Record) -> UndoAction:
        return lambda: self.gateway.update(entity, record_id, fields)
