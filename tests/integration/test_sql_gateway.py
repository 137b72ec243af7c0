"""Integration tests for the SQLAlchemy backend on a SQLite file."""

import asyncio
from datetime import date

import pytest
from sqlalchemy import func, inspect, select

from fleetcontract.core.orchestrator import ContractSubmitter
from fleetcontract.exceptions import DuplicateKeyError, GatewayError, RecordNotFoundError
from fleetcontract.gateway.base import Entity
from fleetcontract.gateway.sql import SqlGateway, SqlNumberGenerator
from fleetcontract.gateway.tables import MODELS
from fleetcontract.models import ContractType

TODAY = date(2026, 3, 10)


@pytest.fixture
def sql_gateway(tmp_path):
    gateway = SqlGateway(f"sqlite:///{tmp_path / 'contracts.db'}")
    gateway.create_schema()
    yield gateway
    asyncio.run(gateway.close())


@pytest.fixture
def sql_numbers(sql_gateway):
    return SqlNumberGenerator(sql_gateway, clock=lambda: TODAY)


def _count(gateway, entity):
    with gateway.session() as session:
        return session.scalar(select(func.count()).select_from(MODELS[entity]))


class TestSchema:
    def test_tables_created(self, sql_gateway):
        tables = set(inspect(sql_gateway.engine).get_table_names())
        assert {
            "clientes",
            "responsaveis",
            "viaturas",
            "contratos",
            "contrato_viaturas",
            "contrato_sequencias",
        } <= tables

    def test_create_schema_idempotent(self, sql_gateway):
        sql_gateway.create_schema()

    def test_requires_url_or_engine(self):
        with pytest.raises(ValueError):
            SqlGateway()

    def test_unparseable_url(self):
        with pytest.raises(GatewayError, match="Invalid database URL"):
            SqlGateway("not a url")

    def test_unknown_driver(self):
        with pytest.raises(GatewayError, match="Invalid database URL"):
            SqlGateway("nosuchdriver://x")

    def test_unreachable_file(self, tmp_path):
        gateway = SqlGateway(f"sqlite:///{tmp_path / 'missing' / 'contracts.db'}")
        with pytest.raises(GatewayError, match="Could not open database"):
            gateway.create_schema()
        gateway.engine.dispose()


class TestSqlGateway:
    def test_create_and_find(self, sql_gateway):
        async def scenario():
            created = await sql_gateway.create(
                Entity.CLIENT,
                {"nif": "123", "nome_empresa": "A", "provincia": "Luanda", "morada": "Rua 1"},
            )
            found = await sql_gateway.find_by_key(Entity.CLIENT, "123")
            return created, found

        created, found = asyncio.run(scenario())
        assert created["id"]
        assert found["id"] == created["id"]
        assert found["email_empresa"] is None
        assert found["created_at"] is not None

    def test_find_missing(self, sql_gateway):
        assert asyncio.run(sql_gateway.find_by_key(Entity.VEHICLE, "nope")) is None

    def test_duplicate_key(self, sql_gateway):
        fields = {"nif": "123", "nome_empresa": "A", "provincia": "Luanda", "morada": "Rua 1"}

        async def scenario():
            await sql_gateway.create(Entity.CLIENT, fields)
            await sql_gateway.create(Entity.CLIENT, dict(fields))

        with pytest.raises(DuplicateKeyError):
            asyncio.run(scenario())
        assert _count(sql_gateway, Entity.CLIENT) == 1

    def test_update_and_delete(self, sql_gateway):
        async def scenario():
            client = await sql_gateway.create(
                Entity.CLIENT,
                {"nif": "9", "nome_empresa": "B", "provincia": "Huambo", "morada": "Rua 2"},
            )
            updated = await sql_gateway.update(Entity.CLIENT, client["id"], {"morada": "Rua 3"})
            await sql_gateway.delete(Entity.CLIENT, client["id"])
            return updated

        assert asyncio.run(scenario())["morada"] == "Rua 3"
        assert _count(sql_gateway, Entity.CLIENT) == 0

    def test_update_missing(self, sql_gateway):
        with pytest.raises(RecordNotFoundError):
            asyncio.run(sql_gateway.update(Entity.CLIENT, "missing", {"morada": "x"}))

    def test_delete_missing(self, sql_gateway):
        with pytest.raises(RecordNotFoundError):
            asyncio.run(sql_gateway.delete(Entity.CONTRACT, "missing"))

    def test_driver_errors_become_gateway_errors(self, sql_gateway):
        with pytest.raises(GatewayError):
            # contrato_id and viatura_id are NOT NULL
            asyncio.run(sql_gateway.create(Entity.CONTRACT_VEHICLE, {"km_contrato": 1}))


class TestSqlNumberGenerator:
    def test_sequence_per_type_and_year(self, sql_numbers):
        async def scenario():
            return [
                await sql_numbers.next(ContractType.CM),
                await sql_numbers.next(ContractType.CM),
                await sql_numbers.next(ContractType.APV),
            ]

        assert asyncio.run(scenario()) == ["CM-2026-0001", "CM-2026-0002", "APV-2026-0001"]

    def test_counter_persists(self, sql_gateway, sql_numbers):
        asyncio.run(sql_numbers.next(ContractType.CM))
        again = SqlNumberGenerator(sql_gateway, clock=lambda: TODAY)
        assert asyncio.run(again.next(ContractType.CM)) == "CM-2026-0002"


class TestSubmitAgainstSql:
    def test_full_submission(self, sql_gateway, sql_numbers, make_draft, make_vehicle):
        draft = make_draft(vehicles=[
            make_vehicle(),
            make_vehicle(vin="YV2RT40A5KB654321", duration_months="6", total_distance="40000"),
        ])
        submitter = ContractSubmitter(sql_gateway, sql_numbers)

        result = asyncio.run(submitter.submit(draft, ContractType.CM))

        assert result.success, result.error_message
        assert result.contract_number == "CM-2026-0001"
        assert _count(sql_gateway, Entity.CLIENT) == 1
        assert _count(sql_gateway, Entity.CONTACT) == 1
        assert _count(sql_gateway, Entity.VEHICLE) == 2
        assert _count(sql_gateway, Entity.CONTRACT_VEHICLE) == 2

        contract = asyncio.run(sql_gateway.find_by_key(Entity.CONTRACT, "CM-2026-0001"))
        assert contract["km_total"] == 120000
        assert contract["data_fim"] == date(2027, 3, 10)

    def test_failed_link_rolls_back(self, sql_gateway, sql_numbers, make_draft):
        class BrokenLinks(SqlGateway):
            async def create(self, entity, fields):
                if entity is Entity.CONTRACT_VEHICLE:
                    raise GatewayError("Database error", "link table locked")
                return await super().create(entity, fields)

        broken = BrokenLinks(engine=sql_gateway.engine)
        result = asyncio.run(ContractSubmitter(broken, sql_numbers).submit(make_draft(), "APV"))

        assert not result.success
        assert result.rollback_complete
        assert result.error_message == "Database error: link table locked"
        for entity in Entity:
            assert _count(sql_gateway, entity) == 0
