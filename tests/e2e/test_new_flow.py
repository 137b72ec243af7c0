"""E2E test: interactive form → contract recorded, draft kept."""

import asyncio
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from fleetcontract.cli.app import app
from fleetcontract.core.config import DATABASE_URL_ENV, SettingsManager
from fleetcontract.core.drafts import DraftStore
from fleetcontract.gateway.base import Entity
from fleetcontract.gateway.sql import SqlGateway

runner = CliRunner()

CLIENT_INPUT = [
    "Transportes Kwanza Lda",  # company name
    "5417000001",              # NIF
    "1",                       # province: Luanda
    "Rua Direita 12",          # address
    "",                        # general email (optional)
    "Ana Silva",               # contact name
    "Fleet manager",           # contact role
    "ana@kwanza",              # contact email (rejected)
    "ana@kwanza.co.ao",        # contact email
    "+244923000000",           # contact phone
]

VEHICLE_INPUT = [
    "1",                       # make: Volvo
    "4",                       # model: Volvo FH 460
    "LD-12-34-AB",             # plate
    "yv2rt40a5kb12",           # VIN (too short)
    "yv2rt40a5kb123456",       # VIN
    "2021",                    # year
    "125000",                  # current km
    "6000",                    # km per month
    "3",                       # operation type: Mineração
    "6",                       # duration
    "",                        # total km: accept 40000
    "2099-01-02",              # start date
    "",                        # notes
]


def _input(*steps):
    return "\n".join(steps) + "\n"


@pytest.fixture
def isolated(tmp_path, mock_keyring, monkeypatch):
    monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
    manager = SettingsManager(config_dir=tmp_path / ".config" / "fleetcontract")
    with (
        patch("fleetcontract.cli.commands.submit.SettingsManager", return_value=manager),
        patch("fleetcontract.cli.commands.export.SettingsManager", return_value=manager),
    ):
        yield manager


class TestNewFlow:
    def test_fill_and_record_cm(self, isolated, tmp_path):
        db_url = f"sqlite:///{tmp_path / 'contracts.db'}"
        save = tmp_path / "request.toml"
        user_input = _input(*CLIENT_INPUT, *VEHICLE_INPUT, "n", "c")

        result = runner.invoke(
            app, ["new", "--save", str(save), "--database-url", db_url], input=user_input
        )

        assert result.exit_code == 0, result.output
        assert "Please enter a valid email" in result.output
        assert "VIN must have 17 characters (current: 13)" in result.output
        assert "created!" in result.output

        gateway = SqlGateway(db_url)
        client = asyncio.run(gateway.find_by_key(Entity.CLIENT, "5417000001"))
        vehicle = asyncio.run(gateway.find_by_key(Entity.VEHICLE, "YV2RT40A5KB123456"))
        asyncio.run(gateway.close())
        assert client["provincia"] == "Luanda"
        assert vehicle["modelo"] == "Volvo FH 460"
        assert vehicle["tipo_operacao"] == "Mineração"

        kept = DraftStore.load(save)
        assert kept.client.company_name == "Transportes Kwanza Lda"
        assert kept.vehicles[0].total_distance == "40000"

    def test_export_then_quit(self, isolated, tmp_path):
        save = tmp_path / "request.toml"
        isolated.save(isolated.load().model_copy(update={"export_dir": tmp_path / "xlsx"}))
        user_input = _input(*CLIENT_INPUT, *VEHICLE_INPUT, "n", "s", "q")

        result = runner.invoke(app, ["new", "--save", str(save)], input=user_input)

        assert result.exit_code == 0, result.output
        assert "Spreadsheet written" in result.output
        assert len(list((tmp_path / "xlsx").glob("contract_request_*.xlsx"))) == 1
        assert DraftStore.load(save).client.tax_id == "5417000001"

    def test_remove_vehicle_then_submit_rejected(self, isolated, tmp_path):
        user_input = _input(*CLIENT_INPUT, *VEHICLE_INPUT, "n", "x", "y", "c", "q")

        result = runner.invoke(app, ["new", "--database-url", "memory://"], input=user_input)

        assert result.exit_code == 0, result.output
        assert "removed." in result.output
        assert "Add at least one vehicle." in result.output
        assert "created!" not in result.output


class TestNewFlowDatabaseErrors:
    """The session survives a database that cannot be opened; quitting keeps the draft."""

    def _run(self, tmp_path, url):
        save = tmp_path / "request.toml"
        user_input = _input(*CLIENT_INPUT, *VEHICLE_INPUT, "n", "c", "q")
        result = runner.invoke(
            app, ["new", "--save", str(save), "--database-url", url], input=user_input
        )
        return result, save

    def test_unparseable_url(self, isolated, tmp_path):
        result, save = self._run(tmp_path, "not a url")

        assert result.exit_code == 0, result.output
        assert "Invalid database URL" in result.output
        assert "Goodbye!" in result.output
        assert DraftStore.load(save).client.tax_id == "5417000001"

    def test_unreachable_sqlite_file(self, isolated, tmp_path):
        url = f"sqlite:///{tmp_path / 'missing' / 'contracts.db'}"
        result, save = self._run(tmp_path, url)

        assert result.exit_code == 0, result.output
        assert "Could not open database" in result.output
        kept = DraftStore.load(save)
        assert kept.vehicles[0].vin == "YV2RT40A5KB123456"
        assert kept.vehicles[0].start_date == "2099-01-02"
