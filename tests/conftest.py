"""Shared test fixtures for fleetcontract."""

from datetime import date

import pytest

from fleetcontract.gateway.memory import InMemoryGateway, InMemoryNumberGenerator
from fleetcontract.models import ClientDraft, Draft, VehicleDraft

TODAY = date(2026, 3, 10)

VALID_VEHICLE = {
    "make": "Volvo",
    "model": "Volvo FH 460",
    "vin": "YV2RT40A5KB123456",
    "plate": "LD-12-34-AB",
    "year": "2021",
    "odometer": "125000",
    "monthly_distance": "6000",
    "operation_type": "Mineração",
    "duration_months": "12",
    "total_distance": "80000",
    "start_date": TODAY.isoformat(),
    "notes": "",
}

VALID_CLIENT = {
    "company_name": "Transportes Kwanza Lda",
    "tax_id": "5417000001",
    "province": "Luanda",
    "address": "Rua Direita 12, Luanda",
    "contact_name": "Ana Silva",
    "contact_role": "Fleet manager",
    "contact_email": "ana@kwanza.co.ao",
    "contact_phone": "+244923000000",
    "company_email": "",
}


@pytest.fixture
def today():
    """Fixed "today" used by validation and numbering in tests."""
    return TODAY


@pytest.fixture
def make_vehicle():
    """Factory for a fully valid vehicle draft, with overrides."""

    def _make(**overrides) -> VehicleDraft:
        return VehicleDraft(**{**VALID_VEHICLE, **overrides})

    return _make


@pytest.fixture
def make_draft(make_vehicle):
    """Factory for a fully valid draft; keyword overrides apply to the client."""

    def _make(vehicles=None, **client_overrides) -> Draft:
        return Draft(
            client=ClientDraft(**{**VALID_CLIENT, **client_overrides}),
            vehicles=vehicles if vehicles is not None else [make_vehicle()],
        )

    return _make


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def numbers():
    return InMemoryNumberGenerator(clock=lambda: TODAY)


@pytest.fixture
def temp_config_dir(tmp_path):
    """Provide isolated config directory for tests."""
    config_dir = tmp_path / ".config" / "fleetcontract"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def mock_keyring(monkeypatch):
    """Mock keyring for credential tests."""
    storage = {}

    def mock_get(service, key):
        return storage.get(f"{service}:{key}")

    def mock_set(service, key, value):
        storage[f"{service}:{key}"] = value

    def mock_delete(service, key):
        k = f"{service}:{key}"
        if k not in storage:
            from keyring.errors import PasswordDeleteError
            raise PasswordDeleteError(f"No password for {key}")
        storage.pop(k)

    monkeypatch.setattr("keyring.get_password", mock_get)
    monkeypatch.setattr("keyring.set_password", mock_set)
    monkeypatch.setattr("keyring.delete_password", mock_delete)

    return storage
