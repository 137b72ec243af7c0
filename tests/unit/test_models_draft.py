"""Tests for draft, result and catalog models."""

import pytest

from fleetcontract.models import (
    VEHICLE_MAKES,
    ClientDraft,
    ContractType,
    Draft,
    SubmissionResult,
    VehicleDraft,
    models_for,
)


class TestVehicleDraft:
    def test_defaults(self):
        vehicle = VehicleDraft()
        assert vehicle.vin == ""
        assert vehicle.total_distance_overridden is False
        assert vehicle.id

    def test_ids_differ(self):
        assert VehicleDraft().id != VehicleDraft().id

    def test_label(self):
        assert VehicleDraft().label == "New vehicle"
        assert VehicleDraft(make="Volvo", plate="LD-12-34-AB").label == "Volvo LD-12-34-AB"
        assert VehicleDraft(make="Volvo", vin="YV2RT40A5KB123456").label == "Volvo YV2RT40A5KB123456"

    def test_vin_normalized(self):
        assert VehicleDraft(vin=" yv2rt40a5kb123456 ").vin == "YV2RT40A5KB123456"
        assert VehicleDraft.model_validate({"vin": "yv2rt40a5kb123456"}).vin == "YV2RT40A5KB123456"


class TestDraft:
    def test_starts_with_one_vehicle(self):
        assert len(Draft().vehicles) == 1

    def test_get_vehicle(self):
        a, b = VehicleDraft(), VehicleDraft()
        draft = Draft(vehicles=[a, b])
        assert draft.get_vehicle(b.id) is b
        assert draft.get_vehicle("missing") is None

    def test_index_of(self):
        a, b = VehicleDraft(), VehicleDraft()
        draft = Draft(vehicles=[a, b])
        assert draft.index_of(b.id) == 1
        assert draft.index_of("missing") == -1

    def test_json_round_trip_keeps_ids(self):
        draft = Draft(client=ClientDraft(tax_id="123"))
        restored = Draft.model_validate(draft.model_dump(mode="json"))
        assert restored == draft


class TestSubmissionResult:
    def test_failed(self):
        result = SubmissionResult.failed("boom", rollback_complete=False)
        assert result.success is False
        assert result.contract_number is None
        assert result.rollback_complete is False
        assert result.banner == "Failed to create contract: boom"

    def test_success_banner(self):
        result = SubmissionResult(
            success=True,
            contract_number="APV-2026-0003",
            message="Contract APV APV-2026-0003 created!",
        )
        assert result.banner == "Contract APV APV-2026-0003 created! (ID: APV-2026-0003)"


class TestCatalog:
    def test_contract_types(self):
        assert ContractType("CM") is ContractType.CM
        assert [t.value for t in ContractType] == ["CM", "APV"]

    def test_makes(self):
        assert VEHICLE_MAKES == ["Volvo", "Dongfeng"]

    def test_models_for(self):
        assert "Volvo FH 460" in models_for("Volvo")
        assert models_for("Scania") == []

    def test_models_for_returns_copy(self):
        models_for("Volvo").clear()
        assert models_for("Volvo")

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            ContractType("XYZ")
