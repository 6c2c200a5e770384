"""Tests for cargo manifest contracts."""

import pytest
from pydantic import ValidationError

from airlift.contracts.cargo import CargoItem, ClassifiedItems
from airlift.contracts.enums import CargoCategory, Phase
from tests.factories import loose, pax, prebuilt, vehicle


class TestCargoItem:
    def test_minimal_item(self):
        item = CargoItem(item_id="X1", weight_lb=100, category=CargoCategory.PALLETIZABLE)
        assert item.description == ""
        assert item.advon is False
        assert item.hazmat is False
        assert item.phase == Phase.MAIN

    def test_advon_phase(self):
        assert vehicle("V1", advon=True).phase == Phase.ADVON

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            CargoItem(item_id="X1", weight_lb=-1, category=CargoCategory.PALLETIZABLE)

    def test_zero_pax_count_rejected(self):
        with pytest.raises(ValidationError):
            CargoItem(item_id="P1", weight_lb=0, category=CargoCategory.PAX, pax_count=0)

    def test_items_are_frozen(self):
        item = loose("L1")
        with pytest.raises(ValidationError):
            item.weight_lb = 1

    def test_weapons_detection_from_description(self):
        assert vehicle("V1", description="MJ-1 Bomb Lift Truck LOADER").is_weapons
        assert loose("L1", description="bru-61 bomb rack").is_weapons
        assert not vehicle("V2", description="HMMWV").is_weapons

    def test_serialization_uses_enum_values(self):
        data = prebuilt("PB1").to_json()
        assert data["category"] == "PREBUILT_PALLET"
        assert "pallet_id" not in data
        restored = CargoItem.from_json(data)
        assert restored == prebuilt("PB1")


class TestClassifiedItems:
    def test_from_items_buckets_by_category(self):
        items = [vehicle("V1"), prebuilt("PB1"), loose("L1"), loose("L2"), pax("PX1", 10)]
        classified = ClassifiedItems.from_items(items)
        assert [i.item_id for i in classified.rolling_stock] == ["V1"]
        assert [i.item_id for i in classified.prebuilt_pallets] == ["PB1"]
        assert [i.item_id for i in classified.loose_items] == ["L1", "L2"]
        assert [i.item_id for i in classified.pax_items] == ["PX1"]
        assert len(classified.all_items()) == 5

    def test_split_by_phase(self):
        classified = ClassifiedItems.from_items(
            [vehicle("V1", advon=True), vehicle("V2"), pax("PX1", 4, advon=True)]
        )
        advon, main = classified.split_by_phase()
        assert [i.item_id for i in advon.rolling_stock] == ["V1"]
        assert [i.item_id for i in advon.pax_items] == ["PX1"]
        assert [i.item_id for i in main.rolling_stock] == ["V2"]
        assert main.pax_items == []

    def test_total_pax_defaults_missing_count_to_one(self):
        items = [
            pax("PX1", 10),
            CargoItem(item_id="PX2", weight_lb=0, category=CargoCategory.PAX),
        ]
        assert ClassifiedItems.from_items(items).total_pax == 11

    def test_empty(self):
        assert ClassifiedItems().is_empty
        assert not ClassifiedItems.from_items([loose("L1")]).is_empty
