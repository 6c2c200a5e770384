"""Tests for unit load building: prebuilt validation and loose-item build-up."""

from airlift.services.palletization import (
    PalletIdGenerator,
    build_unit_loads,
    palletize_loose_items,
    single_item_rejection,
    validate_prebuilt_pallet,
)
from tests.factories import loose, prebuilt


class TestPalletIdGenerator:
    def test_sequential_ids(self):
        gen = PalletIdGenerator()
        assert [gen.next_id() for _ in range(3)] == ["P-001", "P-002", "P-003"]

    def test_generators_are_independent(self):
        a, b = PalletIdGenerator(), PalletIdGenerator()
        a.next_id()
        assert b.next_id() == "P-001"


class TestPrebuiltPallets:
    def test_valid_pallet(self):
        pallet, errors = validate_prebuilt_pallet(prebuilt("PB1", weight_lb=5_000, height_in=90), PalletIdGenerator())
        assert errors == []
        assert pallet.gross_weight_lb == 5_355
        assert pallet.net_weight_lb == 5_000
        assert pallet.is_prebuilt
        assert pallet.pallet_id == "P-001"

    def test_existing_pallet_id_kept(self):
        item = prebuilt("PB1", pallet_id="TCN-42")
        pallet, _ = validate_prebuilt_pallet(item, PalletIdGenerator())
        assert pallet.pallet_id == "TCN-42"

    def test_too_tall(self):
        pallet, errors = validate_prebuilt_pallet(prebuilt("PB1", height_in=101), PalletIdGenerator())
        assert pallet is None
        assert "Height" in errors[0]

    def test_overweight_at_96_inches(self):
        pallet, errors = validate_prebuilt_pallet(prebuilt("PB1", weight_lb=9_700, height_in=90), PalletIdGenerator())
        assert pallet is None
        assert "10000" in errors[0]

    def test_overweight_above_96_inches(self):
        pallet, errors = validate_prebuilt_pallet(prebuilt("PB1", weight_lb=7_700, height_in=98), PalletIdGenerator())
        assert pallet is None
        assert "8000" in errors[0]


class TestLooseBuildUp:
    def test_single_item_rejection(self):
        assert single_item_rejection(loose("L1")) is None
        assert "footprint" in single_item_rejection(loose("L2", length_in=120, width_in=90))
        assert "height" in single_item_rejection(loose("L3", height_in=110))
        assert "weight" in single_item_rejection(loose("L4", weight_lb=9_700, height_in=20))

    def test_rotated_footprint_fits(self):
        assert single_item_rejection(loose("L1", length_in=80, width_in=100)) is None

    def test_small_items_share_one_pallet(self):
        pallets, leftovers = palletize_loose_items([loose("L1"), loose("L2")], PalletIdGenerator())
        assert leftovers == []
        assert len(pallets) == 1
        assert pallets[0].gross_weight_lb == 1_355
        assert pallets[0].height_in == 40
        assert not pallets[0].is_prebuilt

    def test_footprint_fills_deck_before_new_pallet(self):
        items = [loose(f"L{i}", weight_lb=100, length_in=52, width_in=42, height_in=30) for i in range(5)]
        pallets, leftovers = palletize_loose_items(items, PalletIdGenerator())
        assert leftovers == []
        assert [len(p.items) for p in pallets] == [4, 1]

    def test_weight_splits_pallets(self):
        items = [loose(f"L{i}", weight_lb=4_000, length_in=20, width_in=20, height_in=20) for i in range(3)]
        pallets, _ = palletize_loose_items(items, PalletIdGenerator())
        assert len(pallets) == 2
        assert all(p.gross_weight_lb <= 10_000 for p in pallets)

    def test_tall_build_up_uses_reduced_limit(self):
        items = [
            loose("TALL", weight_lb=4_000, length_in=30, width_in=30, height_in=98),
            loose("LOW", weight_lb=4_000, length_in=30, width_in=30, height_in=20),
        ]
        pallets, _ = palletize_loose_items(items, PalletIdGenerator())
        assert len(pallets) == 2
        for p in pallets:
            limit = 8_000 if p.height_in > 96 else 10_000
            assert p.gross_weight_lb <= limit

    def test_hazmat_flag_propagates(self):
        pallets, _ = palletize_loose_items([loose("L1", hazmat=True), loose("L2")], PalletIdGenerator())
        assert pallets[0].hazmat


class TestBuildUnitLoads:
    def test_every_item_accounted_for_once(self):
        prebuilts = [prebuilt("PB1"), prebuilt("PB2", height_in=101)]
        loose_items = [loose(f"L{i}", weight_lb=900) for i in range(12)] + [
            loose("BIG", length_in=130, width_in=100)
        ]
        result = build_unit_loads(prebuilts, loose_items)

        on_pallets = [i.item_id for p in result.pallets for i in p.items]
        rejected = [i.item_id for i in result.unpalletizable_items]
        all_ids = on_pallets + rejected
        assert sorted(all_ids) == sorted(i.item_id for i in prebuilts + loose_items)
        assert len(all_ids) == len(set(all_ids))
        assert rejected == ["PB2", "BIG"]

    def test_warnings(self):
        result = build_unit_loads(
            [prebuilt("PB1", height_in=101)],
            [loose("BIG", length_in=130, width_in=100)],
        )
        assert result.warnings[0].startswith("Prebuilt pallet PB1:")
        assert result.warnings[1].startswith("Item BIG could not be palletized - footprint")
        assert result.warnings[-1] == "1 items exceed single-item capacity"

    def test_shared_id_generator_keeps_numbering(self):
        gen = PalletIdGenerator()
        build_unit_loads([prebuilt("PB1")], [], gen)
        second = build_unit_loads([prebuilt("PB2")], [], gen)
        assert second.pallets[0].pallet_id == "P-002"

    def test_empty_input(self):
        result = build_unit_loads([], [])
        assert result.total_pallets == 0
        assert result.total_weight_lb == 0
        assert result.warnings == []
