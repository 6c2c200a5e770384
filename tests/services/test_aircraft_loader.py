"""Tests for loading a single aircraft from a queue."""

from itertools import combinations

from airlift.contracts.enums import Phase
from airlift.contracts.load_plan import PaxAssignment
from airlift.reference.aircraft_profiles import C17_PROFILE, C130_PROFILE
from airlift.services.aircraft_loader import (
    LoadQueue,
    board_passengers,
    load_single_aircraft,
    pax_capacity,
)
from tests.factories import pax, unit_load, vehicle


class TestPassengers:
    def test_capacity_limited_by_seats(self):
        assert pax_capacity(C17_PROFILE, 0, 225) == 102

    def test_capacity_limited_by_payload(self):
        assert pax_capacity(C17_PROFILE, 170_000, 225) == 4
        assert pax_capacity(C17_PROFILE, 171_000, 225) == 0

    def test_board_splits_last_group(self):
        groups = [PaxAssignment(item_id="A", count=60), PaxAssignment(item_id="B", count=60)]
        boarded, waiting = board_passengers(groups, 102)
        assert [(g.item_id, g.count) for g in boarded] == [("A", 60), ("B", 42)]
        assert [(g.item_id, g.count) for g in waiting] == [("B", 18)]

    def test_board_with_no_seats(self):
        groups = [PaxAssignment(item_id="A", count=5)]
        boarded, waiting = board_passengers(groups, 0)
        assert boarded == []
        assert waiting == groups


class TestLoadQueue:
    def test_with_pax_items(self):
        queue = LoadQueue.with_pax_items([], [], [pax("PX1", 12), pax("PX2", 3)])
        assert queue.pax_remaining == 15
        assert queue.has_cargo

    def test_empty(self):
        assert not LoadQueue().has_cargo


class TestLoadSingleAircraft:
    def test_mixed_load(self):
        queue = LoadQueue.with_pax_items(
            [unit_load("P1", 4_000), unit_load("P2", 4_000)],
            [vehicle("V1", weight_lb=12_000)],
            [pax("PX1", 20)],
        )
        outcome = load_single_aircraft(queue, C17_PROFILE, Phase.MAIN, 1, pax_weight_lb=225)
        plan = outcome.plan

        assert plan.aircraft_id == "C-17-MAIN-1"
        assert plan.phase == Phase.MAIN
        assert len(plan.pallets) == 2
        assert len(plan.rolling_stock) == 1
        assert plan.pax_count == 20
        assert plan.pax_weight_lb == 4_500
        assert plan.cargo_weight_lb == 2 * 4_355 + 12_000
        assert plan.total_weight_lb == plan.cargo_weight_lb + 4_500
        assert plan.seats_used == 20
        assert plan.positions_available == 18
        assert outcome.items_loaded == 4
        assert not outcome.remaining.has_cargo

        footprints = [*plan.pallets, *plan.rolling_stock]
        for a, b in combinations(footprints, 2):
            assert not a.overlaps(b)

    def test_overflow_goes_to_remaining(self):
        queue = LoadQueue(pallets=[unit_load(f"P{i}", 2_000) for i in range(7)])
        outcome = load_single_aircraft(queue, C130_PROFILE, Phase.ADVON, 2, pax_weight_lb=225)
        assert outcome.plan.aircraft_id == "C-130-ADVON-2"
        assert outcome.plan.positions_used == 5
        assert len(outcome.remaining.pallets) == 2

    def test_pax_limited_by_cargo_weight(self):
        queue = LoadQueue.with_pax_items(
            [unit_load(f"P{i}", 7_000) for i in range(4)],
            [],
            [pax("PX1", 92)],
        )
        outcome = load_single_aircraft(queue, C130_PROFILE, Phase.MAIN, 1, pax_weight_lb=225)
        plan = outcome.plan
        assert plan.total_weight_lb <= C130_PROFILE.max_payload_lb
        assert plan.pax_count == (42_000 - 4 * 7_355) // 225
        assert outcome.remaining.pax_remaining == 92 - plan.pax_count

    def test_empty_queue_loads_nothing(self):
        outcome = load_single_aircraft(LoadQueue(), C17_PROFILE, Phase.MAIN, 1, pax_weight_lb=225)
        assert outcome.items_loaded == 0
        assert outcome.plan.total_weight_lb == 0
        assert outcome.plan.cob_in_envelope
