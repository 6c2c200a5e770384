"""Tests for CG-optimizing vehicle placement."""

from itertools import combinations

import pytest

from airlift.contracts.enums import LateralSide
from airlift.reference.aircraft_profiles import C17_PROFILE, C130_PROFILE
from airlift.services.rolling_stock import (
    ReservedZone,
    _Candidate,
    _select,
    candidate_x_positions,
    lateral_positions,
    place_rolling_stock,
    side_for_offset,
)
from airlift.services.weight_balance import MomentState, mac_percent_to_station, target_bay_x_in
from tests.factories import vehicle


class TestCandidates:
    def test_x_positions_nearest_target_first(self):
        target = target_bay_x_in(C17_PROFILE)
        xs = candidate_x_positions(200, C17_PROFILE)
        assert xs[0] == pytest.approx(target - 100)
        distances = [abs(x + 100 - target) for x in xs]
        assert distances == sorted(distances)
        assert all(0 <= x and x + 200 <= C17_PROFILE.cargo_length_in for x in xs)

    def test_x_positions_respect_start(self):
        xs = candidate_x_positions(100, C130_PROFILE, start_x_in=300)
        assert xs
        assert all(x >= 300 for x in xs)

    def test_item_longer_than_bay(self):
        assert candidate_x_positions(600, C130_PROFILE) == []

    def test_lateral_positions_on_empty_floor(self):
        assert lateral_positions(0, 200, 100, [], C17_PROFILE) == [0.0, -54.0, 54.0]

    def test_lateral_positions_beside_occupied_box(self):
        box = ReservedZone(x_start_in=0, x_end_in=200, y_left_in=-20, y_right_in=20)
        ys = lateral_positions(0, 200, 60, [box], C17_PROFILE)
        assert 0.0 not in ys
        assert ys == [-64.0, 64.0]

    def test_side_for_offset(self):
        assert side_for_offset(0) == LateralSide.CENTER
        assert side_for_offset(-10) == LateralSide.CENTER
        assert side_for_offset(-54) == LateralSide.LEFT
        assert side_for_offset(54) == LateralSide.RIGHT


def _candidate(x_in, score, deviation):
    return _Candidate(x_in=x_in, y_in=0.0, score=score, deviation=deviation, state=MomentState())


class TestSelect:
    def test_improving_beats_lower_scoring_worsening(self):
        worse = _candidate(100, score=0.1, deviation=11)
        better = _candidate(200, score=0.4, deviation=9)
        assert _select([worse, better], current_deviation=10) is better

    def test_best_improving_score_wins(self):
        first = _candidate(100, score=0.4, deviation=9)
        best = _candidate(300, score=0.2, deviation=3)
        assert _select([first, best], current_deviation=10) is best

    def test_equal_improving_scores_keep_first(self):
        first = _candidate(100, score=0.2, deviation=3)
        second = _candidate(300, score=0.2, deviation=3)
        assert _select([first, second], current_deviation=10) is first

    def test_unchanged_deviation_counts_as_improving(self):
        worse = _candidate(100, score=0.1, deviation=10.5)
        flat = _candidate(200, score=0.6, deviation=10 + 1e-12)
        assert _select([worse, flat], current_deviation=10) is flat

    def test_least_bad_when_nothing_improves(self):
        far = _candidate(100, score=0.5, deviation=14)
        near = _candidate(50, score=0.3, deviation=12)
        assert _select([far, near], current_deviation=10) is near

    def test_tie_goes_aft(self):
        fwd = _candidate(50, score=0.3, deviation=12)
        aft = _candidate(300, score=0.3 + 5e-10, deviation=12)
        assert _select([fwd, aft], current_deviation=10) is aft
        assert _select([aft, fwd], current_deviation=10) is aft

    def test_difference_beyond_tolerance_is_not_a_tie(self):
        fwd = _candidate(50, score=0.3, deviation=12)
        aft = _candidate(300, score=0.3 + 1e-6, deviation=12)
        assert _select([fwd, aft], current_deviation=10) is fwd

    def test_no_candidates(self):
        assert _select([], current_deviation=10) is None


class TestPlaceRollingStock:
    def test_single_vehicle_on_target(self):
        result = place_rolling_stock([vehicle("V1")], C17_PROFILE)
        assert len(result.placements) == 1
        placed = result.placements[0]
        assert placed.side == LateralSide.CENTER
        assert placed.y_center_in == 0
        assert result.state.mac_percent(C17_PROFILE) == pytest.approx(28, abs=0.01)

    def test_rejects_oversized(self):
        items = [
            vehicle("WIDE", width_in=300),
            vehicle("TALL", height_in=150),
            vehicle("HEAVY", weight_lb=50_000),
        ]
        result = place_rolling_stock(items, C130_PROFILE)
        assert result.placements == []
        assert {i.item_id for i in result.unplaced} == {"WIDE", "TALL", "HEAVY"}

    def test_rejects_wider_than_ramp(self):
        items = [vehicle("FITS", width_in=140), vehicle("RAMP", width_in=150)]
        result = place_rolling_stock(items, C17_PROFILE)
        assert [p.item.item_id for p in result.placements] == ["FITS"]
        assert [i.item_id for i in result.unplaced] == ["RAMP"]

        result = place_rolling_stock([vehicle("RAMP", width_in=121)], C130_PROFILE)
        assert result.placements == []

    def test_avoids_reserved_zones(self):
        zone = ReservedZone(x_start_in=400, x_end_in=650, y_left_in=-108, y_right_in=108)
        result = place_rolling_stock([vehicle("V1")], C17_PROFILE, reserved_zones=[zone])
        placed = result.placements[0]
        assert placed.x_end_in <= 400 or placed.x_start_in >= 650

    def test_many_vehicles_no_overlap_in_bounds(self):
        items = [vehicle(f"V{i}", weight_lb=8_000 + i * 500, length_in=100, width_in=60) for i in range(8)]
        result = place_rolling_stock(items, C17_PROFILE)
        assert len(result.placements) == 8
        for a, b in combinations(result.placements, 2):
            assert not a.overlaps(b)
        for p in result.placements:
            assert p.x_start_in >= 0 and p.x_end_in <= C17_PROFILE.cargo_length_in
            assert p.y_left_in >= -C17_PROFILE.half_width_in
            assert p.y_right_in <= C17_PROFILE.half_width_in

    def test_heavy_vehicles_stay_off_ramp(self):
        items = [vehicle(f"V{i}", weight_lb=20_000, length_in=250, width_in=100) for i in range(8)]
        result = place_rolling_stock(items, C17_PROFILE)
        for p in result.placements:
            assert p.x_end_in <= C17_PROFILE.ramp_start_in
            assert not p.is_ramp

    def test_cg_stays_in_envelope_for_balanced_load(self):
        items = [vehicle(f"V{i}", weight_lb=6_000, length_in=100, width_in=60) for i in range(6)]
        result = place_rolling_stock(items, C17_PROFILE)
        mac = result.state.mac_percent(C17_PROFILE)
        assert C17_PROFILE.cob_min_percent <= mac <= C17_PROFILE.cob_max_percent

    def test_aft_heavy_load_pulls_vehicle_forward(self):
        aft_station = mac_percent_to_station(38, C17_PROFILE)
        state = MomentState(weight_lb=20_000, moment=20_000 * aft_station)
        result = place_rolling_stock([vehicle("V1")], C17_PROFILE, state=state)
        placed = result.placements[0]
        assert (placed.x_start_in + placed.x_end_in) / 2 < target_bay_x_in(C17_PROFILE)
        mac = result.state.mac_percent(C17_PROFILE)
        assert abs(mac - 28) < 10

    def test_continues_from_existing_state(self):
        state = MomentState(weight_lb=10_000, moment=10_000 * 900, lateral_moment=0)
        result = place_rolling_stock([vehicle("V1")], C17_PROFILE, state=state)
        assert state.weight_lb == 10_000
        assert result.state.weight_lb == 20_000

    def test_weapons_first_when_space_is_short(self):
        items = [
            vehicle("BIG", weight_lb=9_000, length_in=400, width_in=110),
            vehicle("LOADER", weight_lb=5_000, length_in=400, width_in=110, description="MJ-1 Bomb LOADER"),
        ]
        result = place_rolling_stock(items, C130_PROFILE)
        assert [p.item.item_id for p in result.placements] == ["LOADER"]
        assert [i.item_id for i in result.unplaced] == ["BIG"]
