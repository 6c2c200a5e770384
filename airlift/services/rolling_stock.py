"""CG-optimizing placement of vehicles and other rolling stock.

Vehicles are parked on the open floor around the pallets already locked into
their slots. Candidate positions radiate fore and aft of the bay-local X that
corresponds to the envelope target, in 20 in steps. At every candidate X the
free lateral gaps are computed from the boxes already on the floor.

Selection uses an improve-first partition: among candidates that do not move
the CG further from target than it already is, the best score wins; only if
there are none does the least-bad worsening candidate win, ties going aft.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol

from airlift.contracts.aircraft import AircraftProfile
from airlift.contracts.cargo import CargoItem
from airlift.contracts.enums import LateralSide
from airlift.contracts.load_plan import VehiclePlacement
from airlift.reference.aircraft_profiles import LOAD_SPACING_IN
from airlift.services.priority import sort_rolling_stock
from airlift.services.weight_balance import (
    LoadPoint,
    MomentState,
    score_projection,
    target_bay_x_in,
)

logger = logging.getLogger(__name__)

CANDIDATE_STEP_IN = 20
SIDE_THRESHOLD_IN = 10
_EPS = 1e-9


class FloorBox(Protocol):
    x_start_in: float
    x_end_in: float
    y_left_in: float
    y_right_in: float


@dataclass(frozen=True)
class ReservedZone:
    """A rectangle of floor the placer must leave alone."""

    x_start_in: float
    x_end_in: float
    y_left_in: float
    y_right_in: float


@dataclass(frozen=True)
class _Candidate:
    x_in: float
    y_in: float
    score: float
    deviation: float
    state: MomentState


@dataclass
class RollingStockResult:
    placements: list[VehiclePlacement] = field(default_factory=list)
    unplaced: list[CargoItem] = field(default_factory=list)
    next_x_in: float = 0.0
    state: MomentState = field(default_factory=MomentState)


def freeze_zones(boxes: list[FloorBox]) -> list[ReservedZone]:
    """Freeze the floor footprint of already-placed loads."""
    return [ReservedZone(b.x_start_in, b.x_end_in, b.y_left_in, b.y_right_in) for b in boxes]


def side_for_offset(y_center_in: float) -> LateralSide:
    if y_center_in < -SIDE_THRESHOLD_IN:
        return LateralSide.LEFT
    if y_center_in > SIDE_THRESHOLD_IN:
        return LateralSide.RIGHT
    return LateralSide.CENTER


def candidate_x_positions(
    length_in: float, profile: AircraftProfile, start_x_in: float = 0.0
) -> list[float]:
    """In-bounds start positions, nearest to the target X first."""
    target_x = target_bay_x_in(profile)
    max_x = profile.cargo_length_in
    seen: set[float] = set()
    candidates: list[float] = []

    offset = 0.0
    while offset <= max_x:
        for x in (target_x - length_in / 2 + offset, target_x - length_in / 2 - offset):
            if x >= start_x_in and x + length_in <= max_x and x not in seen:
                seen.add(x)
                candidates.append(x)
        offset += CANDIDATE_STEP_IN

    candidates.sort(key=lambda x: abs(x + length_in / 2 - target_x))
    return candidates


def lateral_positions(
    x_start_in: float,
    x_end_in: float,
    width_in: float,
    occupied: list[FloorBox],
    profile: AircraftProfile,
) -> list[float]:
    """Lateral centers to try at one X span: centerline, then left gaps, then right."""
    half_bay = profile.half_width_in
    half_item = width_in / 2
    at_x = [b for b in occupied if b.x_start_in < x_end_in and b.x_end_in > x_start_in]

    if not at_x:
        candidates = [
            0.0,
            -half_bay + half_item + LOAD_SPACING_IN,
            half_bay - half_item - LOAD_SPACING_IN,
        ]
    else:
        gaps: list[tuple[float, float]] = []
        left_edge = -half_bay + LOAD_SPACING_IN
        for box in sorted(at_x, key=lambda b: b.y_left_in):
            right_edge = box.y_left_in - LOAD_SPACING_IN
            if right_edge - left_edge >= width_in:
                gaps.append((left_edge, right_edge))
            left_edge = max(left_edge, box.y_right_in + LOAD_SPACING_IN)
        if half_bay - LOAD_SPACING_IN - left_edge >= width_in:
            gaps.append((left_edge, half_bay - LOAD_SPACING_IN))

        candidates = []
        if any(lo <= -half_item and half_item <= hi for lo, hi in gaps):
            candidates.append(0.0)
        centers = [(lo + hi) / 2 for lo, hi in gaps]
        candidates.extend(c for c in centers if c < 0)
        candidates.extend(c for c in centers if c >= 0)

    unique: list[float] = []
    for y in candidates:
        if y - half_item >= -half_bay and y + half_item <= half_bay and y not in unique:
            unique.append(y)
    return unique


def _collides(x0: float, x1: float, y0: float, y1: float, occupied: list[FloorBox]) -> bool:
    return any(
        x0 < b.x_end_in and x1 > b.x_start_in and y0 < b.y_right_in and y1 > b.y_left_in
        for b in occupied
    )


def _select(candidates: list[_Candidate], current_deviation: float) -> _Candidate | None:
    improving = [c for c in candidates if c.deviation <= current_deviation + _EPS]
    if improving:
        best = improving[0]
        for c in improving[1:]:
            if c.score < best.score:
                best = c
        return best

    best = None
    for c in candidates:
        if best is None or c.score < best.score - _EPS:
            best = c
        elif abs(c.score - best.score) <= _EPS and c.x_in > best.x_in:
            best = c
    return best


def place_rolling_stock(
    items: list[CargoItem],
    profile: AircraftProfile,
    start_x_in: float = 0.0,
    reserved_zones: list[FloorBox] | None = None,
    state: MomentState | None = None,
) -> RollingStockResult:
    """Place vehicles around ``reserved_zones``, carrying the running moment state."""
    running = replace(state) if state is not None else MomentState()
    result = RollingStockResult(next_x_in=start_x_in, state=running)
    occupied: list[FloorBox] = list(reserved_zones or [])
    target = profile.target_cg_percent
    half_bay = profile.half_width_in

    for item in sort_rolling_stock(items):
        if item.width_in > profile.cargo_width_in:
            logger.debug("%s too wide: %.0f in > %.0f in", item.item_id, item.width_in, profile.cargo_width_in)
            result.unplaced.append(item)
            continue
        if item.width_in > profile.ramp_clearance_width_in:
            logger.debug(
                "%s wider than the ramp: %.0f in > %.0f in",
                item.item_id,
                item.width_in,
                profile.ramp_clearance_width_in,
            )
            result.unplaced.append(item)
            continue
        if item.height_in > profile.main_deck_height_in:
            logger.debug("%s too tall: %.0f in > %.0f in", item.item_id, item.height_in, profile.main_deck_height_in)
            result.unplaced.append(item)
            continue
        if running.weight_lb + item.weight_lb > profile.max_payload_lb:
            logger.debug("%s exceeds remaining payload", item.item_id)
            result.unplaced.append(item)
            continue

        current_deviation = abs(running.mac_percent(profile) - target)
        half_item = item.width_in / 2
        candidates: list[_Candidate] = []

        for x in candidate_x_positions(item.length_in, profile, start_x_in):
            x_end = x + item.length_in
            on_ramp = profile.ramp_length_in > 0 and x_end > profile.ramp_start_in
            if on_ramp and item.weight_lb > profile.ramp_position_weight_lb:
                continue
            for y in lateral_positions(x, x_end, item.width_in, occupied, profile):
                y_left, y_right = y - half_item, y + half_item
                if x < 0 or x_end > profile.cargo_length_in or y_left < -half_bay or y_right > half_bay:
                    continue
                if _collides(x, x_end, y_left, y_right, occupied):
                    continue
                projected = running.projected(LoadPoint(item.weight_lb, x, item.length_in, y), profile)
                mac = projected.mac_percent(profile)
                candidates.append(
                    _Candidate(
                        x_in=x,
                        y_in=y,
                        score=score_projection(mac, profile),
                        deviation=abs(mac - target),
                        state=projected,
                    )
                )

        chosen = _select(candidates, current_deviation)
        if chosen is None:
            logger.debug("Could not place %s (%s)", item.item_id, item.description)
            result.unplaced.append(item)
            continue

        x_end = chosen.x_in + item.length_in
        placement = VehiclePlacement(
            item=item,
            x_start_in=chosen.x_in,
            x_end_in=x_end,
            y_center_in=chosen.y_in,
            y_left_in=chosen.y_in - half_item,
            y_right_in=chosen.y_in + half_item,
            side=side_for_offset(chosen.y_in),
            is_ramp=profile.ramp_length_in > 0 and x_end > profile.ramp_start_in,
        )
        occupied.append(placement)
        result.placements.append(placement)
        running.weight_lb = chosen.state.weight_lb
        running.moment = chosen.state.moment
        running.lateral_moment = chosen.state.lateral_moment
        logger.debug(
            "Placed %s at x=%.0f, y=%.0f (%s), projected CG %.1f%% MAC",
            item.item_id,
            chosen.x_in,
            chosen.y_in,
            placement.side,
            running.mac_percent(profile),
        )

    if result.placements:
        result.next_x_in = max(p.x_end_in for p in result.placements)
    return result
