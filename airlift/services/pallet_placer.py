"""CG-aware pallet placement on a discrete row x lane grid.

Each pallet, weapons first and then heaviest first, goes to the free slot
whose projected CG lands closest to the envelope target. With more than one
lane a small lateral term steers pallets toward the lane that keeps the
aircraft balanced side to side.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace

from airlift.contracts.aircraft import AircraftProfile
from airlift.contracts.cargo import UnitLoad
from airlift.contracts.load_plan import PalletPlacement
from airlift.reference.aircraft_profiles import LOAD_SPACING_IN, PALLET_463L
from airlift.services.priority import sort_pallets
from airlift.services.weight_balance import LoadPoint, MomentState, score_projection

logger = logging.getLogger(__name__)

LATERAL_TIE_BREAK_WEIGHT = 0.01


@dataclass(frozen=True)
class PalletSlot:
    """One grid position. ``index`` is 0-based in row-major order."""

    index: int
    row: int
    lane_name: str
    x_start_in: float
    x_end_in: float
    y_center_in: float
    y_left_in: float
    y_right_in: float
    is_ramp: bool
    weight_limit_lb: float


@dataclass
class PalletPlacementResult:
    placements: list[PalletPlacement] = field(default_factory=list)
    unplaced: list[UnitLoad] = field(default_factory=list)
    next_x_in: float = 0.0
    state: MomentState = field(default_factory=MomentState)
    slots_available: int = 0


def slot_pitch_in(profile: AircraftProfile) -> float:
    return PALLET_463L.length_along_axis(profile.pallet_orientation) + LOAD_SPACING_IN


def build_slot_grid(profile: AircraftProfile, start_x_in: float = 0.0) -> list[PalletSlot]:
    """All slots from ``start_x_in`` aft, capped at the profile's position count."""
    along = PALLET_463L.length_along_axis(profile.pallet_orientation)
    across = PALLET_463L.width_across_axis(profile.pallet_orientation)
    pitch = slot_pitch_in(profile)
    rows = math.floor((profile.cargo_length_in - start_x_in) / pitch)

    slots: list[PalletSlot] = []
    for row in range(max(rows, 0)):
        x_start = start_x_in + row * pitch
        is_ramp = profile.ramp_length_in > 0 and x_start >= profile.ramp_start_in
        for lane in profile.lanes:
            if len(slots) >= profile.pallet_positions:
                return slots
            slots.append(
                PalletSlot(
                    index=len(slots),
                    row=row,
                    lane_name=lane.name,
                    x_start_in=x_start,
                    x_end_in=x_start + along,
                    y_center_in=lane.y_center_in,
                    y_left_in=lane.y_center_in - across / 2,
                    y_right_in=lane.y_center_in + across / 2,
                    is_ramp=is_ramp,
                    weight_limit_lb=(
                        profile.ramp_position_weight_lb if is_ramp else profile.per_position_weight_lb
                    ),
                )
            )
    return slots


def _slot_accepts(slot: PalletSlot, pallet: UnitLoad, profile: AircraftProfile) -> bool:
    if pallet.gross_weight_lb > slot.weight_limit_lb:
        return False
    if slot.is_ramp and pallet.height_in > profile.ramp_clearance_height_in:
        return False
    return True


def place_pallets(
    pallets: list[UnitLoad],
    profile: AircraftProfile,
    start_x_in: float = 0.0,
    state: MomentState | None = None,
) -> PalletPlacementResult:
    """Assign pallets to grid slots, updating a copy of the running moment state.

    Pallets that fit no slot (position ceiling, ramp clearance) or would push
    the aircraft past max payload come back in ``unplaced``.
    """
    running = replace(state) if state is not None else MomentState()
    slots = build_slot_grid(profile, start_x_in)
    result = PalletPlacementResult(next_x_in=start_x_in, state=running, slots_available=len(slots))

    if not pallets:
        return result
    if not slots:
        result.unplaced.extend(pallets)
        return result

    along = PALLET_463L.length_along_axis(profile.pallet_orientation)
    multi_lane = len(profile.lanes) > 1
    used: set[int] = set()

    logger.debug(
        "%s: placing %d pallets on %d slots, current CG %.1f%% MAC, target %.1f%% MAC",
        profile.aircraft_type,
        len(pallets),
        len(slots),
        running.mac_percent(profile),
        profile.target_cg_percent,
    )

    for pallet in sort_pallets(pallets):
        if running.weight_lb + pallet.gross_weight_lb > profile.max_payload_lb:
            result.unplaced.append(pallet)
            continue

        best: PalletSlot | None = None
        best_score = math.inf
        best_state: MomentState | None = None

        for slot in slots:
            if slot.index in used or not _slot_accepts(slot, pallet, profile):
                continue
            point = LoadPoint(pallet.gross_weight_lb, slot.x_start_in, along, slot.y_center_in)
            projected = running.projected(point, profile)
            score = score_projection(projected.mac_percent(profile), profile)
            if multi_lane:
                score += (
                    LATERAL_TIE_BREAK_WEIGHT * abs(projected.lateral_cg_in) / profile.half_width_in
                )
            if score < best_score:
                best, best_score, best_state = slot, score, projected

        if best is None or best_state is None:
            result.unplaced.append(pallet)
            continue

        used.add(best.index)
        running.weight_lb = best_state.weight_lb
        running.moment = best_state.moment
        running.lateral_moment = best_state.lateral_moment
        result.placements.append(
            PalletPlacement(
                pallet=pallet,
                position_index=best.index + 1,
                row=best.row,
                lane=best.lane_name,
                x_start_in=best.x_start_in,
                x_end_in=best.x_end_in,
                y_center_in=best.y_center_in,
                y_left_in=best.y_left_in,
                y_right_in=best.y_right_in,
                is_ramp=best.is_ramp,
                slot_weight_limit_lb=best.weight_limit_lb,
            )
        )
        logger.debug(
            "Placed %s (%.0f lb) in slot %d (%s), x=%.0f, projected CG %.1f%% MAC",
            pallet.pallet_id,
            pallet.gross_weight_lb,
            best.index + 1,
            best.lane_name,
            best.x_start_in,
            running.mac_percent(profile),
        )

    if result.placements:
        result.next_x_in = max(p.x_end_in for p in result.placements) + LOAD_SPACING_IN
    return result
