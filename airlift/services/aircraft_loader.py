"""Load one aircraft from the head of a cargo queue.

Pallets go first onto their fixed rail positions; their footprints are then
reserved so the rolling-stock placer parks vehicles around them. Passengers
board last, limited by seats and by whatever payload the cargo left over.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from airlift.contracts.aircraft import AircraftProfile
from airlift.contracts.cargo import CargoItem, UnitLoad
from airlift.contracts.enums import Phase
from airlift.contracts.load_plan import AircraftLoadPlan, PaxAssignment
from airlift.services.pallet_placer import place_pallets
from airlift.services.rolling_stock import freeze_zones, place_rolling_stock
from airlift.services.weight_balance import MomentState, compute_plan_cg

logger = logging.getLogger(__name__)


@dataclass
class LoadQueue:
    """Everything still waiting for an aircraft within one phase."""

    pallets: list[UnitLoad] = field(default_factory=list)
    rolling_stock: list[CargoItem] = field(default_factory=list)
    pax: list[PaxAssignment] = field(default_factory=list)

    @classmethod
    def with_pax_items(
        cls, pallets: list[UnitLoad], rolling_stock: list[CargoItem], pax_items: list[CargoItem]
    ) -> LoadQueue:
        return cls(
            pallets=list(pallets),
            rolling_stock=list(rolling_stock),
            pax=[PaxAssignment(item_id=i.item_id, count=i.pax_count or 1) for i in pax_items],
        )

    @property
    def pax_remaining(self) -> int:
        return sum(g.count for g in self.pax)

    @property
    def has_cargo(self) -> bool:
        return bool(self.pallets or self.rolling_stock or self.pax_remaining)


@dataclass
class AircraftLoadOutcome:
    plan: AircraftLoadPlan
    remaining: LoadQueue
    items_loaded: int


def pax_capacity(profile: AircraftProfile, cargo_weight_lb: float, pax_weight_lb: float) -> int:
    """Passengers the aircraft can still take: ``min(seats, remaining payload / pax weight)``."""
    if pax_weight_lb <= 0:
        return profile.seat_capacity
    by_weight = math.floor(max(profile.max_payload_lb - cargo_weight_lb, 0) / pax_weight_lb)
    return max(min(profile.seat_capacity, by_weight), 0)


def board_passengers(
    groups: list[PaxAssignment], capacity: int
) -> tuple[list[PaxAssignment], list[PaxAssignment]]:
    """Board groups in manifest order, splitting the last one if seats run out."""
    boarded: list[PaxAssignment] = []
    waiting: list[PaxAssignment] = []
    seats = capacity
    for group in groups:
        take = min(group.count, seats)
        if take > 0:
            boarded.append(PaxAssignment(item_id=group.item_id, count=take))
            seats -= take
        if group.count - take > 0:
            waiting.append(PaxAssignment(item_id=group.item_id, count=group.count - take))
    return boarded, waiting


def load_single_aircraft(
    queue: LoadQueue,
    profile: AircraftProfile,
    phase: Phase,
    sequence: int,
    pax_weight_lb: float,
) -> AircraftLoadOutcome:
    """Build one ``AircraftLoadPlan`` and return what is left for the next aircraft."""
    pallets = place_pallets(queue.pallets, profile, start_x_in=0.0, state=MomentState())
    vehicles = place_rolling_stock(
        queue.rolling_stock,
        profile,
        start_x_in=0.0,
        reserved_zones=freeze_zones(pallets.placements),
        state=pallets.state,
    )

    cargo_weight = vehicles.state.weight_lb
    boarded, waiting = board_passengers(queue.pax, pax_capacity(profile, cargo_weight, pax_weight_lb))
    pax_count = sum(g.count for g in boarded)
    pax_weight = pax_count * pax_weight_lb

    cg = compute_plan_cg(pallets.placements, vehicles.placements, profile, pax_weight)
    total_weight = cargo_weight + pax_weight
    floor_area = sum(p.length_in * p.width_in for p in pallets.placements) + sum(
        v.length_in * v.width_in for v in vehicles.placements
    )
    phase_value = Phase(phase).value
    type_value = str(profile.aircraft_type)

    plan = AircraftLoadPlan(
        aircraft_id=f"{type_value}-{phase_value}-{sequence}",
        aircraft_type=profile.aircraft_type,
        profile=profile,
        sequence=sequence,
        phase=phase,
        pallets=pallets.placements,
        rolling_stock=vehicles.placements,
        pax_count=pax_count,
        pax_manifest=boarded,
        pax_weight_lb=pax_weight,
        cargo_weight_lb=cargo_weight,
        total_weight_lb=total_weight,
        payload_used_percent=total_weight / profile.max_payload_lb * 100,
        center_of_balance_in=cg.station_cg_in,
        cob_percent=cg.mac_percent,
        cob_clamped_percent=cg.clamped_mac_percent,
        cob_in_envelope=cg.within_envelope,
        envelope_status=cg.envelope_status,
        envelope_deviation=cg.envelope_deviation,
        lateral_cg_in=cg.lateral_cg_in,
        positions_used=len(pallets.placements),
        positions_available=pallets.slots_available,
        utilization_percent=floor_area / profile.cargo_floor_area_in2 * 100,
        seat_capacity=profile.seat_capacity,
        seats_used=pax_count,
        seat_utilization_percent=(
            pax_count / profile.seat_capacity * 100 if profile.seat_capacity else 0.0
        ),
    )

    remaining = LoadQueue(pallets=pallets.unplaced, rolling_stock=vehicles.unplaced, pax=waiting)
    items_loaded = len(pallets.placements) + len(vehicles.placements) + (1 if pax_count else 0)

    logger.info(
        "%s: %d pallets, %d vehicles, %d PAX, %.0f lb (%.1f%% payload), CoB %.1f%% MAC",
        plan.aircraft_id,
        len(plan.pallets),
        len(plan.rolling_stock),
        pax_count,
        total_weight,
        plan.payload_used_percent,
        plan.cob_percent,
    )
    return AircraftLoadOutcome(plan=plan, remaining=remaining, items_loaded=items_loaded)
