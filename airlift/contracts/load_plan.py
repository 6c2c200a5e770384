"""Solver outputs: placements, per-aircraft load plans and the aggregate result.

Calculated, never persisted by this package. Downstream consumers (UI,
print/PDF export, persistence) read these models as opaque JSON.
"""

from __future__ import annotations

from pydantic import Field

from airlift.contracts.aircraft import AircraftProfile
from airlift.contracts.cargo import CargoItem, UnitLoad
from airlift.contracts.common import SolverModel
from airlift.contracts.enums import AircraftType, EnvelopeStatus, LateralSide, Phase


class CGResult(SolverModel):
    """Center of gravity of a set of loads against one aircraft's envelope.

    ``mac_percent`` is the unclamped physics value and is the only one used
    for envelope checks. ``clamped_mac_percent`` is forced into [0, 100] for
    display.
    """

    station_cg_in: float
    mac_percent: float
    clamped_mac_percent: float
    total_weight_lb: float
    total_moment: float
    lateral_cg_in: float
    lateral_moment: float
    within_envelope: bool
    forward_limit_percent: float
    aft_limit_percent: float
    target_cg_percent: float
    deviation_from_target: float = Field(..., ge=0)
    envelope_status: EnvelopeStatus
    envelope_deviation: float = Field(
        default=0, ge=0, description="%MAC outside the nearer limit, 0 when inside"
    )


class _Footprint(SolverModel):
    x_start_in: float
    x_end_in: float
    y_center_in: float
    y_left_in: float
    y_right_in: float
    is_ramp: bool = False

    @property
    def length_in(self) -> float:
        return self.x_end_in - self.x_start_in

    @property
    def width_in(self) -> float:
        return self.y_right_in - self.y_left_in

    def overlaps(self, other: _Footprint) -> bool:
        """Strict overlap: boxes that only touch do not collide."""
        return (
            self.x_start_in < other.x_end_in
            and other.x_start_in < self.x_end_in
            and self.y_left_in < other.y_right_in
            and other.y_left_in < self.y_right_in
        )


class PalletPlacement(_Footprint):
    """A unit load locked into one grid slot."""

    pallet: UnitLoad
    position_index: int = Field(..., ge=1, description="1-based grid slot")
    row: int = Field(..., ge=0)
    lane: str
    slot_weight_limit_lb: float

    @property
    def weight_lb(self) -> float:
        return self.pallet.gross_weight_lb


class VehiclePlacement(_Footprint):
    """A rolling-stock item parked on the cargo floor."""

    item: CargoItem
    side: LateralSide = LateralSide.CENTER

    @property
    def weight_lb(self) -> float:
        return self.item.weight_lb


class PaxAssignment(SolverModel):
    """Passengers from one manifest line boarded on (or left off) an aircraft."""

    item_id: str
    count: int = Field(..., ge=0)


class AircraftLoadPlan(SolverModel):
    """One aircraft's complete assignment."""

    aircraft_id: str = Field(..., description="e.g. C-17-ADVON-1")
    aircraft_type: AircraftType
    profile: AircraftProfile
    sequence: int = Field(..., ge=1, description="1-based order within the phase")
    phase: Phase

    pallets: list[PalletPlacement] = Field(default_factory=list)
    rolling_stock: list[VehiclePlacement] = Field(default_factory=list)

    pax_count: int = Field(default=0, ge=0)
    pax_manifest: list[PaxAssignment] = Field(default_factory=list)
    pax_weight_lb: float = Field(default=0, ge=0)

    cargo_weight_lb: float = Field(default=0, ge=0)
    total_weight_lb: float = Field(default=0, ge=0)
    payload_used_percent: float = 0

    center_of_balance_in: float
    cob_percent: float = Field(..., description="Raw %MAC, may lie outside [0, 100]")
    cob_clamped_percent: float
    cob_in_envelope: bool
    envelope_status: EnvelopeStatus
    envelope_deviation: float = 0
    lateral_cg_in: float = 0

    positions_used: int = 0
    positions_available: int = 0
    utilization_percent: float = 0

    seat_capacity: int = 0
    seats_used: int = 0
    seat_utilization_percent: float = 0

    @property
    def has_hazmat(self) -> bool:
        return any(p.pallet.hazmat for p in self.pallets) or any(
            v.item.hazmat for v in self.rolling_stock
        )

    def placed_item_ids(self) -> list[str]:
        ids = [i.item_id for p in self.pallets for i in p.pallet.items]
        ids.extend(v.item.item_id for v in self.rolling_stock)
        ids.extend(a.item_id for a in self.pax_manifest if a.count > 0)
        return ids


class Shortfall(SolverModel):
    """What could not be moved, and why."""

    unloaded_weight_lb: float = Field(default=0, ge=0)
    pallet_count: int = 0
    rolling_stock_count: int = 0
    loose_item_count: int = 0
    pax_count: int = 0
    reason: str = ""


class FleetUsage(SolverModel):
    aircraft_type: AircraftType
    available: int | None = Field(default=None, description="None means unbounded")
    used: int = 0
    remaining: int | None = None


class AllocationResult(SolverModel):
    """Aggregate over every aircraft produced by one solver invocation."""

    aircraft_type: AircraftType | None = Field(
        default=None, description="Set in single-type mode"
    )
    total_aircraft: int = 0
    advon_aircraft: int = 0
    main_aircraft: int = 0
    load_plans: list[AircraftLoadPlan] = Field(default_factory=list)

    total_weight_lb: float = 0
    total_pallets: int = 0
    total_rolling_stock: int = 0
    total_pax: int = 0
    total_pax_weight_lb: float = 0
    total_seat_capacity: int = 0
    total_seats_used: int = 0
    overall_seat_utilization: float = 0

    unloaded_items: list[CargoItem] = Field(default_factory=list)
    unloaded_pax: int = 0
    unloaded_pax_groups: list[PaxAssignment] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    feasible: bool = True
    shortfall: Shortfall | None = None
    fleet_usage: list[FleetUsage] = Field(default_factory=list)

    @property
    def advon_plans(self) -> list[AircraftLoadPlan]:
        return [p for p in self.load_plans if p.phase == Phase.ADVON]

    @property
    def main_plans(self) -> list[AircraftLoadPlan]:
        return [p for p in self.load_plans if p.phase == Phase.MAIN]
