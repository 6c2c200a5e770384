"""Aircraft reference profiles and fleet availability.

Profiles are static reference data: built once from
``airlift.reference.aircraft_profiles`` (or supplied by a caller),
validated before a solve starts, and never mutated afterwards.
"""

from __future__ import annotations

from pydantic import Field

from airlift.contracts.common import FrozenSolverModel, SolverModel
from airlift.contracts.enums import AircraftType, PalletOrientation


class LanePosition(FrozenSolverModel):
    """One lateral pallet lane, centered ``y_center_in`` from the centerline."""

    name: str
    y_center_in: float


class AircraftProfile(FrozenSolverModel):
    """Per-type cargo bay geometry, structural limits and CG envelope."""

    aircraft_type: AircraftType
    name: str

    # Cargo bay geometry (bay-local frame)
    cargo_length_in: float
    cargo_width_in: float
    cargo_height_in: float
    main_deck_height_in: float

    # Pallet positions
    pallet_positions: int = Field(..., ge=0)
    lanes: list[LanePosition] = Field(default_factory=list)
    pallet_orientation: PalletOrientation = PalletOrientation.LENGTHWISE

    # Structural limits
    max_payload_lb: float
    per_position_weight_lb: float
    ramp_length_in: float = Field(default=0, ge=0)
    ramp_position_weight_lb: float
    ramp_clearance_height_in: float
    ramp_clearance_width_in: float
    seat_capacity: int = Field(default=0, ge=0)

    # Weight & balance
    cob_min_percent: float = Field(..., description="Forward CG limit, %MAC")
    cob_max_percent: float = Field(..., description="Aft CG limit, %MAC")
    lemac_station_in: float = Field(..., description="Station of the MAC leading edge")
    mac_length_in: float
    cargo_bay_fs_start_in: float = Field(..., description="Station of bay-local X = 0")

    @property
    def envelope_length_percent(self) -> float:
        return self.cob_max_percent - self.cob_min_percent

    @property
    def target_cg_percent(self) -> float:
        return (self.cob_min_percent + self.cob_max_percent) / 2

    @property
    def ramp_start_in(self) -> float:
        return self.cargo_length_in - self.ramp_length_in

    @property
    def half_width_in(self) -> float:
        return self.cargo_width_in / 2

    @property
    def cargo_floor_area_in2(self) -> float:
        return self.cargo_length_in * self.cargo_width_in


class FleetAvailability(SolverModel):
    """How many aircraft of one type the planner may use."""

    aircraft_type: AircraftType
    available_count: int = Field(..., ge=0)
    locked: bool = Field(
        default=False,
        description="Locked entries restrict the solve to exactly these types",
    )


class FleetConfig(SolverModel):
    """Fleet-aware solve input."""

    availability: list[FleetAvailability] = Field(default_factory=list)
    preferred_type: AircraftType | None = None
