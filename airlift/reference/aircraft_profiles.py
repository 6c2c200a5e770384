"""Static reference data: 463L platform limits and aircraft profiles.

Profiles are validated once when this module is imported, so a malformed
table fails at configuration-load time instead of partway through a solve.
Caller-supplied profiles go through ``validate_profile()`` before use.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from airlift.contracts.aircraft import AircraftProfile, LanePosition
from airlift.contracts.enums import AircraftType, PalletOrientation
from airlift.errors import ProfileConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformSpec:
    """463L master pallet dimensions and weight limits."""

    length_in: float = 108
    width_in: float = 88
    usable_length_in: float = 104
    usable_width_in: float = 84
    tare_lb: float = 290
    tare_with_nets_lb: float = 355
    max_gross_96in_lb: float = 10_000
    max_gross_100in_lb: float = 8_000
    recommended_height_in: float = 96
    max_height_in: float = 100

    def gross_limit_for_height(self, height_in: float) -> float:
        """Gross weight ceiling for a build-up of the given height (0 if too tall)."""
        if height_in <= self.recommended_height_in:
            return self.max_gross_96in_lb
        if height_in <= self.max_height_in:
            return self.max_gross_100in_lb
        return 0

    def length_along_axis(self, orientation: PalletOrientation | str) -> float:
        if PalletOrientation(orientation) == PalletOrientation.CROSSWISE:
            return self.width_in
        return self.length_in

    def width_across_axis(self, orientation: PalletOrientation | str) -> float:
        if PalletOrientation(orientation) == PalletOrientation.CROSSWISE:
            return self.length_in
        return self.width_in


PALLET_463L = PlatformSpec()

PAX_WEIGHT_LB = 225  # per passenger, with gear

# Clearance kept between adjacent pallets and around vehicles
LOAD_SPACING_IN = 4


C17_PROFILE = AircraftProfile(
    aircraft_type=AircraftType.C17,
    name="C-17 Globemaster III",
    cargo_length_in=1056,
    cargo_width_in=216,
    cargo_height_in=148,
    main_deck_height_in=148,
    pallet_positions=18,
    lanes=[
        LanePosition(name="Left Lane", y_center_in=-50),
        LanePosition(name="Right Lane", y_center_in=50),
    ],
    pallet_orientation=PalletOrientation.LENGTHWISE,
    max_payload_lb=170_900,
    per_position_weight_lb=10_000,
    ramp_length_in=180,
    ramp_position_weight_lb=7_500,
    ramp_clearance_height_in=70,
    ramp_clearance_width_in=144,
    seat_capacity=102,
    cob_min_percent=16,
    cob_max_percent=40,
    lemac_station_in=869.7,
    mac_length_in=309.5,
    cargo_bay_fs_start_in=428,
)

C130_PROFILE = AircraftProfile(
    aircraft_type=AircraftType.C130,
    name="C-130H/J Hercules",
    cargo_length_in=492,
    cargo_width_in=123,
    cargo_height_in=108,
    main_deck_height_in=108,
    pallet_positions=6,
    lanes=[LanePosition(name="Center Lane", y_center_in=0)],
    pallet_orientation=PalletOrientation.CROSSWISE,
    max_payload_lb=42_000,
    per_position_weight_lb=10_000,
    ramp_length_in=120,
    ramp_position_weight_lb=10_000,
    ramp_clearance_height_in=90,
    ramp_clearance_width_in=120,
    seat_capacity=92,
    cob_min_percent=18,
    cob_max_percent=33,
    lemac_station_in=494.5,
    mac_length_in=164.5,
    cargo_bay_fs_start_in=290,
)


def validate_profile(profile: AircraftProfile) -> AircraftProfile:
    """Reject profiles the solver cannot work with.

    Raises ``ProfileConfigError`` naming the first problem found.
    """
    name = str(profile.aircraft_type)

    positive = {
        "cargo_length_in": profile.cargo_length_in,
        "cargo_width_in": profile.cargo_width_in,
        "cargo_height_in": profile.cargo_height_in,
        "main_deck_height_in": profile.main_deck_height_in,
        "max_payload_lb": profile.max_payload_lb,
        "per_position_weight_lb": profile.per_position_weight_lb,
        "ramp_clearance_width_in": profile.ramp_clearance_width_in,
        "mac_length_in": profile.mac_length_in,
    }
    for field, value in positive.items():
        if not math.isfinite(value) or value <= 0:
            raise ProfileConfigError(name, f"{field} must be positive, got {value}")

    for field in ("cob_min_percent", "cob_max_percent", "lemac_station_in", "cargo_bay_fs_start_in"):
        if not math.isfinite(getattr(profile, field)):
            raise ProfileConfigError(name, f"{field} must be finite")

    if profile.envelope_length_percent <= 0:
        raise ProfileConfigError(
            name,
            f"CG envelope length must be positive "
            f"({profile.cob_min_percent}-{profile.cob_max_percent}% MAC)",
        )

    if profile.ramp_length_in > profile.cargo_length_in:
        raise ProfileConfigError(name, "ramp is longer than the cargo bay")
    if profile.ramp_length_in > 0 and profile.ramp_position_weight_lb <= 0:
        raise ProfileConfigError(name, "ramp position weight must be positive")

    if not profile.lanes:
        raise ProfileConfigError(name, "at least one pallet lane is required")
    half_pallet = PALLET_463L.width_across_axis(profile.pallet_orientation) / 2
    for lane in profile.lanes:
        if abs(lane.y_center_in) + half_pallet > profile.half_width_in:
            raise ProfileConfigError(name, f"{lane.name} puts pallets outside the bay")

    return profile


AIRCRAFT_PROFILES: dict[str, AircraftProfile] = {
    AircraftType.C17.value: validate_profile(C17_PROFILE),
    AircraftType.C130.value: validate_profile(C130_PROFILE),
}


def get_profile(aircraft_type: AircraftType | str) -> AircraftProfile:
    """Look up a reference profile by type (``"C-17"``, ``AircraftType.C130``...)."""
    key = aircraft_type.value if isinstance(aircraft_type, AircraftType) else str(aircraft_type)
    try:
        return AIRCRAFT_PROFILES[key]
    except KeyError:
        raise ProfileConfigError(key, "unknown aircraft type") from None


logger.debug("Loaded %d aircraft profiles: %s", len(AIRCRAFT_PROFILES), ", ".join(AIRCRAFT_PROFILES))
