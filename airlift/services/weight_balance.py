"""Moment-based weight & balance for one aircraft.

All functions are pure. ``MomentState`` is the running accumulator the
placers carry from one decision to the next; ``projected()`` answers the
what-if question without touching the state it was called on.

Arm convention: a load occupying bay-local ``[x, x + length]`` acts at its
midpoint, converted to a fuselage station by adding the profile's
``cargo_bay_fs_start_in``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from airlift.contracts.aircraft import AircraftProfile
from airlift.contracts.enums import EnvelopeStatus
from airlift.contracts.load_plan import CGResult, PalletPlacement, VehiclePlacement

# Score penalty per %MAC outside the envelope, relative to distance from target
OUT_OF_ENVELOPE_PENALTY = 10

# Passengers sit in a 100 in zone starting at 40% of the bay length
PAX_ZONE_START_FRACTION = 0.4
PAX_ZONE_LENGTH_IN = 100


@dataclass(frozen=True)
class LoadPoint:
    """A weight acting over a longitudinal span at a lateral offset."""

    weight_lb: float
    x_in: float
    length_in: float = 0.0
    y_in: float = 0.0


@dataclass
class MomentState:
    """Running totals: weight, longitudinal moment and lateral moment."""

    weight_lb: float = 0.0
    moment: float = 0.0
    lateral_moment: float = 0.0

    def add(self, point: LoadPoint, profile: AircraftProfile) -> None:
        if point.weight_lb <= 0:
            return
        self.weight_lb += point.weight_lb
        self.moment += point.weight_lb * arm_in(point.x_in, point.length_in, profile)
        self.lateral_moment += point.weight_lb * point.y_in

    def projected(self, point: LoadPoint, profile: AircraftProfile) -> MomentState:
        state = replace(self)
        state.add(point, profile)
        return state

    def station_cg_in(self, profile: AircraftProfile) -> float:
        if self.weight_lb <= 0:
            return profile.cargo_bay_fs_start_in
        return self.moment / self.weight_lb

    def mac_percent(self, profile: AircraftProfile) -> float:
        """Raw %MAC; an empty load sits at the envelope target."""
        if self.weight_lb <= 0:
            return profile.target_cg_percent
        return station_to_mac_percent(self.station_cg_in(profile), profile)

    @property
    def lateral_cg_in(self) -> float:
        if self.weight_lb <= 0:
            return 0.0
        return self.lateral_moment / self.weight_lb


# ------------------------------------------------------------------
# Coordinate conversions
# ------------------------------------------------------------------


def arm_in(x_in: float, length_in: float, profile: AircraftProfile) -> float:
    return x_in + length_in / 2 + profile.cargo_bay_fs_start_in


def station_to_mac_percent(station_in: float, profile: AircraftProfile) -> float:
    return (station_in - profile.lemac_station_in) / profile.mac_length_in * 100


def mac_percent_to_station(mac_percent: float, profile: AircraftProfile) -> float:
    return profile.lemac_station_in + mac_percent / 100 * profile.mac_length_in


def target_station_in(profile: AircraftProfile) -> float:
    return mac_percent_to_station(profile.target_cg_percent, profile)


def target_bay_x_in(profile: AircraftProfile) -> float:
    """Bay-local X whose station is the envelope target."""
    return target_station_in(profile) - profile.cargo_bay_fs_start_in


# ------------------------------------------------------------------
# Envelope evaluation
# ------------------------------------------------------------------


def envelope_status(mac_percent: float, profile: AircraftProfile) -> tuple[EnvelopeStatus, float]:
    """Status and %MAC distance outside the nearer limit (0 when inside)."""
    if mac_percent < profile.cob_min_percent:
        return EnvelopeStatus.FORWARD_LIMIT, profile.cob_min_percent - mac_percent
    if mac_percent > profile.cob_max_percent:
        return EnvelopeStatus.AFT_LIMIT, mac_percent - profile.cob_max_percent
    return EnvelopeStatus.IN_ENVELOPE, 0.0


def score_projection(mac_percent: float, profile: AircraftProfile) -> float:
    """Placement score for a projected CG: lower is better.

    Distance from target normalized by envelope length, plus a 10x penalty
    for every %MAC beyond the envelope.
    """
    envelope = profile.envelope_length_percent
    score = abs(mac_percent - profile.target_cg_percent) / envelope
    _, outside = envelope_status(mac_percent, profile)
    if outside > 0:
        score += OUT_OF_ENVELOPE_PENALTY * outside / envelope
    return score


def cg_result(state: MomentState, profile: AircraftProfile) -> CGResult:
    mac = state.mac_percent(profile)
    if not math.isfinite(mac):
        # Only reachable with a profile that skipped validation
        mac = profile.target_cg_percent
    status, deviation = envelope_status(mac, profile)
    return CGResult(
        station_cg_in=state.station_cg_in(profile),
        mac_percent=mac,
        clamped_mac_percent=max(0.0, min(100.0, mac)),
        total_weight_lb=state.weight_lb,
        total_moment=state.moment,
        lateral_cg_in=state.lateral_cg_in,
        lateral_moment=state.lateral_moment,
        within_envelope=status == EnvelopeStatus.IN_ENVELOPE,
        forward_limit_percent=profile.cob_min_percent,
        aft_limit_percent=profile.cob_max_percent,
        target_cg_percent=profile.target_cg_percent,
        deviation_from_target=abs(mac - profile.target_cg_percent),
        envelope_status=status,
        envelope_deviation=deviation,
    )


def compute_center_of_gravity(points: list[LoadPoint], profile: AircraftProfile) -> CGResult:
    """CG of a set of loads. Points with non-positive weight are ignored."""
    state = MomentState()
    for point in points:
        state.add(point, profile)
    return cg_result(state, profile)


def project_cg_with_item(
    points: list[LoadPoint], new_point: LoadPoint, profile: AircraftProfile
) -> CGResult:
    """CG the load would have with ``new_point`` added."""
    return compute_center_of_gravity([*points, new_point], profile)


# ------------------------------------------------------------------
# Whole-aircraft CG
# ------------------------------------------------------------------


def pax_load_point(pax_weight_lb: float, profile: AircraftProfile) -> LoadPoint:
    return LoadPoint(
        weight_lb=pax_weight_lb,
        x_in=profile.cargo_length_in * PAX_ZONE_START_FRACTION,
        length_in=PAX_ZONE_LENGTH_IN,
        y_in=0.0,
    )


def placement_load_points(
    pallets: list[PalletPlacement], vehicles: list[VehiclePlacement]
) -> list[LoadPoint]:
    points = [
        LoadPoint(p.weight_lb, p.x_start_in, p.length_in, p.y_center_in) for p in pallets
    ]
    points.extend(
        LoadPoint(v.weight_lb, v.x_start_in, v.length_in, v.y_center_in) for v in vehicles
    )
    return points


def compute_plan_cg(
    pallets: list[PalletPlacement],
    vehicles: list[VehiclePlacement],
    profile: AircraftProfile,
    pax_weight_lb: float = 0,
) -> CGResult:
    """Center of balance for a full aircraft: pallets, vehicles and passengers."""
    points = placement_load_points(pallets, vehicles)
    if pax_weight_lb > 0:
        points.append(pax_load_point(pax_weight_lb, profile))
    return compute_center_of_gravity(points, profile)


def cob_status_message(cg: CGResult) -> str:
    """One-line envelope summary for operators."""
    if cg.within_envelope:
        return (
            f"CoB {cg.mac_percent:.1f}% MAC - Within envelope "
            f"({cg.forward_limit_percent:g}-{cg.aft_limit_percent:g}%)"
        )
    forward = cg.envelope_status == EnvelopeStatus.FORWARD_LIMIT
    direction = "forward" if forward else "aft"
    limit = cg.forward_limit_percent if forward else cg.aft_limit_percent
    return (
        f"WARNING: CoB {cg.mac_percent:.1f}% MAC exceeds {direction} limit "
        f"({limit:g}%) by {cg.envelope_deviation:.1f}%"
    )
