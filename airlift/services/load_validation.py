"""Post-load checks on a finished ``AircraftLoadPlan``.

The placers already enforce these rules while building a plan; this module
re-checks a plan independently, for hand-edited plans and as a safety net
before results leave the solver.
"""

from __future__ import annotations

from itertools import combinations

from airlift.contracts.common import SolverModel
from airlift.contracts.enums import IssueSeverity
from airlift.contracts.load_plan import AircraftLoadPlan, PalletPlacement, VehiclePlacement
from airlift.services.weight_balance import cob_status_message, compute_plan_cg

CG_WARNING_BAND_PERCENT = 3.0
LATERAL_LIMIT_FRACTION = 0.1  # of the half bay width
LATERAL_WARNING_IN = 5.0


class ValidationIssue(SolverModel):
    code: str
    message: str
    severity: IssueSeverity
    subject: str | None = None


def _label(p: PalletPlacement | VehiclePlacement) -> str:
    if isinstance(p, PalletPlacement):
        return f"pallet {p.pallet.pallet_id}"
    return p.item.description or p.item.item_id


def _check_bounds(plan: AircraftLoadPlan) -> list[ValidationIssue]:
    profile = plan.profile
    half = profile.half_width_in
    issues: list[ValidationIssue] = []
    for p in [*plan.pallets, *plan.rolling_stock]:
        label = _label(p)
        if p.y_left_in < -half:
            issues.append(ValidationIssue(
                code="BOUNDS_LEFT_EXCEEDED",
                message=f'{label} exceeds left fuselage boundary ({p.y_left_in:g}" vs limit -{half:g}")',
                severity=IssueSeverity.ERROR,
                subject=label,
            ))
        if p.y_right_in > half:
            issues.append(ValidationIssue(
                code="BOUNDS_RIGHT_EXCEEDED",
                message=f'{label} exceeds right fuselage boundary ({p.y_right_in:g}" vs limit {half:g}")',
                severity=IssueSeverity.ERROR,
                subject=label,
            ))
        if p.x_start_in < 0:
            issues.append(ValidationIssue(
                code="BOUNDS_FORWARD_EXCEEDED",
                message=f"{label} exceeds forward cargo boundary",
                severity=IssueSeverity.ERROR,
                subject=label,
            ))
        if p.x_end_in > profile.cargo_length_in:
            issues.append(ValidationIssue(
                code="BOUNDS_AFT_EXCEEDED",
                message=f"{label} exceeds aft cargo boundary (ramp)",
                severity=IssueSeverity.ERROR,
                subject=label,
            ))
    return issues


def _check_collisions(plan: AircraftLoadPlan) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for a, b in combinations([*plan.pallets, *plan.rolling_stock], 2):
        if a.overlaps(b):
            issues.append(ValidationIssue(
                code="COLLISION",
                message=f"Collision detected between {_label(a)} and {_label(b)}",
                severity=IssueSeverity.ERROR,
                subject=_label(a),
            ))
    return issues


def _check_weights(plan: AircraftLoadPlan) -> list[ValidationIssue]:
    profile = plan.profile
    issues: list[ValidationIssue] = []
    for p in plan.pallets:
        if p.pallet.gross_weight_lb > p.slot_weight_limit_lb:
            issues.append(ValidationIssue(
                code="POSITION_OVERWEIGHT",
                message=(
                    f"pallet {p.pallet.pallet_id} weighs {p.pallet.gross_weight_lb:g} lbs, "
                    f"position {p.position_index} limit is {p.slot_weight_limit_lb:g} lbs"
                ),
                severity=IssueSeverity.ERROR,
                subject=p.pallet.pallet_id,
            ))
        if p.is_ramp and p.pallet.height_in > profile.ramp_clearance_height_in:
            issues.append(ValidationIssue(
                code="OVERHEIGHT_FOR_ZONE",
                message=(
                    f'pallet {p.pallet.pallet_id} height {p.pallet.height_in:g}" exceeds ramp '
                    f'limit of {profile.ramp_clearance_height_in:g}"'
                ),
                severity=IssueSeverity.ERROR,
                subject=p.pallet.pallet_id,
            ))
    if plan.total_weight_lb > profile.max_payload_lb:
        issues.append(ValidationIssue(
            code="PAYLOAD_EXCEEDED",
            message=(
                f"{plan.aircraft_id} total {plan.total_weight_lb:g} lbs exceeds max payload "
                f"{profile.max_payload_lb:g} lbs"
            ),
            severity=IssueSeverity.ERROR,
        ))
    if plan.pax_count > profile.seat_capacity:
        issues.append(ValidationIssue(
            code="SEATS_EXCEEDED",
            message=f"{plan.pax_count} PAX exceed {profile.seat_capacity} seats",
            severity=IssueSeverity.ERROR,
        ))
    return issues


def _check_balance(plan: AircraftLoadPlan) -> list[ValidationIssue]:
    profile = plan.profile
    cg = compute_plan_cg(plan.pallets, plan.rolling_stock, profile, plan.pax_weight_lb)
    issues: list[ValidationIssue] = []

    if not cg.within_envelope:
        issues.append(ValidationIssue(
            code="CG_ENVELOPE_EXCEEDED",
            message=cob_status_message(cg),
            severity=IssueSeverity.ERROR,
        ))
    elif cg.total_weight_lb > 0:
        if cg.mac_percent < profile.cob_min_percent + CG_WARNING_BAND_PERCENT:
            issues.append(ValidationIssue(
                code="CG_ENVELOPE_WARNING",
                message=(
                    f"CG approaching forward limit: {cg.mac_percent:.1f}% MAC "
                    f"(limit: {profile.cob_min_percent:g}%)"
                ),
                severity=IssueSeverity.WARNING,
            ))
        elif cg.mac_percent > profile.cob_max_percent - CG_WARNING_BAND_PERCENT:
            issues.append(ValidationIssue(
                code="CG_ENVELOPE_WARNING",
                message=(
                    f"CG approaching aft limit: {cg.mac_percent:.1f}% MAC "
                    f"(limit: {profile.cob_max_percent:g}%)"
                ),
                severity=IssueSeverity.WARNING,
            ))

    lateral = cg.lateral_cg_in
    limit = profile.half_width_in * LATERAL_LIMIT_FRACTION
    side = "right" if lateral > 0 else "left"
    if abs(lateral) > limit:
        issues.append(ValidationIssue(
            code="LATERAL_CG_EXCEEDED",
            message=(
                f'Lateral CG imbalance: {abs(lateral):.1f}" {side} of centerline '
                f'exceeds limit of {limit:.1f}"'
            ),
            severity=IssueSeverity.ERROR,
        ))
    elif abs(lateral) > LATERAL_WARNING_IN:
        issues.append(ValidationIssue(
            code="LATERAL_CG_WARNING",
            message=f'Slight lateral imbalance: {abs(lateral):.1f}" {side} of centerline',
            severity=IssueSeverity.WARNING,
        ))
    return issues


def validate_load_plan(plan: AircraftLoadPlan) -> list[ValidationIssue]:
    """All geometry, weight and balance issues found on one plan."""
    return [
        *_check_bounds(plan),
        *_check_collisions(plan),
        *_check_weights(plan),
        *_check_balance(plan),
    ]


def errors_only(issues: list[ValidationIssue]) -> list[ValidationIssue]:
    return [i for i in issues if i.severity == IssueSeverity.ERROR]
