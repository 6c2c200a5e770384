"""Fleet allocation loop: spread a classified manifest over a sequence of aircraft.

Per phase (ADVON fully before MAIN) the loop repeatedly loads one aircraft
from the head of the queue:

- aircraft types are tried preferred type first, then largest payload first;
- a type that cannot place anything from the current queue is marked
  exhausted for the rest of the phase;
- each type's available count is shared across both phases;
- a per-phase iteration cap guards against runaway loops.

Capacity shortfalls never raise. They end up in ``unloaded_items``,
``unloaded_pax``, ``warnings`` and ``shortfall``. Bad configuration (unknown
or malformed profiles, a fleet with no aircraft) is rejected by
``allocate()`` before the first aircraft is loaded.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from airlift.contracts.aircraft import AircraftProfile, FleetAvailability, FleetConfig
from airlift.contracts.cargo import CargoItem, ClassifiedItems
from airlift.contracts.enums import AircraftType, CargoCategory, Phase
from airlift.contracts.load_plan import (
    AircraftLoadPlan,
    AllocationResult,
    FleetUsage,
    PaxAssignment,
    Shortfall,
)
from airlift.contracts.result import ErrorCode, ServiceResult
from airlift.errors import ProfileConfigError
from airlift.reference.aircraft_profiles import get_profile, validate_profile
from airlift.services.aircraft_loader import LoadQueue, load_single_aircraft
from airlift.services.load_validation import errors_only, validate_load_plan
from airlift.services.palletization import PalletIdGenerator, build_unit_loads
from airlift.settings import get_settings

logger = logging.getLogger(__name__)

REASON_FLEET_EXHAUSTED = "fleet exhausted"
REASON_ITERATION_CAP = "iteration cap reached"
REASON_AIRCRAFT_LIMITS = "cargo exceeds aircraft limits"
REASON_PAX_CAPACITY = "passenger seats/payload exhausted"


@dataclass
class FleetSlot:
    """Availability bookkeeping for one aircraft type during a solve."""

    profile: AircraftProfile
    available: int | None  # None = unbounded (single-type mode)
    used: int = 0

    @property
    def aircraft_type(self) -> str:
        return str(self.profile.aircraft_type)

    @property
    def remaining(self) -> int | None:
        if self.available is None:
            return None
        return self.available - self.used

    @property
    def has_aircraft(self) -> bool:
        return self.available is None or self.used < self.available

    def usage(self) -> FleetUsage:
        return FleetUsage(
            aircraft_type=self.profile.aircraft_type,
            available=self.available,
            used=self.used,
            remaining=self.remaining,
        )


@dataclass
class PhaseOutcome:
    plans: list[AircraftLoadPlan] = field(default_factory=list)
    unloaded_items: list[CargoItem] = field(default_factory=list)
    unloaded_pax: list[PaxAssignment] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)
    unloaded_pallets: int = 0


# ------------------------------------------------------------------
# Fleet ordering
# ------------------------------------------------------------------


def participating_entries(fleet: FleetConfig) -> list[FleetAvailability]:
    """Locked entries when any are locked, otherwise the whole fleet."""
    if any(a.locked for a in fleet.availability):
        return [a for a in fleet.availability if a.locked]
    return list(fleet.availability)


def order_fleet(
    fleet: FleetConfig, profiles: dict[str, AircraftProfile] | None = None
) -> list[FleetSlot]:
    """Fleet slots in trial order: preferred type first, then by max payload.

    When any entry is locked, only locked entries take part.
    """
    slots: dict[str, FleetSlot] = {}
    for entry in participating_entries(fleet):
        key = AircraftType(entry.aircraft_type).value
        if key in slots:
            slots[key].available = (slots[key].available or 0) + entry.available_count
            continue
        profile = (profiles or {}).get(key) or get_profile(key)
        slots[key] = FleetSlot(profile=profile, available=entry.available_count)

    preferred = AircraftType(fleet.preferred_type).value if fleet.preferred_type else None
    return sorted(
        slots.values(),
        key=lambda s: (s.aircraft_type != preferred, -s.profile.max_payload_lb),
    )


def _next_slot(slots: list[FleetSlot], exhausted: set[str]) -> FleetSlot | None:
    for slot in slots:
        if slot.aircraft_type not in exhausted and slot.has_aircraft:
            return slot
    return None


# ------------------------------------------------------------------
# Per-plan checks
# ------------------------------------------------------------------


def plan_warnings(plan: AircraftLoadPlan) -> list[str]:
    """Operator warnings for one finished aircraft."""
    warnings = [f"{plan.aircraft_id}: {issue.message}" for issue in errors_only(validate_load_plan(plan))]
    if plan.has_hazmat and plan.pax_count > 0:
        warnings.append(
            f"{plan.aircraft_id}: HAZMAT-PAX CONFLICT: HAZMAT cargo co-loaded with "
            f"{plan.pax_count} PAX. HAZMAT must not co-load with PAX on same aircraft."
        )
    return warnings


# ------------------------------------------------------------------
# Phase loop
# ------------------------------------------------------------------


def _run_phase(
    phase: Phase,
    queue: LoadQueue,
    slots: list[FleetSlot],
    pax_weight_lb: float,
    max_aircraft: int,
) -> PhaseOutcome:
    outcome = PhaseOutcome()
    exhausted: set[str] = set()
    sequence = 0

    while queue.has_cargo:
        if sequence >= max_aircraft:
            outcome.warnings.append(f"{phase.value} loading capped at {max_aircraft} aircraft")
            outcome.reasons.append(REASON_ITERATION_CAP)
            logger.warning("%s: iteration cap of %d aircraft reached", phase.value, max_aircraft)
            break

        slot = _next_slot(slots, exhausted)
        if slot is None:
            # Types still holding aircraft but unable to take anything say the
            # cargo does not fit; only types that ran out count as exhaustion.
            if exhausted:
                if queue.pallets or queue.rolling_stock:
                    outcome.reasons.append(REASON_AIRCRAFT_LIMITS)
                else:
                    outcome.reasons.append(REASON_PAX_CAPACITY)
            if any(not s.has_aircraft and s.aircraft_type not in exhausted for s in slots):
                outcome.reasons.append(REASON_FLEET_EXHAUSTED)
            break

        loaded = load_single_aircraft(queue, slot.profile, phase, sequence + 1, pax_weight_lb)
        if loaded.items_loaded == 0:
            logger.info(
                "%s: %s cannot place anything from the remaining queue, trying next type",
                phase.value,
                slot.aircraft_type,
            )
            exhausted.add(slot.aircraft_type)
            continue

        sequence += 1
        slot.used += 1
        outcome.plans.append(loaded.plan)
        outcome.warnings.extend(plan_warnings(loaded.plan))
        queue = loaded.remaining

    outcome.unloaded_pallets = len(queue.pallets)
    for pallet in queue.pallets:
        outcome.unloaded_items.extend(pallet.items)
    outcome.unloaded_items.extend(queue.rolling_stock)
    outcome.unloaded_pax.extend(g for g in queue.pax if g.count > 0)

    if queue.pallets or queue.rolling_stock:
        outcome.warnings.append(
            f"{phase.value}: {len(queue.pallets)} pallets and {len(queue.rolling_stock)} "
            f"vehicles could not fit on any aircraft"
        )
        logger.warning(
            "%s: %d pallets and %d vehicles left over",
            phase.value,
            len(queue.pallets),
            len(queue.rolling_stock),
        )
    return outcome


def _solve(
    classified: ClassifiedItems,
    slots: list[FleetSlot],
    single_type: AircraftType | None,
    max_aircraft: int | None = None,
    pax_weight_lb: float | None = None,
) -> AllocationResult:
    settings = get_settings()
    max_aircraft = max_aircraft if max_aircraft is not None else settings.max_aircraft_per_phase
    pax_weight_lb = pax_weight_lb if pax_weight_lb is not None else settings.pax_weight_lb

    id_gen = PalletIdGenerator()
    plans: list[AircraftLoadPlan] = []
    unloaded_items: list[CargoItem] = []
    unloaded_pax: list[PaxAssignment] = []
    warnings: list[str] = []
    reasons: list[str] = []
    unloaded_pallets = 0
    unpalletizable_loose = 0

    advon, main = classified.split_by_phase()
    for phase, items in ((Phase.ADVON, advon), (Phase.MAIN, main)):
        if items.is_empty:
            continue

        built = build_unit_loads(items.prebuilt_pallets, items.loose_items, id_gen)
        warnings.extend(built.warnings)
        unloaded_items.extend(built.unpalletizable_items)
        for item in built.unpalletizable_items:
            if item.category == CargoCategory.PREBUILT_PALLET:
                unloaded_pallets += 1
            else:
                unpalletizable_loose += 1
        if built.unpalletizable_items:
            reasons.append(REASON_AIRCRAFT_LIMITS)

        queue = LoadQueue.with_pax_items(built.pallets, items.rolling_stock, items.pax_items)
        outcome = _run_phase(phase, queue, slots, pax_weight_lb, max_aircraft)
        plans.extend(outcome.plans)
        unloaded_items.extend(outcome.unloaded_items)
        unloaded_pax.extend(outcome.unloaded_pax)
        warnings.extend(outcome.warnings)
        reasons.extend(outcome.reasons)
        unloaded_pallets += outcome.unloaded_pallets

    total_unloaded_pax = sum(g.count for g in unloaded_pax)
    if unloaded_items:
        warnings.append(f"{len(unloaded_items)} items could not be loaded")
    if total_unloaded_pax:
        warnings.append(
            f"{total_unloaded_pax} PAX could not be loaded due to seat/weight constraints"
        )

    feasible = not unloaded_items and total_unloaded_pax == 0
    shortfall = None
    if not feasible:
        shortfall = Shortfall(
            unloaded_weight_lb=sum(i.weight_lb for i in unloaded_items)
            + total_unloaded_pax * pax_weight_lb,
            pallet_count=unloaded_pallets,
            rolling_stock_count=sum(
                1 for i in unloaded_items if i.category == CargoCategory.ROLLING_STOCK
            ),
            loose_item_count=unpalletizable_loose,
            pax_count=total_unloaded_pax,
            reason="; ".join(dict.fromkeys(reasons)) or REASON_AIRCRAFT_LIMITS,
        )

    seat_capacity = sum(p.seat_capacity for p in plans)
    seats_used = sum(p.seats_used for p in plans)
    result = AllocationResult(
        aircraft_type=single_type,
        total_aircraft=len(plans),
        advon_aircraft=sum(1 for p in plans if p.phase == Phase.ADVON),
        main_aircraft=sum(1 for p in plans if p.phase == Phase.MAIN),
        load_plans=plans,
        total_weight_lb=sum(p.total_weight_lb for p in plans),
        total_pallets=sum(len(p.pallets) for p in plans),
        total_rolling_stock=sum(len(p.rolling_stock) for p in plans),
        total_pax=sum(p.pax_count for p in plans),
        total_pax_weight_lb=sum(p.pax_weight_lb for p in plans),
        total_seat_capacity=seat_capacity,
        total_seats_used=seats_used,
        overall_seat_utilization=seats_used / seat_capacity * 100 if seat_capacity else 0.0,
        unloaded_items=unloaded_items,
        unloaded_pax=total_unloaded_pax,
        unloaded_pax_groups=unloaded_pax,
        warnings=warnings,
        feasible=feasible,
        shortfall=shortfall,
        fleet_usage=[s.usage() for s in slots],
    )

    logger.info(
        "Allocation: %d aircraft (%d ADVON, %d MAIN), %.0f lb, %d items unloaded, %d PAX unloaded",
        result.total_aircraft,
        result.advon_aircraft,
        result.main_aircraft,
        result.total_weight_lb,
        len(unloaded_items),
        total_unloaded_pax,
    )
    return result


# ------------------------------------------------------------------
# Public entry points
# ------------------------------------------------------------------


def solve_aircraft_allocation(
    classified: ClassifiedItems,
    aircraft_type: AircraftType | str,
    *,
    profile: AircraftProfile | None = None,
    max_aircraft: int | None = None,
    pax_weight_lb: float | None = None,
) -> AllocationResult:
    """Single-type mode: as many aircraft of one type as the manifest needs.

    Raises ``ProfileConfigError`` for an unknown type or malformed profile.
    """
    profile = validate_profile(profile) if profile is not None else get_profile(aircraft_type)
    slot = FleetSlot(profile=profile, available=None)
    return _solve(
        classified,
        [slot],
        AircraftType(profile.aircraft_type),
        max_aircraft=max_aircraft,
        pax_weight_lb=pax_weight_lb,
    )


def solve_fleet_allocation(
    classified: ClassifiedItems,
    fleet: FleetConfig,
    *,
    profiles: dict[str, AircraftProfile] | None = None,
    max_aircraft: int | None = None,
    pax_weight_lb: float | None = None,
) -> AllocationResult:
    """Fleet-aware mode: finite per-type availability shared by both phases.

    Raises ``ProfileConfigError`` for an unknown type or malformed profile.
    """
    for profile in (profiles or {}).values():
        validate_profile(profile)
    slots = order_fleet(fleet, profiles)
    return _solve(classified, slots, None, max_aircraft=max_aircraft, pax_weight_lb=pax_weight_lb)


def allocate(
    classified: ClassifiedItems,
    aircraft_type: AircraftType | str | None = None,
    fleet: FleetConfig | None = None,
    *,
    profiles: dict[str, AircraftProfile] | None = None,
    max_aircraft: int | None = None,
    pax_weight_lb: float | None = None,
) -> ServiceResult[AllocationResult]:
    """Validate the configuration, then solve.

    Returns ``ServiceResult.fail`` with ``NO_AIRCRAFT_AVAILABLE`` when neither
    a type nor any aircraft in the fleet is given, or when a profile is
    unknown or malformed (``details["cause"] == "INVALID_PROFILE"``).
    Capacity shortfalls are a successful result with ``feasible=False``.
    """
    start = time.perf_counter()
    try:
        if fleet is not None:
            if not any(a.available_count > 0 for a in participating_entries(fleet)):
                return ServiceResult.fail(
                    ErrorCode.NO_AIRCRAFT_AVAILABLE,
                    "No aircraft available: the fleet has no aircraft to allocate",
                )
            result = solve_fleet_allocation(
                classified,
                fleet,
                profiles=profiles,
                max_aircraft=max_aircraft,
                pax_weight_lb=pax_weight_lb,
            )
        elif aircraft_type is not None:
            key = aircraft_type.value if isinstance(aircraft_type, AircraftType) else str(aircraft_type)
            result = solve_aircraft_allocation(
                classified,
                key,
                profile=(profiles or {}).get(key),
                max_aircraft=max_aircraft,
                pax_weight_lb=pax_weight_lb,
            )
        else:
            return ServiceResult.fail(
                ErrorCode.NO_AIRCRAFT_AVAILABLE,
                "No aircraft available: specify an aircraft type or a fleet",
            )
    except ProfileConfigError as exc:
        logger.error("Rejected aircraft configuration: %s", exc)
        return ServiceResult.fail(
            ErrorCode.NO_AIRCRAFT_AVAILABLE,
            f"No aircraft available: {exc}",
            aircraft_type=exc.aircraft_type,
            cause=ErrorCode.INVALID_PROFILE,
        )

    return ServiceResult.ok(result, duration_ms=(time.perf_counter() - start) * 1000)

