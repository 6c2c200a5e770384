"""Aircraft count estimates from manifest totals.

These skip placement entirely and answer "roughly how many aircraft" for
planning screens. Position capacity comes from the same slot grid the pallet
placer uses.
"""

from __future__ import annotations

import math

from airlift.contracts.enums import AircraftType
from airlift.contracts.estimate import MinimumAircraftEstimate, QuickEstimate
from airlift.reference.aircraft_profiles import PALLET_463L, get_profile
from airlift.services.pallet_placer import build_slot_grid

# Average rolling-stock length used when only a vehicle count is known
ROLLING_STOCK_LENGTH_ESTIMATE_IN = 200


def pallets_per_aircraft(aircraft_type: AircraftType | str) -> int:
    return len(build_slot_grid(get_profile(aircraft_type)))


def calculate_minimum_aircraft(
    total_pallets: int, total_weight_lb: float, aircraft_type: AircraftType | str
) -> MinimumAircraftEstimate:
    """Lower bound on aircraft: the larger of the position-bound and weight-bound counts."""
    profile = get_profile(aircraft_type)
    per_aircraft = pallets_per_aircraft(aircraft_type)
    by_pallets = math.ceil(total_pallets / per_aircraft) if per_aircraft else 0
    by_weight = math.ceil(total_weight_lb / profile.max_payload_lb)
    return MinimumAircraftEstimate(
        aircraft_type=profile.aircraft_type,
        by_pallets=by_pallets,
        by_weight=by_weight,
        minimum=max(by_pallets, by_weight),
    )


def quick_estimate_aircraft(
    total_weight_lb: float,
    pallet_count: int,
    rolling_stock_count: int,
    aircraft_type: AircraftType | str,
) -> QuickEstimate:
    profile = get_profile(aircraft_type)
    per_aircraft = pallets_per_aircraft(aircraft_type)

    rs_positions = math.ceil(
        rolling_stock_count * ROLLING_STOCK_LENGTH_ESTIMATE_IN / PALLET_463L.length_in
    )
    positions_needed = pallet_count + rs_positions
    by_positions = math.ceil(positions_needed / per_aircraft) if per_aircraft else 0
    by_weight = math.ceil(total_weight_lb / profile.max_payload_lb)

    return QuickEstimate(
        aircraft_type=profile.aircraft_type,
        estimated_aircraft=max(by_positions, by_weight),
        weight_limited=by_weight >= by_positions,
        position_limited=by_positions > by_weight,
        confidence="medium" if rolling_stock_count > 0 else "high",
    )
