"""Airlift data contracts: Pydantic v2 models for the load allocation solver.

Inputs
------
- ``CargoItem``: one manifest line (vehicle, loose cargo, prebuilt pallet or PAX)
- ``ClassifiedItems``: the manifest bucketed by category
- ``FleetConfig`` / ``FleetAvailability``: per-type aircraft availability

Reference data (static, validated before a solve)
-------------------------------------------------
- ``AircraftProfile``: bay geometry, structural limits, CG envelope, lanes

Calculated (never persisted here)
---------------------------------
- ``UnitLoad``: loose items built up onto 463L pallets
- ``PalletPlacement`` / ``VehiclePlacement``: where each load sits in the bay
- ``CGResult``: moment-based center of gravity for a set of loads
- ``AircraftLoadPlan``: one aircraft's assignment
- ``AllocationResult``: the aggregate over every aircraft, with shortfall
"""

from airlift.contracts.enums import (
    AircraftType,
    CargoCategory,
    EnvelopeStatus,
    IssueSeverity,
    LateralSide,
    PalletOrientation,
    Phase,
)
from airlift.contracts.common import FrozenSolverModel, SolverModel
from airlift.contracts.result import ErrorCode, ServiceError, ServiceResult
from airlift.contracts.cargo import WEAPONS_KEYWORDS, CargoItem, ClassifiedItems, UnitLoad
from airlift.contracts.aircraft import (
    AircraftProfile,
    FleetAvailability,
    FleetConfig,
    LanePosition,
)
from airlift.contracts.estimate import MinimumAircraftEstimate, QuickEstimate
from airlift.contracts.load_plan import (
    AircraftLoadPlan,
    AllocationResult,
    CGResult,
    FleetUsage,
    PalletPlacement,
    PaxAssignment,
    Shortfall,
    VehiclePlacement,
)

__all__ = [
    # Enums
    "AircraftType",
    "CargoCategory",
    "EnvelopeStatus",
    "IssueSeverity",
    "LateralSide",
    "PalletOrientation",
    "Phase",
    # Common
    "FrozenSolverModel",
    "SolverModel",
    "ErrorCode",
    "ServiceError",
    "ServiceResult",
    # Cargo
    "WEAPONS_KEYWORDS",
    "CargoItem",
    "ClassifiedItems",
    "UnitLoad",
    # Aircraft
    "AircraftProfile",
    "FleetAvailability",
    "FleetConfig",
    "LanePosition",
    # Load plans
    "AircraftLoadPlan",
    "AllocationResult",
    "CGResult",
    "FleetUsage",
    "PalletPlacement",
    "PaxAssignment",
    "Shortfall",
    "VehiclePlacement",
    # Estimates
    "MinimumAircraftEstimate",
    "QuickEstimate",
]
