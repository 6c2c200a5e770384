"""Back-of-envelope aircraft count estimates (no placement performed)."""

from typing import Literal

from pydantic import Field

from airlift.contracts.common import SolverModel
from airlift.contracts.enums import AircraftType


class MinimumAircraftEstimate(SolverModel):
    aircraft_type: AircraftType
    by_pallets: int = Field(..., ge=0)
    by_weight: int = Field(..., ge=0)
    minimum: int = Field(..., ge=0)


class QuickEstimate(SolverModel):
    """Aircraft count from totals only; rolling stock is approximated by length."""

    aircraft_type: AircraftType
    estimated_aircraft: int = Field(..., ge=0)
    weight_limited: bool
    position_limited: bool
    confidence: Literal["high", "medium", "low"]
