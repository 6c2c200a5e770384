"""Load allocation endpoints.

The solver is synchronous and CPU-bound, so the solve endpoints are plain
``def`` handlers and run in FastAPI's threadpool.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from airlift.api.deps import get_app_settings
from airlift.contracts.aircraft import FleetConfig
from airlift.contracts.cargo import CargoItem, ClassifiedItems
from airlift.contracts.common import SolverModel
from airlift.contracts.enums import AircraftType
from airlift.errors import ProfileConfigError
from airlift.services.estimates import calculate_minimum_aircraft, quick_estimate_aircraft
from airlift.services.fleet_allocator import allocate
from airlift.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/allocations", tags=["allocations"])


class AllocationRequest(SolverModel):
    """A flat manifest plus either one aircraft type or a fleet."""

    items: list[CargoItem] = Field(default_factory=list)
    aircraft_type: AircraftType | None = None
    fleet: FleetConfig | None = None


class EstimateRequest(SolverModel):
    aircraft_type: AircraftType
    total_weight_lb: float = Field(..., ge=0)
    pallet_count: int = Field(default=0, ge=0)
    rolling_stock_count: int = Field(default=0, ge=0)


@router.post("")
def create_allocation(
    request: AllocationRequest,
    settings: Settings = Depends(get_app_settings),
) -> dict:
    classified = ClassifiedItems.from_items(request.items)
    result = allocate(
        classified,
        aircraft_type=request.aircraft_type,
        fleet=request.fleet,
        max_aircraft=settings.max_aircraft_per_phase,
        pax_weight_lb=settings.pax_weight_lb,
    )
    if not result.success or result.data is None:
        raise HTTPException(status_code=422, detail=result.error.model_dump() if result.error else None)

    logger.info(
        "Allocated %d items onto %d aircraft in %.1f ms",
        len(request.items),
        result.data.total_aircraft,
        result.duration_ms or 0,
    )
    return result.data.to_json()


@router.post("/estimate")
def estimate_aircraft(request: EstimateRequest) -> dict:
    try:
        quick = quick_estimate_aircraft(
            request.total_weight_lb,
            request.pallet_count,
            request.rolling_stock_count,
            request.aircraft_type,
        )
        minimum = calculate_minimum_aircraft(
            request.pallet_count, request.total_weight_lb, request.aircraft_type
        )
    except ProfileConfigError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from None
    return {"quick": quick.to_json(), "minimum": minimum.to_json()}
