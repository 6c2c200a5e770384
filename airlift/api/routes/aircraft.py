"""Aircraft reference profile endpoints (read-only)."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from airlift.errors import ProfileConfigError
from airlift.reference.aircraft_profiles import AIRCRAFT_PROFILES, get_profile

router = APIRouter(prefix="/aircraft", tags=["aircraft"])


@router.get("")
async def list_aircraft() -> list[dict]:
    return [p.to_json() for p in AIRCRAFT_PROFILES.values()]


@router.get("/{aircraft_type}")
async def get_aircraft(aircraft_type: str) -> dict:
    try:
        profile = get_profile(aircraft_type)
    except ProfileConfigError:
        raise HTTPException(status_code=404, detail="Aircraft type not found") from None
    return profile.to_json()
