"""Environment-driven configuration.

Values come from the process environment after ``load_dotenv()`` has read a
``.env`` file from the working directory, if one exists.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from airlift.errors import SettingsError
from airlift.reference.aircraft_profiles import PAX_WEIGHT_LB

DEFAULT_MAX_AIRCRAFT_PER_PHASE = 50


@dataclass(frozen=True)
class Settings:
    max_aircraft_per_phase: int = DEFAULT_MAX_AIRCRAFT_PER_PHASE
    pax_weight_lb: float = PAX_WEIGHT_LB
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)


def _positive(name: str, default: float, cast: type) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise SettingsError(name, raw, "expected a number") from None
    if not math.isfinite(value) or value <= 0:
        raise SettingsError(name, raw, "must be a positive number")
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once per process. Tests call ``get_settings.cache_clear()``.

    Raises ``SettingsError`` when a numeric setting is not a positive number.
    """
    load_dotenv()
    return Settings(
        max_aircraft_per_phase=_positive(
            "AIRLIFT_MAX_AIRCRAFT_PER_PHASE", DEFAULT_MAX_AIRCRAFT_PER_PHASE, int
        ),
        pax_weight_lb=_positive("AIRLIFT_PAX_WEIGHT_LB", PAX_WEIGHT_LB, float),
        log_level=os.environ.get("AIRLIFT_LOG_LEVEL", "INFO").upper(),
        cors_origins=tuple(
            os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
        ),
    )
