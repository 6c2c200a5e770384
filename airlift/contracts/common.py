"""Base classes and shared types for airlift contracts.

Unit conventions (all contracts and API responses):
- **Lengths**: inches: suffix ``_in``
- **Weights**: pounds: suffix ``_lb``
- **Moments**: inch-pounds (no suffix, always ``*_moment``)
- **Stations**: inches aft of the aircraft datum (fuselage station, FS)
- **Lateral offsets**: inches from the centerline, positive to the right
- **CG positions**: percent of Mean Aerodynamic Chord: suffix ``_percent``

The solver works in a bay-local frame whose longitudinal origin is the
forward end of the cargo floor; ``AircraftProfile.cargo_bay_fs_start_in``
converts bay-local X to fuselage stations.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class SolverModel(BaseModel):
    """Base model with JSON-friendly serialization.

    - Enums serialize as string values.
    - ``to_json()`` produces a JSON-safe dict for the UI/export layers.
    - ``from_json()`` hydrates from such a dict.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_json(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "SolverModel":
        """Create a model instance from a JSON dict."""
        return cls.model_validate(data)


class FrozenSolverModel(SolverModel):
    """Immutable variant for reference data and classified cargo."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        frozen=True,
    )
