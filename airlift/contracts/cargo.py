"""Cargo manifest lines and the unit loads built from them."""

from __future__ import annotations

from pydantic import Field

from airlift.contracts.common import FrozenSolverModel, SolverModel
from airlift.contracts.enums import CargoCategory, Phase

# Description keywords that mark an item as weapons/ordnance.
WEAPONS_KEYWORDS = (
    "WEAPON",
    "BRU",
    "LOADER",
    "MUNITION",
    "BOMB",
    "MISSILE",
    "AMMO",
    "ORDNANCE",
)


class CargoItem(FrozenSolverModel):
    """A single manifest line, immutable once classified."""

    item_id: str = Field(..., min_length=1)
    description: str = ""
    weight_lb: float = Field(..., ge=0)
    length_in: float = Field(default=0, ge=0)
    width_in: float = Field(default=0, ge=0)
    height_in: float = Field(default=0, ge=0)
    category: CargoCategory
    advon: bool = Field(default=False, description="True for the priority (ADVON) phase")
    hazmat: bool = False
    lead_tcn: str | None = Field(default=None, description="Lead transportation control number")
    pax_count: int | None = Field(default=None, ge=1)
    pallet_id: str | None = Field(default=None, description="Existing id of a prebuilt pallet")

    @property
    def phase(self) -> Phase:
        return Phase.ADVON if self.advon else Phase.MAIN

    @property
    def is_weapons(self) -> bool:
        upper = self.description.upper()
        return any(kw in upper for kw in WEAPONS_KEYWORDS)


class ClassifiedItems(SolverModel):
    """Manifest split into the four solver input lists."""

    rolling_stock: list[CargoItem] = Field(default_factory=list)
    prebuilt_pallets: list[CargoItem] = Field(default_factory=list)
    loose_items: list[CargoItem] = Field(default_factory=list)
    pax_items: list[CargoItem] = Field(default_factory=list)

    @classmethod
    def from_items(cls, items: list[CargoItem]) -> ClassifiedItems:
        buckets: dict[str, list[CargoItem]] = {c.value: [] for c in CargoCategory}
        for item in items:
            buckets[CargoCategory(item.category).value].append(item)
        return cls(
            rolling_stock=buckets[CargoCategory.ROLLING_STOCK.value],
            prebuilt_pallets=buckets[CargoCategory.PREBUILT_PALLET.value],
            loose_items=buckets[CargoCategory.PALLETIZABLE.value],
            pax_items=buckets[CargoCategory.PAX.value],
        )

    def split_by_phase(self) -> tuple[ClassifiedItems, ClassifiedItems]:
        """Return ``(advon, main)`` with every list filtered by phase."""

        def pick(items: list[CargoItem], advon: bool) -> list[CargoItem]:
            return [i for i in items if i.advon == advon]

        return tuple(  # type: ignore[return-value]
            ClassifiedItems(
                rolling_stock=pick(self.rolling_stock, flag),
                prebuilt_pallets=pick(self.prebuilt_pallets, flag),
                loose_items=pick(self.loose_items, flag),
                pax_items=pick(self.pax_items, flag),
            )
            for flag in (True, False)
        )

    def all_items(self) -> list[CargoItem]:
        return [
            *self.rolling_stock,
            *self.prebuilt_pallets,
            *self.loose_items,
            *self.pax_items,
        ]

    @property
    def total_pax(self) -> int:
        return sum(i.pax_count or 1 for i in self.pax_items)

    @property
    def is_empty(self) -> bool:
        return not (
            self.rolling_stock or self.prebuilt_pallets or self.loose_items or self.pax_items
        )


class UnitLoad(FrozenSolverModel):
    """Items aggregated onto one 463L platform.

    Gross weight includes the platform tare with nets. Footprint is the full
    platform size, independent of how the items sit on it.
    """

    pallet_id: str
    items: list[CargoItem] = Field(default_factory=list)
    net_weight_lb: float = Field(..., ge=0)
    gross_weight_lb: float = Field(..., ge=0)
    height_in: float = Field(..., ge=0)
    footprint_length_in: float = 108
    footprint_width_in: float = 88
    hazmat: bool = False
    is_prebuilt: bool = False

    @property
    def is_weapons(self) -> bool:
        return any(i.is_weapons for i in self.items)

    @property
    def description(self) -> str:
        return ", ".join(i.description for i in self.items if i.description)
