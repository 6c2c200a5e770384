"""Load ordering shared by both placers: weapons first, then heaviest first."""

from __future__ import annotations

from typing import Callable, TypeVar

from airlift.contracts.cargo import CargoItem, UnitLoad

T = TypeVar("T")


def priority_sorted(
    loads: list[T], is_weapons: Callable[[T], bool], weight: Callable[[T], float]
) -> list[T]:
    """Stable sort: weapons/ordnance ahead of everything else, then by descending weight."""
    return sorted(loads, key=lambda load: (not is_weapons(load), -weight(load)))


def sort_rolling_stock(items: list[CargoItem]) -> list[CargoItem]:
    return priority_sorted(items, lambda i: i.is_weapons, lambda i: i.weight_lb)


def sort_pallets(pallets: list[UnitLoad]) -> list[UnitLoad]:
    return priority_sorted(pallets, lambda p: p.is_weapons, lambda p: p.gross_weight_lb)
