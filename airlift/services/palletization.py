"""Unit load builder: prebuilt pallet validation and 463L build-up of loose cargo.

Loose items are packed first-fit-decreasing onto one platform at a time. Each
item is placed by a two-pass grid search over the usable 104 x 84 in deck
(6 in coarse step, then 2 in fine step), trying both orientations. Whatever
does not fit on the current platform rolls over to the next one.

Pallet ids come from a ``PalletIdGenerator`` owned by the caller, so
independent solves never share numbering state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cmp_to_key

from airlift.contracts.cargo import CargoItem, UnitLoad
from airlift.reference.aircraft_profiles import PALLET_463L

logger = logging.getLogger(__name__)

_GRID_PASSES_IN = (6, 2)

# Sort tolerances: volumes within 100 in3 and weights within 50 lb tie.
_VOLUME_TOLERANCE_IN3 = 100
_WEIGHT_TOLERANCE_LB = 50


@dataclass
class PalletIdGenerator:
    """Sequential ``P-001`` style ids, scoped to one solve."""

    prefix: str = "P"
    counter: int = 0

    def next_id(self) -> str:
        self.counter += 1
        return f"{self.prefix}-{self.counter:03d}"


@dataclass
class _PackedItem:
    item: CargoItem
    x: float
    y: float
    rotated: bool

    @property
    def length_in(self) -> float:
        return self.item.width_in if self.rotated else self.item.length_in

    @property
    def width_in(self) -> float:
        return self.item.length_in if self.rotated else self.item.width_in


@dataclass
class PalletizationResult:
    pallets: list[UnitLoad] = field(default_factory=list)
    unpalletizable_items: list[CargoItem] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def total_pallets(self) -> int:
        return len(self.pallets)

    @property
    def total_weight_lb(self) -> float:
        return sum(p.gross_weight_lb for p in self.pallets)


# ------------------------------------------------------------------
# Prebuilt pallets
# ------------------------------------------------------------------


def validate_prebuilt_pallet(
    item: CargoItem, id_gen: PalletIdGenerator
) -> tuple[UnitLoad | None, list[str]]:
    """Wrap a prebuilt pallet as a ``UnitLoad``, or return why it is rejected."""
    errors: list[str] = []

    if item.height_in > PALLET_463L.max_height_in:
        errors.append(f'Height {item.height_in}" exceeds maximum {PALLET_463L.max_height_in}"')
    else:
        gross = item.weight_lb + PALLET_463L.tare_with_nets_lb
        limit = PALLET_463L.gross_limit_for_height(item.height_in)
        if gross > limit:
            errors.append(
                f'Gross weight {gross:g} lbs exceeds limit of {limit:g} lbs for height {item.height_in}"'
            )

    if errors:
        return None, errors

    pallet = UnitLoad(
        pallet_id=item.pallet_id or id_gen.next_id(),
        items=[item],
        net_weight_lb=item.weight_lb,
        gross_weight_lb=item.weight_lb + PALLET_463L.tare_with_nets_lb,
        height_in=item.height_in,
        footprint_length_in=PALLET_463L.length_in,
        footprint_width_in=PALLET_463L.width_in,
        hazmat=item.hazmat,
        is_prebuilt=True,
    )
    return pallet, []


# ------------------------------------------------------------------
# Loose item build-up
# ------------------------------------------------------------------


def single_item_rejection(item: CargoItem) -> str | None:
    """Reason an item can never ride on a 463L platform by itself, else None."""
    usable_l, usable_w = PALLET_463L.usable_length_in, PALLET_463L.usable_width_in
    fits_normal = item.length_in <= usable_l and item.width_in <= usable_w
    fits_rotated = item.width_in <= usable_l and item.length_in <= usable_w
    if not (fits_normal or fits_rotated):
        return f'footprint {item.length_in:g}x{item.width_in:g}" exceeds usable {usable_l:g}x{usable_w:g}"'
    if item.height_in > PALLET_463L.max_height_in:
        return f'height {item.height_in:g}" exceeds {PALLET_463L.max_height_in:g}"'
    limit = PALLET_463L.gross_limit_for_height(item.height_in)
    if item.weight_lb + PALLET_463L.tare_with_nets_lb > limit:
        return f"weight {item.weight_lb:g} lbs exceeds single pallet limit"
    return None


def _grid(extent: float, step: float) -> list[float]:
    points: list[float] = []
    pos = 0.0
    while pos <= extent + 1e-9:
        points.append(pos)
        pos += step
    return points


def _find_position(
    length_in: float, width_in: float, packed: list[_PackedItem]
) -> tuple[float, float] | None:
    """First collision-free corner for a footprint, or None."""
    free_l = PALLET_463L.usable_length_in - length_in
    free_w = PALLET_463L.usable_width_in - width_in
    if free_l < 0 or free_w < 0:
        return None

    for step in _GRID_PASSES_IN:
        for y in _grid(free_w, step):
            for x in _grid(free_l, step):
                collision = any(
                    not (
                        x + length_in <= p.x
                        or x >= p.x + p.length_in
                        or y + width_in <= p.y
                        or y >= p.y + p.width_in
                    )
                    for p in packed
                )
                if not collision:
                    return x, y
    return None


def _sort_ffd(items: list[CargoItem]) -> list[CargoItem]:
    """Largest volume first, then heaviest, then longest side (with tolerances)."""

    def compare(a: CargoItem, b: CargoItem) -> float:
        vol_a = a.length_in * a.width_in * a.height_in
        vol_b = b.length_in * b.width_in * b.height_in
        if abs(vol_b - vol_a) > _VOLUME_TOLERANCE_IN3:
            return vol_b - vol_a
        if abs(b.weight_lb - a.weight_lb) > _WEIGHT_TOLERANCE_LB:
            return b.weight_lb - a.weight_lb
        return max(b.length_in, b.width_in) - max(a.length_in, a.width_in)

    return sorted(items, key=cmp_to_key(compare))


def _pack_one_pallet(items: list[CargoItem]) -> tuple[list[_PackedItem], list[CargoItem]]:
    packed: list[_PackedItem] = []
    remaining: list[CargoItem] = []
    net_weight = 0.0
    height = 0.0

    for item in items:
        new_height = max(height, item.height_in)
        limit = PALLET_463L.gross_limit_for_height(new_height)
        if net_weight + item.weight_lb + PALLET_463L.tare_with_nets_lb > limit:
            remaining.append(item)
            continue

        placed = None
        for rotated in (False, True):
            length = item.width_in if rotated else item.length_in
            width = item.length_in if rotated else item.width_in
            pos = _find_position(length, width, packed)
            if pos is not None:
                placed = _PackedItem(item=item, x=pos[0], y=pos[1], rotated=rotated)
                break

        if placed is None:
            remaining.append(item)
            continue

        packed.append(placed)
        net_weight += item.weight_lb
        height = new_height

    return packed, remaining


def palletize_loose_items(
    items: list[CargoItem], id_gen: PalletIdGenerator
) -> tuple[list[UnitLoad], list[CargoItem]]:
    """Build loose items up onto as many platforms as needed.

    Returns ``(pallets, leftovers)``; leftovers are items that could not be
    placed even on an empty platform.
    """
    pallets: list[UnitLoad] = []
    remaining = _sort_ffd(items)

    while remaining:
        packed, remaining = _pack_one_pallet(remaining)
        if not packed:
            logger.warning(
                "Items cannot be palletized: %s", [i.item_id for i in remaining]
            )
            break

        contents = [p.item for p in packed]
        net = sum(i.weight_lb for i in contents)
        pallets.append(
            UnitLoad(
                pallet_id=id_gen.next_id(),
                items=contents,
                net_weight_lb=net,
                gross_weight_lb=net + PALLET_463L.tare_with_nets_lb,
                height_in=max(i.height_in for i in contents),
                footprint_length_in=PALLET_463L.length_in,
                footprint_width_in=PALLET_463L.width_in,
                hazmat=any(i.hazmat for i in contents),
                is_prebuilt=False,
            )
        )

    return pallets, remaining


def build_unit_loads(
    prebuilt_pallets: list[CargoItem],
    loose_items: list[CargoItem],
    id_gen: PalletIdGenerator | None = None,
) -> PalletizationResult:
    """Validate prebuilt pallets and build loose cargo into new unit loads.

    Nothing is dropped: every input item ends up on exactly one pallet or in
    ``unpalletizable_items`` with a warning.
    """
    id_gen = id_gen or PalletIdGenerator()
    result = PalletizationResult()

    for item in prebuilt_pallets:
        pallet, errors = validate_prebuilt_pallet(item, id_gen)
        if pallet is not None:
            result.pallets.append(pallet)
        else:
            result.warnings.append(f"Prebuilt pallet {item.item_id}: {', '.join(errors)}")
            result.unpalletizable_items.append(item)

    packable: list[CargoItem] = []
    oversized = 0
    for item in loose_items:
        reason = single_item_rejection(item)
        if reason is None:
            packable.append(item)
            continue
        oversized += 1
        result.unpalletizable_items.append(item)
        result.warnings.append(f"Item {item.item_id} could not be palletized - {reason}")

    built, leftovers = palletize_loose_items(packable, id_gen)
    result.pallets.extend(built)
    for item in leftovers:
        oversized += 1
        result.unpalletizable_items.append(item)
        result.warnings.append(f"Item {item.item_id} could not be palletized - dimensions exceed limits")

    if oversized:
        result.warnings.append(f"{oversized} items exceed single-item capacity")

    logger.debug(
        "Built %d pallets (%d prebuilt) from %d loose items, %d unpalletizable",
        result.total_pallets,
        sum(1 for p in result.pallets if p.is_prebuilt),
        len(loose_items),
        len(result.unpalletizable_items),
    )
    return result
