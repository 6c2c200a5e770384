"""CLI entry point for the load allocation solver.

Usage:
    python -m airlift.cli --manifest items.json --aircraft C-17
    python -m airlift.cli --manifest items.json --fleet fleet.json --output result.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from airlift.contracts.aircraft import FleetConfig
from airlift.contracts.cargo import CargoItem, ClassifiedItems
from airlift.contracts.enums import AircraftType
from airlift.errors import ManifestError, SettingsError
from airlift.services.fleet_allocator import allocate
from airlift.services.weight_balance import cob_status_message, compute_plan_cg
from airlift.settings import get_settings

logger = logging.getLogger(__name__)


def load_manifest(path: Path) -> list[CargoItem]:
    """Read a manifest file: a JSON list of items or ``{"items": [...]}``."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc

    if isinstance(raw, dict):
        raw = raw.get("items")
    if not isinstance(raw, list):
        raise ManifestError(f"Manifest {path} must be a list of items or an object with 'items'")

    try:
        return [CargoItem.model_validate(entry) for entry in raw]
    except ValidationError as exc:
        raise ManifestError(f"Invalid manifest {path}: {exc}") from exc


def load_fleet(path: Path) -> FleetConfig:
    try:
        return FleetConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        raise ManifestError(f"Invalid fleet file {path}: {exc}") from exc


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Airlift load allocation solver")
    parser.add_argument("--manifest", type=Path, required=True, help="Path to manifest JSON")
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--aircraft",
        type=str,
        default=AircraftType.C17.value,
        help="Aircraft type for a single-type solve (default: C-17)",
    )
    target.add_argument("--fleet", type=Path, help="Path to fleet availability JSON")
    parser.add_argument("--output", type=Path, help="Write the allocation result JSON here")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except SettingsError as exc:
        parser.exit(1, f"Configuration error: {exc}\n")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        items = load_manifest(args.manifest)
        fleet = load_fleet(args.fleet) if args.fleet else None
    except ManifestError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Loaded %d manifest items from %s", len(items), args.manifest)
    outcome = allocate(
        ClassifiedItems.from_items(items),
        aircraft_type=None if fleet else args.aircraft,
        fleet=fleet,
        max_aircraft=settings.max_aircraft_per_phase,
        pax_weight_lb=settings.pax_weight_lb,
    )
    if not outcome.success or outcome.data is None:
        err = outcome.error
        logger.error("Allocation rejected: %s", f"[{err.code}] {err.message}" if err else "unknown error")
        return 1

    result = outcome.data
    for plan in result.load_plans:
        cg = compute_plan_cg(plan.pallets, plan.rolling_stock, plan.profile, plan.pax_weight_lb)
        logger.info(
            "%s: %d pallets, %d vehicles, %d PAX, %.0f lb - %s",
            plan.aircraft_id,
            len(plan.pallets),
            len(plan.rolling_stock),
            plan.pax_count,
            plan.total_weight_lb,
            cob_status_message(cg),
        )
    for warning in result.warnings:
        logger.warning("%s", warning)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(result.to_json(), indent=2), encoding="utf-8")
        logger.info("Wrote allocation result to %s", args.output)

    logger.info(
        "Allocation complete: %d aircraft, %s",
        result.total_aircraft,
        "feasible" if result.feasible else f"shortfall ({result.shortfall.reason})",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
