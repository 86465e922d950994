"""Pallet fit utilities: combined package proxy and layer stacking."""
from __future__ import annotations

from math import cbrt, ceil, floor
from typing import Iterable

from models import Package, PalletSize, StackingPlan, normalize_package, normalize_pallet

MAX_STACK_HEIGHT_MM = 2400
INVALID_DIMENSIONS_NOTE = "Invalid package dimensions"


def combined_dimensions(packages: Iterable[Package]) -> Package | None:
    """Collapse packages into one equivalent-volume cube.

    The cube keeps total volume and total weight only; it says nothing about
    how the packages would actually pack together.
    """
    standardized = [normalize_package(pkg) for pkg in packages]
    if not standardized:
        return None

    total_volume = sum(pkg.length * pkg.width * pkg.height * pkg.quantity for pkg in standardized)
    total_weight = sum(pkg.weight * pkg.quantity for pkg in standardized)
    dimension = cbrt(total_volume)
    return Package(
        length=dimension,
        width=dimension,
        height=dimension,
        weight=total_weight,
        quantity=1,
        length_unit="mm",
        weight_unit="kg",
    )


def packs_per_layer(pack_dims: tuple[float, float], pallet_dims: tuple[float, float]) -> tuple[int, int, bool]:
    """Return ``(items_per_row, rows_per_layer, rotated)`` for the better footprint.

    Only the two axis-aligned orientations are tried. Ties keep the
    unrotated one.
    """
    pack_l, pack_w = pack_dims
    pallet_l, pallet_w = pallet_dims
    straight = (floor(pallet_l / pack_l), floor(pallet_w / pack_w))
    rotated = (floor(pallet_l / pack_w), floor(pallet_w / pack_l))
    if straight[0] * straight[1] >= rotated[0] * rotated[1]:
        return straight[0], straight[1], False
    return rotated[0], rotated[1], True


def layers_allowed(pack_h: float, pallet_h: float, quantity: int, per_layer: int) -> int:
    """Layers needed for ``quantity`` items, capped by the stack height ceiling."""
    if per_layer <= 0:
        return 0
    max_layers_by_height = floor((MAX_STACK_HEIGHT_MM - pallet_h) / pack_h)
    return max(0, min(max_layers_by_height, ceil(quantity / per_layer)))


def plan_pallet_stacking(pkg: Package, pallet: PalletSize) -> StackingPlan:
    standardized_pkg = normalize_package(pkg)
    standardized_pallet = normalize_pallet(pallet)

    if standardized_pkg.length == 0 or standardized_pkg.width == 0 or standardized_pkg.height == 0:
        return StackingPlan(
            layers=0,
            items_per_layer=0,
            total_items=0,
            pallets_needed=0,
            calculations=[INVALID_DIMENSIONS_NOTE],
        )

    calculations: list[str] = []
    items_per_row, rows_per_layer, rotated = packs_per_layer(
        (standardized_pkg.length, standardized_pkg.width),
        (standardized_pallet.length, standardized_pallet.width),
    )
    items_per_layer = items_per_row * rows_per_layer

    calculations.append(f"Items per row: {items_per_row}")
    calculations.append(f"Rows per layer: {rows_per_layer}")
    calculations.append(f"Total items per layer: {items_per_layer}")

    layers = layers_allowed(standardized_pkg.height, standardized_pallet.height, standardized_pkg.quantity, items_per_layer)
    stack_height = layers * standardized_pkg.height + standardized_pallet.height

    calculations.append(f"Maximum layers possible: {layers}")
    calculations.append(f"Total stack height: {stack_height:.0f}mm")

    items_per_pallet = items_per_layer * layers
    pallets_needed = ceil(standardized_pkg.quantity / items_per_pallet) if items_per_pallet > 0 else 0

    calculations.append(f"Items per pallet: {items_per_pallet}")
    calculations.append(f"Pallets needed: {pallets_needed}")

    return StackingPlan(
        layers=layers,
        items_per_layer=items_per_layer,
        total_items=standardized_pkg.quantity,
        pallets_needed=pallets_needed,
        calculations=calculations,
        items_per_row=items_per_row,
        rows_per_layer=rows_per_layer,
        rotated=rotated,
    )


def layer_grid(plan: StackingPlan, pkg: Package) -> list[dict]:
    """Footprint rectangles (mm) of one layer, for layout diagrams."""
    standardized_pkg = normalize_package(pkg)
    step_l, step_w = standardized_pkg.length, standardized_pkg.width
    if plan.rotated:
        step_l, step_w = step_w, step_l
    return [
        {"x_mm": col * step_l, "y_mm": row * step_w, "length_mm": step_l, "width_mm": step_w}
        for row in range(plan.rows_per_layer)
        for col in range(plan.items_per_row)
    ]
