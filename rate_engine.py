"""Shipping cost engine: base cost by basis, tax, warnings and recommendations."""
from __future__ import annotations

import logging
from math import ceil

from fit_engine import INVALID_DIMENSIONS_NOTE, plan_pallet_stacking
from models import (
    DistanceBasis,
    Location,
    Package,
    PalletSize,
    ShippingCostConfig,
    ShippingResult,
    VolumeBasis,
    WeightBasis,
    normalize_package,
    normalize_pallet,
)
from units import FT3_PER_M3, LB_PER_KG, format_number

logger = logging.getLogger(__name__)

# Stand-in route lengths until real routing exists.
PLACEHOLDER_DISTANCE = {
    "km": 1000.0,
    "mi": 621.371,
}

PALLET_WEIGHT_FRACTION = 0.1
LOW_UTILIZATION_PCT = 40.0
HIGH_UTILIZATION_PCT = 90.0

MM3_PER_M3 = 1_000_000_000


def _base_cost(cost_config: ShippingCostConfig, total_weight_kg: float, volume_m3: float, pallets_needed: int) -> tuple[float, str]:
    basis = cost_config.basis
    unit = basis.unit
    rate = format_number(cost_config.rate_per_unit)
    currency = cost_config.currency

    if isinstance(basis, WeightBasis):
        weight = total_weight_kg if unit == "kg" else total_weight_kg * LB_PER_KG
        cost = weight * cost_config.rate_per_unit
        return cost, f"Weight-based cost: {weight:.2f} {unit} × {rate} {currency}/{unit}"
    if isinstance(basis, VolumeBasis):
        volume = volume_m3 if unit == "m3" else volume_m3 * FT3_PER_M3
        cost = volume * cost_config.rate_per_unit
        return cost, f"Volume-based cost: {volume:.2f} {unit} × {rate} {currency}/{unit}"
    if isinstance(basis, DistanceBasis):
        distance = PLACEHOLDER_DISTANCE[unit]
        cost = distance * cost_config.rate_per_unit * pallets_needed
        return cost, f"Distance-based cost: {distance:.2f} {unit} × {rate} {currency}/{unit} × {pallets_needed} pallets"
    raise TypeError(f"Unsupported cost basis: {basis!r}")


def volume_utilization(volume_m3: float, pallet: PalletSize, pallets_needed: int) -> float:
    """Share of allocated pallet volume filled by the shipment, in percent."""
    standardized_pallet = normalize_pallet(pallet)
    pallet_volume = standardized_pallet.length * standardized_pallet.width * standardized_pallet.height / MM3_PER_M3
    allocated = pallet_volume * pallets_needed
    if allocated <= 0:
        return 0.0
    return volume_m3 / allocated * 100


def utilization_recommendations(utilization_pct: float, pallets_needed: int) -> list[str]:
    recommendations = []
    if utilization_pct < LOW_UTILIZATION_PCT:
        recommendations.append("Consider using a smaller pallet size for better cost efficiency")
    if utilization_pct > HIGH_UTILIZATION_PCT:
        recommendations.append("High volume utilization - ensure proper securing of goods")
    if pallets_needed > 1:
        recommendations.append(
            f"Multiple pallets required ({pallets_needed}) - consider splitting shipment or using larger pallets if available"
        )
    return recommendations


def calculate_shipping_cost(
    pkg: Package,
    from_location: Location | None,
    to_location: Location | None,
    pallet: PalletSize,
    cost_config: ShippingCostConfig,
) -> ShippingResult:
    """Cost one package line on one pallet type.

    Locations are accepted for context only; tax rate and currency come from
    ``cost_config``.
    """
    standardized_pkg = normalize_package(pkg)
    standardized_pallet = normalize_pallet(pallet)

    warnings: list[str] = []
    calculations: list[str] = []

    volume = standardized_pkg.length * standardized_pkg.width * standardized_pkg.height * standardized_pkg.quantity / MM3_PER_M3
    calculations.append(f"Package volume: {volume:.3f} m³")

    total_weight = standardized_pkg.weight * standardized_pkg.quantity
    calculations.append(f"Total package weight: {total_weight:.2f} kg")

    stacking = plan_pallet_stacking(pkg, pallet)
    capacity = stacking.items_per_layer * stacking.layers
    if capacity > 0:
        pallets_by_volume = ceil(standardized_pkg.quantity / capacity)
        weight_per_pallet = total_weight / pallets_by_volume if pallets_by_volume else total_weight
    else:
        if stacking.calculations == [INVALID_DIMENSIONS_NOTE]:
            warnings.append(INVALID_DIMENSIONS_NOTE)
        else:
            warnings.append("Package does not fit on the selected pallet")
        pallets_by_volume = 0
        weight_per_pallet = total_weight

    max_weight = standardized_pallet.max_weight
    pallets_by_weight = ceil(total_weight / max_weight) if max_weight > 0 else 0
    pallets_needed = max(pallets_by_volume, pallets_by_weight)

    calculations.append(f"Pallets needed by volume: {pallets_by_volume}")
    calculations.append(f"Pallets needed by weight: {pallets_by_weight}")
    calculations.append(f"Total pallets needed: {pallets_needed}")

    base_cost, cost_line = _base_cost(cost_config, total_weight, volume, pallets_needed)
    calculations.append(cost_line)

    pallet_weight = max_weight * PALLET_WEIGHT_FRACTION
    total_weight_with_pallets = total_weight + pallet_weight * pallets_needed
    calculations.append(f"Pallet weight (each): {pallet_weight:.2f} kg")
    calculations.append(f"Total weight including pallets: {total_weight_with_pallets:.2f} kg")

    calculations.append(f"Base shipping cost: {cost_config.currency} {base_cost:.2f}")

    if max_weight > 0 and weight_per_pallet > max_weight:
        warnings.append(
            f"Weight per pallet ({weight_per_pallet:.2f}kg) exceeds pallet maximum capacity of {format_number(max_weight)}kg"
        )

    utilization = volume_utilization(volume, pallet, pallets_needed)
    calculations.append(f"Pallet utilization: {utilization:.1f}%")
    recommendations = utilization_recommendations(utilization, pallets_needed)

    tax = base_cost * (cost_config.tax_rate / 100)
    calculations.append(f"Tax calculation: {base_cost:.2f} × {format_number(cost_config.tax_rate)}%")

    logger.debug(
        "Costed %s package(s): %s pallet(s), base %.2f %s",
        standardized_pkg.quantity,
        pallets_needed,
        base_cost,
        cost_config.currency,
    )
    return ShippingResult(
        shipping_cost=base_cost,
        tax=tax,
        total_cost=base_cost + tax,
        currency_code=cost_config.currency,
        pallets_needed=pallets_needed,
        total_weight=total_weight_with_pallets,
        warnings=warnings,
        recommendations=recommendations,
        calculations=calculations,
    )
