"""End-to-end shipment planning over a list of packages."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from fit_engine import combined_dimensions, plan_pallet_stacking
from models import Location, Package, PalletSize, ShippingCostConfig, ShippingResult, StackingPlan
from rate_engine import calculate_shipping_cost

logger = logging.getLogger(__name__)

NO_PACKAGES_WARNING = "No packages to calculate"


def calculate_shipping_cost_multiple(
    packages: Sequence[Package],
    from_location: Location | None,
    to_location: Location | None,
    pallet: PalletSize,
    cost_config: ShippingCostConfig,
    use_pallet: bool,
) -> ShippingResult:
    """Cost a whole shipment.

    Without pallets the packages are collapsed into one equivalent-volume cube
    and costed once. With pallets every package line gets its own pallet
    allocation and the per-line results are summed; lines never share a
    pallet, so the two modes legitimately disagree.
    """
    if not use_pallet:
        combined = combined_dimensions(packages)
        if combined is None:
            return ShippingResult.empty(cost_config.currency, warnings=[NO_PACKAGES_WARNING])
        return calculate_shipping_cost(combined, from_location, to_location, pallet, cost_config)

    total = ShippingResult.empty(cost_config.currency)
    for index, pkg in enumerate(packages, start=1):
        result = calculate_shipping_cost(pkg, from_location, to_location, pallet, cost_config)
        total.shipping_cost += result.shipping_cost
        total.tax += result.tax
        total.pallets_needed += result.pallets_needed
        total.total_weight += result.total_weight

        total.calculations.append(f"Package {index} calculations:")
        total.calculations.extend(result.calculations)
        total.warnings.extend(result.warnings)
        total.recommendations.extend(result.recommendations)

    total.total_cost = total.shipping_cost + total.tax
    return total


@dataclass
class ShipmentRequest:
    packages: list[Package]
    from_location: Location | None
    to_location: Location | None
    pallet: PalletSize
    cost_config: ShippingCostConfig
    use_pallet: bool = True
    custom_pallet: PalletSize | None = None

    @property
    def effective_pallet(self) -> PalletSize:
        if self.pallet.is_custom and self.custom_pallet is not None:
            return self.custom_pallet
        return self.pallet


@dataclass
class ShipmentPlan:
    shipping: ShippingResult
    stacking: StackingPlan
    pallet: PalletSize
    combined_package: Package | None = None
    packages: list[Package] = field(default_factory=list)


def empty_stacking_plan() -> StackingPlan:
    return StackingPlan(layers=0, items_per_layer=0, total_items=0, pallets_needed=0)


def plan_shipment(request: ShipmentRequest) -> ShipmentPlan:
    """Run the calculate action: shipment cost plus the combined package's stacking plan."""
    pallet = request.effective_pallet
    shipping = calculate_shipping_cost_multiple(
        request.packages,
        request.from_location,
        request.to_location,
        pallet,
        request.cost_config,
        request.use_pallet,
    )
    combined = combined_dimensions(request.packages)
    stacking = plan_pallet_stacking(combined, pallet) if combined is not None else empty_stacking_plan()
    logger.info(
        "Planned %d package line(s) on %s: %s pallet(s), total %.2f %s",
        len(request.packages),
        pallet.name,
        shipping.pallets_needed,
        shipping.total_cost,
        shipping.currency_code,
    )
    return ShipmentPlan(
        shipping=shipping,
        stacking=stacking,
        pallet=pallet,
        combined_package=combined,
        packages=list(request.packages),
    )
