import dataclasses

import pytest

from models import (
    DistanceBasis,
    Package,
    PalletSize,
    ShippingCostConfig,
    ShippingResult,
    VolumeBasis,
    WeightBasis,
    normalize_package,
    normalize_pallet,
)


def test_normalize_package_converts_to_mm_and_kg_without_mutating():
    pkg = Package(length=40, width=30, height=2.5, weight=1500, quantity=3, length_unit="cm", weight_unit="g", id="7")
    out = normalize_package(pkg)

    assert (out.length, out.width, out.height) == pytest.approx((400, 300, 25))
    assert out.weight == pytest.approx(1.5)
    assert out.length_unit == "mm"
    assert out.weight_unit == "kg"
    assert out.quantity == 3
    assert out.id == "7"
    assert pkg.length == 40 and pkg.length_unit == "cm"


def test_packages_are_immutable():
    pkg = Package(length=1, width=1, height=1, weight=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        pkg.length = 2  # type: ignore[misc]


def test_normalize_pallet_keeps_max_weight_in_kg():
    pallet = PalletSize(id="gma", name="GMA", length=48, width=40, height=6, max_weight=1000, length_unit="in")
    out = normalize_pallet(pallet)

    assert out.length == pytest.approx(1219.2)
    assert out.width == pytest.approx(1016)
    assert out.height == pytest.approx(152.4)
    assert out.max_weight == 1000
    assert out.length_unit == "mm"


def test_cost_basis_variants_only_accept_their_units():
    assert WeightBasis("lbs").type == "weight"
    assert VolumeBasis("ft3").type == "volume"
    assert DistanceBasis("mi").type == "distance"
    with pytest.raises(ValueError):
        WeightBasis("m3")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        DistanceBasis("kg")  # type: ignore[arg-type]


def test_cost_config_from_flat_type_and_unit():
    config = ShippingCostConfig.from_type("Volume", "m3", rate_per_unit="12.5", currency="EUR", tax_rate=19)
    assert isinstance(config.basis, VolumeBasis)
    assert config.type == "volume"
    assert config.unit == "m3"
    assert config.rate_per_unit == 12.5
    assert config.tax_rate == 19.0

    with pytest.raises(ValueError, match="Unknown cost basis"):
        ShippingCostConfig.from_type("speed", "km")
    with pytest.raises(ValueError):
        ShippingCostConfig.from_type("weight", "km")


def test_empty_result_carries_currency_and_warnings():
    result = ShippingResult.empty("GBP", warnings=["x"])
    assert result.as_dict() == {
        "shipping_cost": 0.0,
        "tax": 0.0,
        "total_cost": 0.0,
        "currency_code": "GBP",
        "pallets_needed": 0,
        "total_weight": 0.0,
        "warnings": ["x"],
        "recommendations": [],
        "calculations": [],
    }
