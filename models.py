"""Typed models and unit normalization for shipping calculations."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import ClassVar, Literal, Union

from units import LengthUnit, WeightUnit, convert_length, convert_weight

CUSTOM_PALLET_ID = "custom"


@dataclass(frozen=True)
class Package:
    length: float
    width: float
    height: float
    weight: float
    quantity: int = 1
    length_unit: LengthUnit = "cm"
    weight_unit: WeightUnit = "kg"
    id: str | None = None

    @property
    def volume(self) -> float:
        """Volume of all units in the package's own length unit, cubed."""
        return self.length * self.width * self.height * self.quantity

    @property
    def total_weight(self) -> float:
        return self.weight * self.quantity


@dataclass(frozen=True)
class PalletSize:
    id: str
    name: str
    length: float
    width: float
    height: float
    max_weight: float
    description: str = ""
    length_unit: LengthUnit = "cm"

    @property
    def is_custom(self) -> bool:
        return self.id == CUSTOM_PALLET_ID


@dataclass(frozen=True)
class Location:
    id: str
    name: str
    country: str
    zip_code: str
    tax_rate: float
    currency_code: str


@dataclass(frozen=True)
class ProductCategory:
    id: str
    name: str
    base_rate: float
    description: str = ""


@dataclass(frozen=True)
class _CostBasis:
    unit: str
    type: ClassVar[str] = ""
    units: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self) -> None:
        if self.unit not in self.units:
            raise ValueError(f"{self.type} basis unit must be one of {', '.join(self.units)}, got '{self.unit}'")


@dataclass(frozen=True)
class WeightBasis(_CostBasis):
    unit: Literal["kg", "lbs"] = "kg"
    type: ClassVar[str] = "weight"
    units: ClassVar[tuple[str, ...]] = ("kg", "lbs")


@dataclass(frozen=True)
class VolumeBasis(_CostBasis):
    unit: Literal["m3", "ft3"] = "m3"
    type: ClassVar[str] = "volume"
    units: ClassVar[tuple[str, ...]] = ("m3", "ft3")


@dataclass(frozen=True)
class DistanceBasis(_CostBasis):
    unit: Literal["km", "mi"] = "km"
    type: ClassVar[str] = "distance"
    units: ClassVar[tuple[str, ...]] = ("km", "mi")


CostBasis = Union[WeightBasis, VolumeBasis, DistanceBasis]

BASIS_TYPES: dict[str, type[_CostBasis]] = {
    "weight": WeightBasis,
    "volume": VolumeBasis,
    "distance": DistanceBasis,
}


@dataclass(frozen=True)
class ShippingCostConfig:
    basis: CostBasis
    rate_per_unit: float = 0.0
    currency: str = "USD"
    tax_rate: float = 0.0

    @classmethod
    def from_type(
        cls,
        basis_type: str,
        unit: str,
        rate_per_unit: float = 0.0,
        currency: str = "USD",
        tax_rate: float = 0.0,
    ) -> "ShippingCostConfig":
        """Build a config from the flat ``(type, unit)`` pair used by forms and files."""
        key = (basis_type or "").strip().lower()
        if key not in BASIS_TYPES:
            raise ValueError(f"Unknown cost basis '{basis_type}'. Use one of: {', '.join(BASIS_TYPES)}")
        return cls(
            basis=BASIS_TYPES[key](unit=unit),
            rate_per_unit=float(rate_per_unit),
            currency=currency,
            tax_rate=float(tax_rate),
        )

    @property
    def type(self) -> str:
        return self.basis.type

    @property
    def unit(self) -> str:
        return self.basis.unit


@dataclass
class ShippingResult:
    shipping_cost: float
    tax: float
    total_cost: float
    currency_code: str
    pallets_needed: int
    total_weight: float
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    calculations: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls, currency_code: str, warnings: list[str] | None = None) -> "ShippingResult":
        return cls(
            shipping_cost=0.0,
            tax=0.0,
            total_cost=0.0,
            currency_code=currency_code,
            pallets_needed=0,
            total_weight=0.0,
            warnings=list(warnings or []),
        )

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class StackingPlan:
    layers: int
    items_per_layer: int
    total_items: int
    pallets_needed: int
    calculations: list[str] = field(default_factory=list)
    items_per_row: int = 0
    rows_per_layer: int = 0
    rotated: bool = False

    @property
    def items_per_pallet(self) -> int:
        return self.items_per_layer * self.layers

    def as_dict(self) -> dict:
        return asdict(self)


def normalize_package(pkg: Package) -> Package:
    """Return a copy with lengths in millimeters and weight in kilograms."""
    return replace(
        pkg,
        length=convert_length(pkg.length, pkg.length_unit, "mm"),
        width=convert_length(pkg.width, pkg.length_unit, "mm"),
        height=convert_length(pkg.height, pkg.length_unit, "mm"),
        weight=convert_weight(pkg.weight, pkg.weight_unit, "kg"),
        length_unit="mm",
        weight_unit="kg",
    )


def normalize_pallet(pallet: PalletSize) -> PalletSize:
    """Return a copy with lengths in millimeters. ``max_weight`` is already kilograms."""
    return replace(
        pallet,
        length=convert_length(pallet.length, pallet.length_unit, "mm"),
        width=convert_length(pallet.width, pallet.length_unit, "mm"),
        height=convert_length(pallet.height, pallet.length_unit, "mm"),
        length_unit="mm",
    )
