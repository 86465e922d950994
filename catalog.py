"""Reference data (pallet sizes, locations, product categories) and CSV templates."""
from __future__ import annotations

import csv
import io
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from field_specs import TABLE_SPECS
from models import CUSTOM_PALLET_ID, Location, PalletSize, ProductCategory

logger = logging.getLogger(__name__)

CATALOG_ENV_VAR = "PALLET_CALC_CATALOG_PATH"

DEFAULT_PALLET_SIZES: list[dict] = [
    {"id": "eur1", "name": "EUR 1 (EPAL)", "length": 120, "width": 80, "height": 14.4, "max_weight": 1500, "description": "Standard European pallet", "length_unit": "cm"},
    {"id": "eur2", "name": "EUR 2 (Industrial)", "length": 120, "width": 100, "height": 14.4, "max_weight": 1250, "description": "Industrial pallet", "length_unit": "cm"},
    {"id": "eur6", "name": "EUR 6 (Half)", "length": 80, "width": 60, "height": 14.4, "max_weight": 500, "description": "Half-size European pallet", "length_unit": "cm"},
    {"id": "quarter", "name": "Quarter pallet", "length": 60, "width": 40, "height": 14.4, "max_weight": 250, "description": "Display / quarter pallet", "length_unit": "cm"},
    {"id": "gma", "name": "GMA 48x40", "length": 48, "width": 40, "height": 6, "max_weight": 1000, "description": "North American grocery pallet", "length_unit": "in"},
    {"id": "us4242", "name": "US 42x42", "length": 42, "width": 42, "height": 6, "max_weight": 1100, "description": "Telecommunications / paint pallet", "length_unit": "in"},
]

DEFAULT_LOCATIONS: list[dict] = [
    {"id": "nyc", "name": "New York", "country": "US", "zip_code": "10001", "tax_rate": 8.875, "currency_code": "USD"},
    {"id": "lax", "name": "Los Angeles", "country": "US", "zip_code": "90001", "tax_rate": 9.5, "currency_code": "USD"},
    {"id": "yyz", "name": "Toronto", "country": "CA", "zip_code": "M5H 2N2", "tax_rate": 13.0, "currency_code": "CAD"},
    {"id": "lon", "name": "London", "country": "GB", "zip_code": "EC1A 1BB", "tax_rate": 20.0, "currency_code": "GBP"},
    {"id": "ham", "name": "Hamburg", "country": "DE", "zip_code": "20095", "tax_rate": 19.0, "currency_code": "EUR"},
]

DEFAULT_PRODUCT_CATEGORIES: list[dict] = [
    {"id": "general", "name": "General Merchandise", "base_rate": 1.0, "description": "Standard goods"},
    {"id": "electronics", "name": "Electronics", "base_rate": 1.25, "description": "Consumer and business electronics"},
    {"id": "fragile", "name": "Fragile", "base_rate": 1.5, "description": "Glass, ceramics and similar"},
    {"id": "bulk", "name": "Bulk Materials", "base_rate": 0.8, "description": "Dense, robust freight"},
]

DEFAULT_SETTINGS: dict = {
    "length_unit": "cm",
    "weight_unit": "kg",
    "use_pallet": True,
    "cost_type": "weight",
    "cost_unit": "kg",
    "rate_per_unit": 0.0,
    "currency": "USD",
    "tax_rate": 0.0,
}

TEMPLATE_SPECS: list[tuple[str, str]] = [
    ("packages", "packages_template.csv"),
]


@dataclass(frozen=True)
class Catalog:
    pallet_sizes: list[PalletSize]
    locations: list[Location]
    product_categories: list[ProductCategory]
    defaults: dict = field(default_factory=dict)

    def pallet(self, pallet_id: str) -> PalletSize:
        if pallet_id == CUSTOM_PALLET_ID:
            return custom_pallet()
        for pallet in self.pallet_sizes:
            if pallet.id == pallet_id:
                return pallet
        raise KeyError(f"Unknown pallet size: {pallet_id}")

    def location(self, location_id: str) -> Location:
        for location in self.locations:
            if location.id == location_id:
                return location
        raise KeyError(f"Unknown location: {location_id}")

    def category(self, category_id: str) -> ProductCategory:
        for category in self.product_categories:
            if category.id == category_id:
                return category
        raise KeyError(f"Unknown product category: {category_id}")


def custom_pallet(length: float = 0, width: float = 0, height: float = 0, max_weight: float = 0, length_unit: str = "cm") -> PalletSize:
    return PalletSize(
        id=CUSTOM_PALLET_ID,
        name="Custom Pallet",
        length=float(length),
        width=float(width),
        height=float(height),
        max_weight=float(max_weight),
        description="Custom dimensions",
        length_unit=length_unit,  # type: ignore[arg-type]
    )


def _pallet_from_row(row: dict) -> PalletSize:
    return PalletSize(
        id=str(row["id"]),
        name=str(row["name"]),
        length=float(row["length"]),
        width=float(row["width"]),
        height=float(row["height"]),
        max_weight=float(row.get("max_weight", row.get("maxWeight", 0)) or 0),
        description=str(row.get("description") or ""),
        length_unit=row.get("length_unit", row.get("lengthUnit", "cm")),
    )


def _location_from_row(row: dict) -> Location:
    return Location(
        id=str(row["id"]),
        name=str(row["name"]),
        country=str(row.get("country") or ""),
        zip_code=str(row.get("zip_code", row.get("zipCode", "")) or ""),
        tax_rate=float(row.get("tax_rate", row.get("taxRate", 0)) or 0),
        currency_code=str(row.get("currency_code", row.get("currencyCode", "USD")) or "USD"),
    )


def _category_from_row(row: dict) -> ProductCategory:
    return ProductCategory(
        id=str(row["id"]),
        name=str(row["name"]),
        base_rate=float(row.get("base_rate", row.get("baseRate", 0)) or 0),
        description=str(row.get("description") or ""),
    )


def catalog_path() -> Path | None:
    env_path = os.getenv(CATALOG_ENV_VAR)
    if not env_path:
        return None
    return Path(env_path).expanduser().resolve()


def load_catalog(path: str | Path | None = None) -> Catalog:
    """Load reference data from a JSON file, or fall back to the built-in lists.

    Keys accepted: ``pallet_sizes`` (or ``palletSizes``), ``locations``,
    ``product_categories`` (or ``productCategories``) and ``defaults``. Any
    missing key keeps its built-in value.
    """
    source = Path(path) if path is not None else catalog_path()
    data: dict = {}
    if source is not None:
        data = json.loads(source.read_text(encoding="utf-8"))
        logger.info("Loaded reference catalog from %s", source)

    pallet_rows = data.get("pallet_sizes", data.get("palletSizes", DEFAULT_PALLET_SIZES))
    location_rows = data.get("locations", DEFAULT_LOCATIONS)
    category_rows = data.get("product_categories", data.get("productCategories", DEFAULT_PRODUCT_CATEGORIES))
    defaults = {**DEFAULT_SETTINGS, **data.get("defaults", {})}

    return Catalog(
        pallet_sizes=[_pallet_from_row(r) for r in pallet_rows],
        locations=[_location_from_row(r) for r in location_rows],
        product_categories=[_category_from_row(r) for r in category_rows],
        defaults=defaults,
    )


def template_csv(table_key: str) -> str:
    cols = list(TABLE_SPECS[table_key].keys())
    sample_row = [TABLE_SPECS[table_key][col].example for col in cols]
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(cols)
    writer.writerow(sample_row)
    return buffer.getvalue()


def ensure_templates(template_dir: str | Path = "templates") -> list[Path]:
    template_dir = Path(template_dir)
    template_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for table_key, fname in TEMPLATE_SPECS:
        target = template_dir / fname
        target.write_text(template_csv(table_key), encoding="utf-8")
        written.append(target)
    return written
