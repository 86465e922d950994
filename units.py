"""Length and weight unit conversion."""
from __future__ import annotations

from typing import Literal

LengthUnit = Literal["mm", "cm", "m", "in"]
WeightUnit = Literal["g", "kg", "lbs"]

# Ratio of each unit to the family base unit (mm for length, g for weight).
LENGTH_TO_MM: dict[str, float] = {
    "mm": 1,
    "cm": 10,
    "m": 1000,
    "in": 25.4,
}

WEIGHT_TO_G: dict[str, float] = {
    "g": 1,
    "kg": 1000,
    "lbs": 453.592,
}

LB_PER_KG = 2.20462
FT3_PER_M3 = 35.3147


def convert_length(value: float, from_unit: LengthUnit, to_unit: LengthUnit) -> float:
    in_mm = value * LENGTH_TO_MM[from_unit]
    return in_mm / LENGTH_TO_MM[to_unit]


def convert_weight(value: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
    in_grams = value * WEIGHT_TO_G[from_unit]
    return in_grams / WEIGHT_TO_G[to_unit]


def _parse_unit(raw_value: object, table: dict[str, float], family: str) -> str:
    text = str(raw_value or "").strip().lower()
    if text == "lb":
        text = "lbs"
    if text not in table:
        raise ValueError(f"Unsupported {family} unit '{raw_value}'. Use one of: {', '.join(table)}")
    return text


def parse_length_unit(raw_value: object) -> LengthUnit:
    return _parse_unit(raw_value, LENGTH_TO_MM, "length")  # type: ignore[return-value]


def parse_weight_unit(raw_value: object) -> WeightUnit:
    return _parse_unit(raw_value, WEIGHT_TO_G, "weight")  # type: ignore[return-value]


def format_measurement(value: float, unit: str) -> str:
    return f"{value:.2f} {unit}"


def format_number(value: float) -> str:
    """Render a number the way calculation messages expect: ``10`` not ``10.0``.

    Small magnitudes follow the same rules as a browser: fixed notation down
    to ``1e-6`` and a compact exponent (``1e-7``) below that.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    exp = int(exponent)
    if exp >= -6:
        decimals = len(mantissa.partition(".")[2]) - exp
        return f"{value:.{decimals}f}"
    return f"{mantissa}e{exp}"
