from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Any

import pandas as pd
import streamlit as st

from units import LENGTH_TO_MM, WEIGHT_TO_G


@dataclass(frozen=True)
class FieldSpec:
    field_type: str
    required: bool = False
    description: str = ""
    example: str = ""
    max_length: int | None = None
    regex: str | None = None
    allowed_chars: str = ""
    min_value: float | int | None = None
    max_value: float | int | None = None
    choices: list[str] | None = None
    notes: str = ""


TABLE_SPECS: dict[str, dict[str, FieldSpec]] = {
    "packages": {
        "length": FieldSpec("decimal", required=True, min_value=0, description="Package length", example="40", notes="In the row's length_unit."),
        "width": FieldSpec("decimal", required=True, min_value=0, description="Package width", example="30", notes="In the row's length_unit."),
        "height": FieldSpec("decimal", required=True, min_value=0, description="Package height", example="25", notes="A zero dimension makes the package unstackable."),
        "weight": FieldSpec("decimal", required=True, min_value=0, description="Weight of one package", example="12.5", notes="In the row's weight_unit."),
        "quantity": FieldSpec("int", min_value=1, description="Number of identical packages", example="10", notes="Defaults to 1 when blank."),
        "length_unit": FieldSpec("text", choices=list(LENGTH_TO_MM), description="Length unit", example="cm", notes="Defaults to cm when blank."),
        "weight_unit": FieldSpec("text", choices=list(WEIGHT_TO_G), description="Weight unit", example="kg", notes="Defaults to kg when blank."),
    },
    "custom_pallet": {
        "length": FieldSpec("decimal", required=True, min_value=0.01, description="Pallet length", example="120"),
        "width": FieldSpec("decimal", required=True, min_value=0.01, description="Pallet width", example="80"),
        "height": FieldSpec("decimal", required=True, min_value=0, description="Pallet deck height", example="14.4"),
        "max_weight": FieldSpec("decimal", required=True, min_value=0.01, description="Maximum load (kg)", example="1500", notes="Always kilograms."),
        "length_unit": FieldSpec("text", required=True, choices=list(LENGTH_TO_MM), description="Length unit", example="cm"),
    },
    "cost_config": {
        "type": FieldSpec("text", required=True, choices=["weight", "volume", "distance"], description="Cost basis", example="weight"),
        "unit": FieldSpec("text", required=True, choices=["kg", "lbs", "m3", "ft3", "km", "mi"], description="Basis unit", example="kg", notes="Must match the basis."),
        "rate_per_unit": FieldSpec("decimal", required=True, min_value=0, description="Rate per basis unit", example="2.5"),
        "currency": FieldSpec("text", required=True, max_length=3, regex=r"^[A-Z]{3}$", allowed_chars="A-Z", description="ISO currency", example="USD"),
        "tax_rate": FieldSpec("decimal", min_value=0, max_value=100, description="Tax rate %", example="8.5"),
    },
}


def build_help_text(table_key: str, field: str) -> str:
    spec = TABLE_SPECS.get(table_key, {}).get(field)
    if not spec:
        return ""
    chunks = [spec.description]
    if spec.allowed_chars:
        chunks.append(f"Allowed: {spec.allowed_chars}")
    if spec.choices:
        chunks.append(f"One of: {', '.join(spec.choices)}")
    if spec.max_length:
        chunks.append(f"Max length: {spec.max_length}")
    if spec.min_value is not None or spec.max_value is not None:
        chunks.append(f"Range: {spec.min_value if spec.min_value is not None else '-∞'} to {spec.max_value if spec.max_value is not None else '∞'}")
    if spec.example:
        chunks.append(f"Example: {spec.example}")
    return " | ".join([c for c in chunks if c])


def field_guide_df(table_key: str) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for col, spec in TABLE_SPECS.get(table_key, {}).items():
        rows.append(
            {
                "column": col,
                "type": spec.field_type,
                "required": "yes" if spec.required else "no",
                "allowed": ", ".join(spec.choices) if spec.choices else (spec.allowed_chars or "-"),
                "range": f"{spec.min_value if spec.min_value is not None else '-∞'} .. {spec.max_value if spec.max_value is not None else '∞'}" if spec.field_type in {"int", "decimal"} else "-",
                "example": spec.example,
                "notes": spec.notes or "-",
            }
        )
    return pd.DataFrame(rows)


def validate_table_rows(table_key: str, df: pd.DataFrame) -> list[str]:
    errors: list[str] = []
    specs = TABLE_SPECS.get(table_key, {})
    for i, (_, row) in enumerate(df.iterrows(), start=1):
        for col, spec in specs.items():
            if col not in df.columns:
                continue
            value = row.get(col)
            empty = pd.isna(value) or str(value).strip() == ""
            if spec.required and empty:
                errors.append(f"Row {i} ({col}): required. Example: {spec.example}")
                continue
            if empty:
                continue
            if spec.field_type in {"int", "decimal"}:
                num = pd.to_numeric(pd.Series([value]), errors="coerce").iloc[0]
                if pd.isna(num) or not math.isfinite(float(num)):
                    errors.append(f"Row {i} ({col}): must be numeric. Example: {spec.example}")
                    continue
                if spec.field_type == "int" and float(num) != int(num):
                    errors.append(f"Row {i} ({col}): must be a whole number. Example: {spec.example}")
                if spec.min_value is not None and num < spec.min_value:
                    errors.append(f"Row {i} ({col}): must be >= {spec.min_value}. Example: {spec.example}")
                if spec.max_value is not None and num > spec.max_value:
                    errors.append(f"Row {i} ({col}): must be <= {spec.max_value}. Example: {spec.example}")
                continue
            txt = str(value).strip()
            if spec.max_length and len(txt) > spec.max_length:
                errors.append(f"Row {i} ({col}): max length {spec.max_length}. Example: {spec.example}")
            if spec.regex and not re.fullmatch(spec.regex, txt):
                char_hint = f", {spec.allowed_chars} only" if spec.allowed_chars else ""
                errors.append(f"Row {i} ({col}): invalid format{char_hint}. Example: {spec.example}")
            if spec.choices and txt.lower() not in spec.choices:
                errors.append(f"Row {i} ({col}): must be one of {', '.join(spec.choices)}. Example: {spec.example}")
    return errors


def table_column_config(table_key: str) -> dict[str, st.column_config.Column]:
    config: dict[str, st.column_config.Column] = {}
    for col, spec in TABLE_SPECS.get(table_key, {}).items():
        help_text = build_help_text(table_key, col)
        if spec.field_type in {"int", "decimal"}:
            config[col] = st.column_config.NumberColumn(
                col,
                help=help_text,
                min_value=spec.min_value,
                step=1 if spec.field_type == "int" else None,
            )
        elif spec.choices:
            config[col] = st.column_config.SelectboxColumn(col, options=spec.choices, help=help_text)
        else:
            config[col] = st.column_config.TextColumn(col, help=help_text)
    return config
