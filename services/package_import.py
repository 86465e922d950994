from __future__ import annotations

from dataclasses import dataclass
import io
import logging

import pandas as pd

from field_specs import TABLE_SPECS
from models import Package
from units import parse_length_unit, parse_weight_unit
from validators import blank_mask, missing_columns, numeric_values, unsupported_mask

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["length", "width", "height", "weight"]
DIMENSION_COLUMNS = ["length", "width", "height"]
DEFAULT_LENGTH_UNIT = "cm"
DEFAULT_WEIGHT_UNIT = "kg"
UNIT_PARSERS = {"length_unit": parse_length_unit, "weight_unit": parse_weight_unit}

COLUMN_ALIASES = {
    "length unit": "length_unit",
    "lengthunit": "length_unit",
    "weight unit": "weight_unit",
    "weightunit": "weight_unit",
    "qty": "quantity",
}


@dataclass(frozen=True)
class ValidationIssue:
    row_number: int
    field: str
    code: str
    message: str

    def as_dict(self) -> dict[str, object]:
        return {
            "row_number": self.row_number,
            "field": self.field,
            "code": self.code,
            "message": self.message,
        }


@dataclass(frozen=True)
class PackageImportReport:
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]
    summary: dict[str, object]

    @property
    def ok(self) -> bool:
        return not self.errors

    def as_dict(self) -> dict[str, object]:
        return {
            "errors": [issue.as_dict() for issue in self.errors],
            "warnings": [issue.as_dict() for issue in self.warnings],
            "summary": self.summary,
        }


def read_package_upload(file_name: str, blob: bytes) -> pd.DataFrame:
    lower = file_name.lower()
    if lower.endswith(".csv"):
        return pd.read_csv(io.BytesIO(blob))
    if lower.endswith(".xlsx"):
        return pd.read_excel(io.BytesIO(blob))
    raise ValueError("Unsupported file format. Upload CSV or XLSX.")


def _normalize_columns(frame: pd.DataFrame) -> pd.DataFrame:
    rename = {}
    for col in frame.columns:
        key = str(col).strip().lower()
        rename[col] = COLUMN_ALIASES.get(key, key)
    return frame.rename(columns=rename).copy()


def _is_blank(value: object) -> bool:
    return value is None or pd.isna(value) or str(value).strip() == ""


def validate_package_import(frame: pd.DataFrame) -> PackageImportReport:
    """Check uploaded package rows before they are turned into ``Package`` values.

    Row numbers count the header as row 1, so the first data row is row 2.
    Blank units and quantities are defaults, reported as warnings.
    """
    data = _normalize_columns(frame)
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    for col in missing_columns(data, REQUIRED_COLUMNS):
        errors.append(ValidationIssue(0, col, "MISSING_REQUIRED_COLUMN", f"Required column '{col}' is missing."))
    if data.empty:
        warnings.append(ValidationIssue(0, "", "NO_ROWS", "Upload contains no package rows."))

    error_rows: set[int] = set()

    def _add_error(row_number: int, field: str, code: str, message: str) -> None:
        errors.append(ValidationIssue(row_number, field, code, message))
        error_rows.add(row_number)

    if not errors:
        blanks = {col: blank_mask(data, col).tolist() for col in [*REQUIRED_COLUMNS, "quantity", *UNIT_PARSERS]}
        numbers = {col: numeric_values(data, col).tolist() for col in [*REQUIRED_COLUMNS, "quantity"]}
        unsupported = {col: unsupported_mask(data, col, parse).tolist() for col, parse in UNIT_PARSERS.items()}

        for pos in range(len(data.index)):
            row_number = pos + 2
            for field in REQUIRED_COLUMNS:
                if blanks[field][pos]:
                    _add_error(row_number, field, "MISSING_REQUIRED_FIELD", f"{field} is required.")
                    continue
                val = numbers[field][pos]
                if pd.isna(val):
                    _add_error(row_number, field, "NOT_NUMERIC", f"{field} must be a finite number.")
                elif val < 0:
                    _add_error(row_number, field, "NEGATIVE_VALUE", f"{field} must be >= 0.")
                elif val == 0 and field in DIMENSION_COLUMNS:
                    warnings.append(
                        ValidationIssue(row_number, field, "ZERO_DIMENSION", f"{field} is 0; this package cannot be stacked.")
                    )

            if blanks["quantity"][pos]:
                warnings.append(ValidationIssue(row_number, "quantity", "DEFAULTED", "quantity is blank; using 1."))
            else:
                qty = numbers["quantity"][pos]
                if pd.isna(qty) or qty < 1 or qty != round(qty):
                    _add_error(row_number, "quantity", "INVALID_QUANTITY", "quantity must be a whole number >= 1.")

            for field, default in (("length_unit", DEFAULT_LENGTH_UNIT), ("weight_unit", DEFAULT_WEIGHT_UNIT)):
                if blanks[field][pos]:
                    warnings.append(ValidationIssue(row_number, field, "DEFAULTED", f"{field} is blank; using {default}."))
                elif unsupported[field][pos]:
                    _add_error(
                        row_number,
                        field,
                        "UNSUPPORTED_UNIT",
                        f"{field} must be one of {', '.join(TABLE_SPECS['packages'][field].choices or [])}.",
                    )

    total_rows = int(len(data.index))
    summary = {
        "total_rows": total_rows,
        "error_rows": len(error_rows),
        "valid_rows": max(0, total_rows - len(error_rows)),
        "error_count": len(errors),
        "warning_count": len(warnings),
    }
    return PackageImportReport(errors=errors, warnings=warnings, summary=summary)


def _unit_or_default(raw_value: object, parse, default: str) -> str:
    return default if _is_blank(raw_value) else parse(raw_value)


def packages_from_frame(frame: pd.DataFrame) -> list[Package]:
    report = validate_package_import(frame)
    if not report.ok:
        logger.warning("Rejected package upload with %d error(s)", len(report.errors))
        raise ValueError(
            "Package upload has errors: "
            + "; ".join(f"Row {issue.row_number} ({issue.field}): {issue.message}" for issue in report.errors)
        )

    data = _normalize_columns(frame)
    packages: list[Package] = []
    for idx, (_, row) in enumerate(data.iterrows(), start=1):
        qty = row.get("quantity")
        packages.append(
            Package(
                id=str(idx),
                length=float(row["length"]),
                width=float(row["width"]),
                height=float(row["height"]),
                weight=float(row["weight"]),
                quantity=1 if _is_blank(qty) else int(float(qty)),
                length_unit=_unit_or_default(row.get("length_unit"), parse_length_unit, DEFAULT_LENGTH_UNIT),  # type: ignore[arg-type]
                weight_unit=_unit_or_default(row.get("weight_unit"), parse_weight_unit, DEFAULT_WEIGHT_UNIT),  # type: ignore[arg-type]
            )
        )
    logger.info("Imported %d package row(s)", len(packages))
    return packages


def packages_to_frame(packages: list[Package]) -> pd.DataFrame:
    columns = ["id", *TABLE_SPECS["packages"].keys()]
    rows = [
        {
            "id": pkg.id,
            "length": pkg.length,
            "width": pkg.width,
            "height": pkg.height,
            "weight": pkg.weight,
            "quantity": pkg.quantity,
            "length_unit": pkg.length_unit,
            "weight_unit": pkg.weight_unit,
        }
        for pkg in packages
    ]
    return pd.DataFrame(rows, columns=columns)
