from __future__ import annotations

from typing import Callable

import pandas as pd

from field_specs import validate_table_rows


def missing_columns(df: pd.DataFrame, cols: list[str]) -> list[str]:
    return [col for col in cols if col not in df.columns]


def blank_mask(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        return pd.Series(True, index=df.index)
    values = df[col]
    return values.isna() | values.astype(str).str.strip().eq("")


def numeric_values(df: pd.DataFrame, col: str) -> pd.Series:
    """Coerce a column to floats; text, blanks and +/-inf all become NaN."""
    if col not in df.columns:
        return pd.Series(float("nan"), index=df.index)
    values = pd.to_numeric(df[col], errors="coerce").astype(float)
    return values.where(values.abs().lt(float("inf")))


def unsupported_mask(df: pd.DataFrame, col: str, parse: Callable[[object], str]) -> pd.Series:
    """Flag non-blank values that ``parse`` rejects with ``ValueError``."""
    if col not in df.columns:
        return pd.Series(False, index=df.index)

    def _rejected(value: object) -> bool:
        try:
            parse(value)
        except ValueError:
            return True
        return False

    return ~blank_mask(df, col) & df[col].map(_rejected).astype(bool)


def validate_with_specs(table_key: str, df: pd.DataFrame) -> list[str]:
    return validate_table_rows(table_key, df)
