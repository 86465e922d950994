import pandas as pd

from field_specs import build_help_text, field_guide_df
from units import parse_length_unit
from validators import blank_mask, missing_columns, numeric_values, unsupported_mask, validate_with_specs


def test_missing_columns_keeps_requested_order():
    df = pd.DataFrame([{"width": 1, "length": 10}])
    assert missing_columns(df, ["length", "height", "weight"]) == ["height", "weight"]


def test_blank_mask_treats_whitespace_and_missing_columns_as_blank():
    df = pd.DataFrame([{"quantity": 3}, {"quantity": None}, {"quantity": "  "}])
    assert blank_mask(df, "quantity").tolist() == [False, True, True]
    assert blank_mask(df, "length_unit").tolist() == [True, True, True]


def test_numeric_values_drop_text_and_infinities():
    df = pd.DataFrame([{"length": "12.5"}, {"length": "abc"}, {"length": "inf"}, {"length": "1e400"}, {"length": "-inf"}])
    values = numeric_values(df, "length")
    assert values.iloc[0] == 12.5
    assert values.iloc[1:].isna().all()


def test_unsupported_mask_ignores_blanks_and_accepts_aliases():
    df = pd.DataFrame([{"length_unit": "CM"}, {"length_unit": "ft"}, {"length_unit": None}])
    assert unsupported_mask(df, "length_unit", parse_length_unit).tolist() == [False, True, False]
    assert unsupported_mask(df, "missing", parse_length_unit).tolist() == [False, False, False]


def test_validate_with_specs_rejects_infinite_quantity():
    df = pd.DataFrame([{"length": 1, "width": 1, "height": "inf", "weight": 1, "quantity": "inf"}])
    assert validate_with_specs("packages", df) == [
        "Row 1 (height): must be numeric. Example: 25",
        "Row 1 (quantity): must be numeric. Example: 10",
    ]


def test_validate_with_specs_numeric_and_choice_messages():
    df = pd.DataFrame([{"length": "abc", "width": 10, "height": 5, "weight": -2, "quantity": 0, "length_unit": "ft", "weight_unit": "kg"}])
    errors = validate_with_specs("packages", df)
    assert "Row 1 (length): must be numeric. Example: 40" in errors
    assert "Row 1 (weight): must be >= 0. Example: 12.5" in errors
    assert "Row 1 (quantity): must be >= 1. Example: 10" in errors
    assert "Row 1 (length_unit): must be one of mm, cm, m, in. Example: cm" in errors
    assert not any("width" in e or "weight_unit" in e for e in errors)


def test_validate_with_specs_whole_quantity_and_currency_format():
    packages = pd.DataFrame([{"length": 1, "width": 1, "height": 1, "weight": 1, "quantity": 2.5}])
    assert validate_with_specs("packages", packages) == ["Row 1 (quantity): must be a whole number. Example: 10"]

    config = pd.DataFrame([{"type": "weight", "unit": "kg", "rate_per_unit": 1, "currency": "usd"}])
    errors = validate_with_specs("cost_config", config)
    assert errors == ["Row 1 (currency): invalid format, A-Z only. Example: USD"]


def test_field_guide_and_help_text():
    guide = field_guide_df("packages")
    assert guide["column"].tolist() == ["length", "width", "height", "weight", "quantity", "length_unit", "weight_unit"]
    assert "One of: g, kg, lbs" in build_help_text("packages", "weight_unit")
    assert build_help_text("packages", "nope") == ""
