import itertools

import pytest

from units import (
    LENGTH_TO_MM,
    WEIGHT_TO_G,
    convert_length,
    convert_weight,
    format_measurement,
    format_number,
    parse_length_unit,
    parse_weight_unit,
)


def test_length_conversion_uses_millimeter_ratios():
    assert convert_length(1, "in", "mm") == pytest.approx(25.4)
    assert convert_length(120, "cm", "mm") == pytest.approx(1200)
    assert convert_length(2.5, "m", "cm") == pytest.approx(250)
    assert convert_length(254, "mm", "in") == pytest.approx(10)


def test_weight_conversion_uses_gram_ratios():
    assert convert_weight(1, "lbs", "kg") == pytest.approx(0.453592)
    assert convert_weight(2500, "g", "kg") == pytest.approx(2.5)
    assert convert_weight(1, "kg", "lbs") == pytest.approx(1000 / 453.592)


@pytest.mark.parametrize("value", [0.001, 1.0, 37.5, 12345.678])
def test_conversions_round_trip(value):
    for a, b in itertools.permutations(LENGTH_TO_MM, 2):
        assert convert_length(convert_length(value, a, b), b, a) == pytest.approx(value)
    for a, b in itertools.permutations(WEIGHT_TO_G, 2):
        assert convert_weight(convert_weight(value, a, b), b, a) == pytest.approx(value)


def test_parse_units_accepts_case_and_lb_alias():
    assert parse_length_unit(" CM ") == "cm"
    assert parse_weight_unit("lb") == "lbs"
    assert parse_weight_unit("KG") == "kg"


def test_parse_units_rejects_unknown_units():
    with pytest.raises(ValueError, match="Unsupported length unit"):
        parse_length_unit("ft")
    with pytest.raises(ValueError, match="Unsupported weight unit"):
        parse_weight_unit("oz")


def test_number_formatting():
    assert format_measurement(3.14159, "mm") == "3.14 mm"
    assert format_number(10.0) == "10"
    assert format_number(1500) == "1500"
    assert format_number(2.5) == "2.5"
    assert format_number(0.00001) == "0.00001"
    assert format_number(1.5e-05) == "0.000015"
    assert format_number(1e-07) == "1e-7"
    assert format_number(-2.5e-08) == "-2.5e-8"
