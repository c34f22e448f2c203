from __future__ import annotations

import pytest

from peso_tool.units import (
    InvalidWeightError,
    UnitSystem,
    parse_weight,
    validate_weight,
)


@pytest.mark.parametrize("unit", list(UnitSystem))
@pytest.mark.parametrize("value", [5.0, 72.5, 199.9])
def test_display_round_trip(unit: UnitSystem, value: float) -> None:
    assert unit.to_display(unit.to_kilograms(value)) == pytest.approx(value)


def test_imperial_conversion_factor() -> None:
    assert UnitSystem.IMPERIAL.to_display(100.0) == pytest.approx(220.462)
    assert UnitSystem.IMPERIAL.to_kilograms(220.462) == pytest.approx(100.0)
    assert UnitSystem.METRIC.to_display(100.0) == 100.0


def test_labels() -> None:
    assert UnitSystem.METRIC.unit_label == "kg"
    assert UnitSystem.IMPERIAL.unit_label == "lb"
    assert UnitSystem.IMPERIAL.title == "Pounds"


def test_parse_unit_system_falls_back_to_metric() -> None:
    assert UnitSystem.parse("IMPERIAL") is UnitSystem.IMPERIAL
    assert UnitSystem.parse(None) is UnitSystem.METRIC
    assert UnitSystem.parse("stone") is UnitSystem.METRIC


def test_parse_weight_accepts_comma_and_dot() -> None:
    assert parse_weight("72,5") == 72.5
    assert parse_weight(" 80.1 ") == 80.1


def test_parse_weight_rejects_text() -> None:
    with pytest.raises(InvalidWeightError, match="Not a number"):
        parse_weight("abc")


def test_invalid_weight_is_value_error() -> None:
    assert issubclass(InvalidWeightError, ValueError)


def test_validate_weight_range_is_inclusive() -> None:
    assert validate_weight(5.0) == 5.0
    assert validate_weight(200.0) == 200.0
    with pytest.raises(InvalidWeightError, match="Allowed range"):
        validate_weight(4.9)
    with pytest.raises(InvalidWeightError):
        validate_weight(200.1)
