"""Tests for measurement parsing and fraction display."""

from __future__ import annotations

import pytest

from strandanalysis.model.measurements import (
    MeasurementStatus,
    classify,
    format_inches_with_fraction,
    format_measurement,
    parse,
    to_fixed,
    to_fraction,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("0.375", 0.375),
        (".5", 0.5),
        ("2", 2.0),
        ("0", 0.0),
        ("3/8", 0.375),
        ("1 5/16", 1.3125),
        ("  1/2  ", 0.5),
        ("1   1/4", 1.25),
    ],
)
def test_parse_accepts_field_formats(text, expected) -> None:
    assert parse(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", [None, "", "   ", "abc", "1/0", "2 1/0", "1.2.3", "-0.5", "1/2/3", "5/"])
def test_parse_rejects_everything_else(text) -> None:
    assert parse(text) is None


def test_classify_separates_blank_from_invalid() -> None:
    assert classify("") is MeasurementStatus.EMPTY
    assert classify(None) is MeasurementStatus.EMPTY
    assert classify("  ") is MeasurementStatus.EMPTY
    assert classify("3/8") is MeasurementStatus.VALID
    assert classify("0") is MeasurementStatus.VALID
    assert classify("three eighths") is MeasurementStatus.INVALID


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.5, '1/2"'),
        (0.375, '3/8"'),
        (1.375, '1 3/8"'),
        (1.5, '1 1/2"'),
        (2.0, '2"'),
        (0.0, "0"),
        (0.03, "0"),
        (0.684, '11/16"'),
        (0.97, '1"'),
        (1.0625, '1 1/16"'),
    ],
)
def test_to_fraction_rounds_to_nearest_sixteenth(value, expected) -> None:
    assert to_fraction(value) == expected


def test_to_fraction_rounds_ties_up() -> None:
    # 1/32 sits exactly between 0 and 1/16
    assert to_fraction(1 / 32) == '1/16"'


def test_to_fraction_keeps_sign() -> None:
    assert to_fraction(-0.5) == '-1/2"'
    assert to_fraction(-1.25) == '-1 1/4"'


def test_to_fixed_rounds_ties_away_from_zero() -> None:
    assert to_fixed(2.3125) == "2.313"
    assert to_fixed(0.0625) == "0.063"
    assert to_fixed(1.5) == "1.500"
    assert to_fixed(0.0) == "0.000"


def test_format_inches_with_fraction() -> None:
    assert format_inches_with_fraction(0.684) == '0.684 (≈11/16")'


def test_format_measurement_plain() -> None:
    display = format_measurement(0.3125)

    assert display.value_text == '0.313"'
    assert display.fraction_text == '≈5/16"'


def test_format_measurement_prefixes_exceeding_values() -> None:
    display = format_measurement(1.5, exceeds=True)

    assert display.value_text == '>1.500"'
    assert display.fraction_text == '≈>1 1/2"'
    assert str(display) == '>1.500" (≈>1 1/2")'
