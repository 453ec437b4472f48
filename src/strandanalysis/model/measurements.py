"""
Measurement Parsing and Display
===============================
Field crews type slippage as decimals ("0.375", ".5"), fractions ("3/8") or
mixed numbers ("1 5/16"). This module turns that text into decimal inches and
turns decimal inches back into the shop-floor fraction display.

Sign is not validated here; callers decide whether a value is acceptable.
"""
from __future__ import annotations

import math
import re
from decimal import Decimal, ROUND_HALF_UP
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Union

from strandanalysis.config import DISPLAY_DECIMALS, FRACTION_DENOMINATOR

_DECIMAL_RE = re.compile(r"^(\d*\.?\d+)$")
_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)/(\d+)$")
_FRACTION_RE = re.compile(r"^(\d+)/(\d+)$")


class MeasurementStatus(StrEnum):
    EMPTY = "empty"
    VALID = "valid"
    INVALID = "invalid"


def parse(text: Optional[str]) -> Optional[float]:
    """
    Parse user input to decimal inches.

    Returns None for blank input, for text that is not a decimal, fraction
    or mixed number, and for a zero denominator. An explicit "0" parses to 0.0.
    """
    if text is None:
        return None
    trimmed = str(text).strip()
    if not trimmed:
        return None

    match = _DECIMAL_RE.match(trimmed)
    if match:
        return float(match.group(1))

    match = _MIXED_RE.match(trimmed)
    if match:
        whole, numerator, denominator = (int(g) for g in match.groups())
        if denominator == 0:
            return None
        return whole + numerator / denominator

    match = _FRACTION_RE.match(trimmed)
    if match:
        numerator, denominator = (int(g) for g in match.groups())
        if denominator == 0:
            return None
        return numerator / denominator

    return None


def classify(text: Optional[str]) -> MeasurementStatus:
    """Tell blank input apart from text that failed to parse."""
    if text is None or not str(text).strip():
        return MeasurementStatus.EMPTY
    return MeasurementStatus.VALID if parse(text) is not None else MeasurementStatus.INVALID


def to_fraction(value: float, denominator: int = FRACTION_DENOMINATOR) -> str:
    """
    Nearest 1/`denominator` inch, reduced to lowest terms.

    0.5 -> '1/2"', 1.375 -> '1 3/8"', 2.0 -> '2"', 0.0 -> '0'.
    """
    sign = "-" if value < 0 else ""
    abs_value = abs(value)
    whole = math.floor(abs_value)
    # round half up, so ties do not depend on banker's rounding
    parts = math.floor((abs_value - whole) * denominator + 0.5)

    if parts == denominator:
        whole += 1
        parts = 0

    if parts == 0:
        return f'{sign}{whole}"' if whole > 0 else '0'

    divisor = math.gcd(parts, denominator)
    fraction = f"{parts // divisor}/{denominator // divisor}"
    if whole > 0:
        return f'{sign}{whole} {fraction}"'
    return f'{sign}{fraction}"'


def to_fixed(value: float, decimals: int = DISPLAY_DECIMALS) -> str:
    """
    Fixed-point text with ties rounded away from zero (2.3125 -> '2.313'),
    matching how the report values have always been printed.
    """
    quantum = Decimal(1).scaleb(-decimals)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_inches_with_fraction(value: float) -> str:
    """'0.684 (≈11/16")'"""
    return f"{to_fixed(value)} (≈{to_fraction(value)})"


@dataclass(frozen=True)
class MeasurementDisplay:
    value_text: str     # e.g. '>1.500"'
    fraction_text: str  # e.g. '≈>1 1/2"'

    def __str__(self) -> str:
        return f"{self.value_text} ({self.fraction_text})"


def format_measurement(value: Union[int, float], exceeds: bool = False) -> MeasurementDisplay:
    """
    Report display of a total or average: 3 decimals, fraction equivalent,
    both prefixed with '>' when any contributing reading hit the gauge limit.
    """
    prefix = ">" if exceeds else ""
    return MeasurementDisplay(
        value_text=f'{prefix}{to_fixed(value)}"',
        fraction_text=f"≈{prefix}{to_fraction(value)}",
    )
