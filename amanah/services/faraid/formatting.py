from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from typing import Union

from amanah.config import settings

FRACTION_TOLERANCE = float(settings.faraid.fraction_tolerance)
_MAX_EXPANSION_TERMS = 64

ShareValue = Union[Fraction, Decimal, float, int]

# Shares prescribed in Faraid, checked before the general expansion so that
# float noise never produces artifacts like "333333333/1000000000".
COMMON_FRACTIONS: tuple[Fraction, ...] = (
    Fraction(1, 2),
    Fraction(1, 3),
    Fraction(2, 3),
    Fraction(1, 4),
    Fraction(1, 8),
    Fraction(1, 6),
    Fraction(3, 4),
)


def _render(value: Fraction) -> str:
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def _continued_fraction(value: float, tolerance: float) -> Fraction:
    h_prev, h = 0, 1
    k_prev, k = 1, 0
    remainder = value
    for _ in range(_MAX_EXPANSION_TERMS):
        term = math.floor(remainder)
        h, h_prev = term * h + h_prev, h
        k, k_prev = term * k + k_prev, k
        if abs(value - h / k) <= value * tolerance:
            break
        fractional = remainder - term
        if fractional == 0:
            break
        remainder = 1 / fractional
    return Fraction(h, k)


def format_fraction(value: ShareValue) -> str:
    """Render ``value`` as the simplest ``p/q`` string within tolerance."""
    number = float(value)
    if number == 0:
        return "0"
    if number < 0:
        return "-" + format_fraction(-number)
    for common in COMMON_FRACTIONS:
        if abs(number - float(common)) < FRACTION_TOLERANCE:
            return _render(common)
    return _render(_continued_fraction(number, FRACTION_TOLERANCE))


def format_share(value: ShareValue) -> str:
    """Render a share as ``"<fraction> (<percentage>%)"``, e.g. ``"1/8 (12.5%)"``."""
    return f"{format_fraction(value)} ({float(value) * 100:.1f}%)"
