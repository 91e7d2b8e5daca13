"""Rounding helpers for monetary and percentage amounts.

Amounts are kept as floats. Rounding goes through ``Decimal`` with
``ROUND_HALF_UP`` so halves always round away from zero for the non-negative
amounts the engine produces, independently of Python's banker's rounding.
Cents are rounded on the value scaled by 100, so ``0.015`` becomes ``0.02``
whenever ``0.015 * 100`` lands on the half.
"""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

UNIT = Decimal("1")


def round_half_up(value: float) -> float:
    """Rounds to the nearest whole unit, halves away from zero."""
    return float(Decimal(value).quantize(UNIT, rounding=ROUND_HALF_UP))


def round_money(value: float) -> float:
    """Rounds to 2 decimal places, halves away from zero."""
    return round_half_up(value * 100) / 100


def is_positive_number(value: object) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number > 0
