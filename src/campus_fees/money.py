"""Decimal helpers shared by every fee stage."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

SCALE = 2
CENT = Decimal("0.01")
ZERO = Decimal("0.00")
ONE = Decimal("1")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert without inheriting binary float noise (0.1 -> Decimal('0.1'))."""

    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value: Number) -> Decimal:
    """Quantize to two places, half-up."""

    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_or_zero(value: Optional[Number]) -> Decimal:
    return ZERO if value is None else money(value)
