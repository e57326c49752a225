"""Conversions between persisted minor units (cents) and computed dollars."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

_CENT = Decimal("1")


def to_cents(dollars: Union[float, Decimal, int]) -> int:
    """
    Round a dollar amount to integer cents, half away from zero.

    Floats go through their shortest repr so 0.145 rounds to 15, not 14.
    """
    value = dollars if isinstance(dollars, Decimal) else Decimal(repr(dollars))
    return int((value * 100).quantize(_CENT, rounding=ROUND_HALF_UP))


def to_dollars(cents: Union[int, Decimal]) -> float:
    """Convert cents (int or fractional Decimal) to float dollars."""
    return float(Decimal(cents) / 100)


def gross_amount_cents(quantity: Decimal, price_per_unit: Decimal) -> int:
    """Gross value of a trade (quantity x price) in cents."""
    return to_cents(quantity * price_per_unit)
