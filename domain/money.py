"""
Domain: money values.

Prices are fixed-point currency amounts with two decimal places of meaning.
They are carried as Decimal end to end so that sale totals are exact.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def parse_money(name: str, value: Any) -> Decimal:
    """
    Convert a price-like value into a non-negative Decimal.

    Floats are converted through their string form so 8.5 becomes Decimal("8.5")
    rather than its binary expansion.

    Raises:
        ValueError: if the value is not a finite number, is negative, or has
            more than two decimal places.
    """

    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None

    if not amount.is_finite():
        raise ValueError(f"{name} must be a finite number")
    if amount < 0:
        raise ValueError(f"{name} must be >= 0")
    if amount.as_tuple().exponent < -2 and amount != amount.quantize(CENTS):
        raise ValueError(f"{name} must have at most two decimal places")
    return amount
