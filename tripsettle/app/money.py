"""
money.py — Decimal helpers shared by the split and settlement services.

All monetary arithmetic in the engine is Decimal quantised to cents.
Float is accepted at the boundary only, and is converted through str() so
that 0.1 becomes Decimal("0.1") and not 0.1000000000000000055511151231257827.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from tripsettle.app.errors import InvalidAmount

Numeric = Union[int, float, str, Decimal]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

# Balances and settlement amounts at or below this magnitude are treated as
# already settled.
SETTLEMENT_THRESHOLD = Decimal("0.01")

# Allowed drift when reconciling split totals against the expense amount.
SUM_TOLERANCE = Decimal("0.01")


def to_decimal(value: Numeric, field: str | None = None) -> Decimal:
    """
    Converts a caller-supplied number to a finite Decimal without rounding.
    Raises InvalidAmount for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"{value!r} is not a number.", field=field)
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(str(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"{value!r} is not a number.", field=field) from None

    if not result.is_finite():
        raise InvalidAmount(f"{value!r} is not a finite number.", field=field)
    return result


def money(value: Numeric, field: str | None = None) -> Decimal:
    """Rounds value to cents using ROUND_HALF_UP."""
    return to_decimal(value, field).quantize(CENT, rounding=ROUND_HALF_UP)


def round_cents(value: Decimal) -> Decimal:
    """ROUND_HALF_UP to cents for an already-validated Decimal."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def floor_cents(value: Decimal) -> Decimal:
    """
    Truncates a non-negative Decimal to cents.
    Decimal("3.3333") → Decimal("3.33"); Decimal("0.999") → Decimal("0.99").
    """
    return value.quantize(CENT, rounding=ROUND_DOWN)
