"""
Decimal helpers for currency amounts.

Amounts are carried as ``Decimal`` through every computation and are
rounded to cents only when formatted for output.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from contaedu.app.core.exceptions import MalformedAmountError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_amount(value: Any, field: str = "amount") -> Decimal:
    """
    Convert a persisted or parsed amount to ``Decimal``.

    Fails fast on anything that is not a finite, non-negative number;
    missing or malformed amounts are never coerced to zero.
    """
    if isinstance(value, bool) or value is None:
        raise MalformedAmountError(value, field)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation:
            raise MalformedAmountError(value, field)
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    else:
        raise MalformedAmountError(value, field)

    if not amount.is_finite() or amount < ZERO:
        raise MalformedAmountError(value, field)
    return amount


def format_amount(amount: Decimal) -> str:
    """Render an amount with exactly two fraction digits."""
    return str(amount.quantize(CENT, rounding=ROUND_HALF_UP))
