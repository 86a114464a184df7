"""
Currency handling for redemption values.

Amounts are Decimals quantized to cents so ledger sums never drift.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from ..errors import InvalidInputError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

AmountLike = Union[Decimal, int, float, str]


def to_amount(value: AmountLike) -> Decimal:
    """Convert user or config input into a non-negative currency amount.

    Floats go through their shortest repr so 0.05 stays 0.05 rather than
    0.05000000000000000277.

    Args:
        value: Amount as Decimal, int, float or numeric string

    Returns:
        Amount rounded half-up to 2 decimal places

    Raises:
        InvalidInputError: If the value is malformed, not finite or negative
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid amount: {value!r}")
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, float):
            amount = Decimal(repr(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInputError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise InvalidInputError(f"Amount must be finite: {value!r}")
    if amount < 0:
        raise InvalidInputError(f"Amount cannot be negative: {value!r}")

    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal) -> str:
    """Format an amount for display, e.g. $1,234.50."""
    return f"${amount:,.2f}"
