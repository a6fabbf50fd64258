"""
Numeric normalization for values coming back from the warehouse.

Aggregate queries hand back a mix of None, Decimal, float, int and (for some
drivers and raw expressions) numeric strings. Every engine function routes
those values through this module so downstream arithmetic can assume finite
numbers. None of these helpers ever raise.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")


def to_number(value: object) -> Decimal:
    """
    Coerce a loosely typed value into a finite Decimal.

    Args:
        value: None, a number, a Decimal, or a numeric string.

    Returns:
        Decimal: The parsed value, or Decimal("0") for None, unparseable
        input, NaN, and infinities.

    Example:
        >>> to_number("12.50")
        Decimal('12.50')
        >>> to_number(None)
        Decimal('0')
        >>> to_number(float("nan"))
        Decimal('0')
    """
    if value is None:
        return ZERO

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, bool):
        number = Decimal(int(value))
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ZERO
        number = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        try:
            number = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        try:
            number = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            return ZERO

    if not number.is_finite():
        return ZERO
    return number


def to_int(value: object) -> int:
    """Coerce to an int (truncating), 0 for anything unusable."""
    return int(to_number(value))


def to_float(value: object) -> float:
    """Coerce to a finite float, 0.0 for anything unusable."""
    result = float(to_number(value))
    # Decimals beyond the float range overflow to inf
    return result if math.isfinite(result) else 0.0
