"""Decimal helpers shared by the schema, the rule functions and reports."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")
DOLLAR = Decimal("1")

_STRIP_CHARS = str.maketrans("", "", "$, _")

# Larger magnitudes overflow the default decimal context once multiplied by a rate.
MAX_AMOUNT = Decimal("1e15")


def to_amount(value: Any) -> Decimal:
    """Coerce a user-supplied value to a ``Decimal``, failing soft to zero.

    ``None``, blank or non-numeric strings, booleans, NaN, infinities and
    magnitudes above ``MAX_AMOUNT`` all become zero. Strings may carry a
    leading ``$``, thousands separators and surrounding whitespace. Floats go
    through ``str()`` so ``0.1`` stays ``Decimal("0.1")``.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().translate(_STRIP_CHARS)
        if not cleaned:
            return ZERO
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO
    if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
        return ZERO
    return amount


def to_count(value: Any) -> int:
    """Coerce a user-supplied count (e.g. dependents) to a whole number."""
    amount = to_amount(value)
    return int(amount.to_integral_value(rounding=ROUND_HALF_UP))


def round_money(value: Decimal, step: Decimal = CENT) -> Decimal:
    """Round half-up to ``step`` (cents by default)."""
    return value.quantize(step, rounding=ROUND_HALF_UP)
