"""
Decimal helpers for monetary values.

The booking API transmits money as decimal strings ("200.00"); these helpers
parse and round them without going through binary floats.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from utils.exceptions import ValidationError

ZERO = Decimal("0.00")
_CENTS = Decimal("0.01")

MoneyLike = Union[Decimal, str, int, float, None]


def to_decimal(value: MoneyLike, field: str = "amount") -> Decimal:
    """
    Parse a monetary value.

    None and blank strings count as zero, matching the API defaults.

    Raises:
        ValidationError: If the value is not a decimal number
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Go through str() so 0.1 stays 0.1
        value = str(value)
    text = str(value).strip().replace(",", "")
    if text.startswith("$"):
        text = text[1:]
    if not text:
        return ZERO
    try:
        parsed = Decimal(text)
    except InvalidOperation as e:
        raise ValidationError(f"Invalid {field}: {value!r}") from e
    if not parsed.is_finite():
        raise ValidationError(f"Invalid {field}: {value!r}")
    return parsed


def round2(value: MoneyLike) -> Decimal:
    """Round to two decimal places, half up."""
    return to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def floor_zero(value: Decimal) -> Decimal:
    """Clamp negative amounts to 0.00."""
    return value if value > 0 else ZERO


def format_money(value: MoneyLike) -> str:
    """Format as a two-decimal string, e.g. '225.00'."""
    return f"{round2(value):.2f}"
