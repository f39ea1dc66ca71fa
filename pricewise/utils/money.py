"""
Pricewise — Money rounding

Single rounding rule for every minor-unit amount the engine produces:
round half away from zero (Decimal ROUND_HALF_UP). Percentages are Decimal
and are never passed through float.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from pricewise.errors import InvalidInput

Number = Union[int, float, str, Decimal]

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def to_decimal(value: Number, name: str = "value") -> Decimal:
    """Coerce a caller-supplied number to Decimal (floats go through str)."""
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value))
        except ArithmeticError as exc:
            raise InvalidInput(f"{name} is not a valid number: {value!r}") from exc
    else:
        raise InvalidInput(f"{name} must be a number, got {type(value).__name__}")

    if not result.is_finite():
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    return result


def round_minor(value: Number) -> int:
    """Round to a whole minor unit, half away from zero."""
    return int(to_decimal(value).quantize(_ONE, rounding=ROUND_HALF_UP))


def percent_of(amount: int, percent: Number) -> int:
    """``round_minor(amount × percent / 100)``."""
    return round_minor(Decimal(amount) * to_decimal(percent, "percent") / _HUNDRED)


def scale_by_percent_change(amount: int, change: Number) -> int:
    """Apply a relative change: ``round_minor(amount × (1 + change / 100))``."""
    factor = _ONE + to_decimal(change, "change") / _HUNDRED
    return round_minor(Decimal(amount) * factor)


def require_non_negative(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer amount in minor units, got {value!r}")
    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value}")


def require_percentage(
    name: str,
    value: Number,
    upper_inclusive: bool = True,
) -> Decimal:
    """Validate a percentage in [0, 100] (or [0, 100)) and return it as Decimal."""
    pct = to_decimal(value, name)
    if pct < 0 or pct > _HUNDRED or (not upper_inclusive and pct == _HUNDRED):
        bound = "]" if upper_inclusive else ")"
        raise InvalidInput(f"{name} must be within [0, 100{bound}, got {value}")
    return pct
