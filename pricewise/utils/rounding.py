"""
Pricewise — Price Rounding

Psychological price endings. Every mode rounds UP (or leaves the price alone)
so a rounded break-even or target price never loses margin.

- nearest_99: next x.99 strictly above the current ending (custom ending allowed)
- nearest_50: next x.50 strictly above the current ending
- nearest_00: next whole major unit, unchanged if already whole
- increment:  ceil to a multiple of ``increment`` minor units
- none:       unchanged

Endings assume 100 minor units per major unit.
"""

from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple, Optional, Union

import structlog

from pricewise.config import RoundingMode, settings
from pricewise.errors import InvalidInput
from pricewise.utils.money import require_non_negative, round_minor

logger = structlog.get_logger(__name__)

MINOR_PER_MAJOR = 100

RoundingModeLike = Union[RoundingMode, str]


class BoostStep(NamedTuple):
    price: int
    step: str


def _parse_mode(mode: RoundingModeLike) -> RoundingMode:
    try:
        return RoundingMode(mode)
    except ValueError:
        raise InvalidInput(f"Unknown rounding mode '{mode}'") from None


def round_price(
    price: int,
    mode: RoundingModeLike,
    increment: Optional[int] = None,
    custom_ending: Optional[int] = None,
) -> int:
    """
    Round a minor-unit price up to a psychological ending.

    Args:
        price: Price in minor units.
        mode: Rounding strategy.
        increment: Step for ``increment`` mode, e.g. 50 for 0.50.
        custom_ending: Replaces 99 in ``nearest_99`` mode, e.g. 95.

    Examples:
        >>> round_price(2347, RoundingMode.NEAREST_99)
        2399
        >>> round_price(1099, RoundingMode.NEAREST_99)
        1199
        >>> round_price(1025, RoundingMode.INCREMENT, increment=50)
        1050

    Raises:
        InvalidInput: Negative price, unknown mode, missing/non-positive
            increment, or a custom ending outside 1..99.
    """
    require_non_negative("price", price)
    mode = _parse_mode(mode)

    if mode == RoundingMode.NONE:
        return price

    if mode == RoundingMode.INCREMENT:
        if isinstance(increment, bool) or not isinstance(increment, int) or increment <= 0:
            raise InvalidInput(f"increment must be a positive integer, got {increment!r}")
        return -(-price // increment) * increment

    major, minor = divmod(price, MINOR_PER_MAJOR)

    if mode == RoundingMode.NEAREST_00:
        return (major + 1) * MINOR_PER_MAJOR if minor > 0 else price

    if mode == RoundingMode.NEAREST_99:
        ending = 99 if custom_ending is None else custom_ending
        if isinstance(ending, bool) or not isinstance(ending, int) or not 0 < ending < MINOR_PER_MAJOR:
            raise InvalidInput(f"custom_ending must be between 1 and 99, got {custom_ending!r}")
    else:
        ending = 50

    if minor >= ending:
        major += 1
    return major * MINOR_PER_MAJOR + ending


def generate_boost_plan(
    break_even: int,
    target: int,
    mode: RoundingModeLike = RoundingMode.NONE,
    increment: Optional[int] = None,
    custom_ending: Optional[int] = None,
) -> tuple[BoostStep, ...]:
    """
    Three launch price points climbing from just above break-even to target.

    Launch = break_even + BOOST_BUFFER_RATIO × break_even
    Growth = halfway between Launch and target
    Target = target

    Each point is rounded with ``mode``; a point that does not exceed its
    predecessor is bumped to predecessor + one major unit.
    """
    require_non_negative("break_even", break_even)
    require_non_negative("target", target)

    buffer = round_minor(Decimal(break_even) * settings.BOOST_BUFFER_RATIO)
    start = break_even + buffer
    growth = round_minor(Decimal(start) + Decimal(target - start) / 2)

    raw = (("Launch", start), ("Growth", growth), ("Target", target))
    steps: list[BoostStep] = []
    for name, price in raw:
        rounded = round_price(price, mode, increment=increment, custom_ending=custom_ending)
        if steps and rounded <= steps[-1].price:
            rounded = steps[-1].price + MINOR_PER_MAJOR
        steps.append(BoostStep(price=rounded, step=name))

    logger.debug(
        "boost_plan_generated",
        break_even=break_even,
        target=target,
        mode=_parse_mode(mode).value,
        prices=[s.price for s in steps],
        source="rounding",
    )
    return tuple(steps)
