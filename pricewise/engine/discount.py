"""
Pricewise — Discount Analysis

Sweeps a range of discount percentages and reports profit at each step,
plus the deepest discount that still breaks even and the deepest discount
that keeps a caller-chosen minimum margin.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR
from typing import Callable, Iterable, NamedTuple, Optional

import structlog

from pricewise.config import settings
from pricewise.engine.profit import CalculationInput, ProfitSnapshot, evaluate_profit
from pricewise.errors import InvalidInput
from pricewise.utils.money import Number, require_percentage, round_minor

logger = structlog.get_logger(__name__)

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


class DiscountStep(NamedTuple):
    discount_percent: Decimal
    discounted_price: int
    original_price: int
    discount: int
    fees: int
    profit: int
    margin: Decimal
    is_profitable: bool


class DiscountAnalysis(NamedTuple):
    results: tuple[DiscountStep, ...]
    break_even_discount: Decimal
    max_profitable_discount: Decimal

    @property
    def first_loss_index(self) -> Optional[int]:
        """Index of the first step that is not profitable, if any."""
        for index, step in enumerate(self.results):
            if not step.is_profitable:
                return index
        return None


def default_discount_range() -> tuple[Decimal, ...]:
    """0% to DISCOUNT_MAX in DISCOUNT_STEP increments."""
    step = settings.DISCOUNT_STEP
    if step <= 0:
        raise InvalidInput(f"DISCOUNT_STEP must be positive, got {step}")
    values = []
    current = Decimal("0")
    while current <= settings.DISCOUNT_MAX:
        values.append(current)
        current += step
    return tuple(values)


def discounted_price(sale_price: int, discount_percent: Decimal) -> int:
    return round_minor(Decimal(sale_price) * (_ONE - discount_percent / _HUNDRED))


def _profit_at(calc_input: CalculationInput, discount_percent: Decimal) -> ProfitSnapshot:
    price = discounted_price(calc_input.sale_price, discount_percent)
    return evaluate_profit(calc_input._replace(sale_price=price))


def _deepest_discount(
    calc_input: CalculationInput,
    acceptable: Callable[[ProfitSnapshot], bool],
) -> Decimal:
    """
    Largest discount (at DISCOUNT_RESOLUTION) whose snapshot is acceptable.

    Bisection over whole resolution steps; 0 when even the full price fails.
    """
    resolution = settings.DISCOUNT_RESOLUTION
    steps = int((_HUNDRED / resolution).to_integral_value(rounding=ROUND_FLOOR))

    def ok(n: int) -> bool:
        return acceptable(_profit_at(calc_input, resolution * n))

    if not ok(0):
        return Decimal("0")
    if ok(steps):
        return resolution * steps

    low, high = 0, steps
    while high - low > 1:
        mid = (low + high) // 2
        if ok(mid):
            low = mid
        else:
            high = mid
    return resolution * low


def analyze_discounts(
    calc_input: CalculationInput,
    discount_range: Optional[Iterable[Number]] = None,
    min_margin: Number = Decimal("0"),
) -> DiscountAnalysis:
    """
    Profit analysis at each discount level.

    Args:
        calc_input: Undiscounted calculation input.
        discount_range: Discount percentages to report (default 0-90 step 5).
            Sorted ascending and de-duplicated.
        min_margin: Margin floor used for max_profitable_discount.

    Returns:
        DiscountAnalysis with one DiscountStep per discount level.

    Raises:
        InvalidInput: If a discount is outside [0, 100] or min_margin outside [0, 100).
    """
    if discount_range is None:
        levels = default_discount_range()
    else:
        levels = tuple(
            sorted({require_percentage("discount_percent", d) for d in discount_range})
        )
    floor = require_percentage("min_margin", min_margin, upper_inclusive=False)

    results = []
    for level in levels:
        price = discounted_price(calc_input.sale_price, level)
        snap = evaluate_profit(calc_input._replace(sale_price=price))
        results.append(
            DiscountStep(
                discount_percent=level,
                discounted_price=price,
                original_price=calc_input.sale_price,
                discount=calc_input.sale_price - price,
                fees=snap.total_fees,
                profit=snap.profit,
                margin=snap.margin,
                is_profitable=snap.profit > 0,
            )
        )

    break_even_discount = _deepest_discount(calc_input, lambda s: s.profit >= 0)
    max_profitable_discount = _deepest_discount(
        calc_input, lambda s: s.profit >= 0 and s.margin >= floor
    )

    analysis = DiscountAnalysis(
        results=tuple(results),
        break_even_discount=break_even_discount,
        max_profitable_discount=max_profitable_discount,
    )
    logger.info(
        "discounts_analyzed",
        sale_price=calc_input.sale_price,
        levels=len(results),
        break_even_discount=str(break_even_discount),
        max_profitable_discount=str(max_profitable_discount),
        min_margin=str(floor),
        source="discount",
    )
    return analysis


def summarize_discounts(analysis: DiscountAnalysis) -> str:
    """One-line description of a discount analysis."""
    profitable = [step for step in analysis.results if step.is_profitable]

    if not profitable:
        return "Not profitable at any discount level"

    if len(profitable) == len(analysis.results):
        deepest = max(step.discount_percent for step in analysis.results)
        return f"Profitable at all tested discounts (up to {deepest.normalize():f}%)"

    return f"Profitable up to {analysis.break_even_discount.normalize():f}% discount"
