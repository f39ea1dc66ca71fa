"""
Pricewise — Overhead Allocation

Spreads recurring monthly costs (rent, software, insurance, ...) over the
expected monthly unit sales to give a per-unit overhead addend.
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple

import structlog

from pricewise.config import OverheadCategory
from pricewise.errors import InvalidInput
from pricewise.utils.money import require_non_negative, round_minor

logger = structlog.get_logger(__name__)

MONTHS_PER_YEAR = 12


class OverheadItem(NamedTuple):
    """A recurring monthly cost in minor units."""
    name: str
    amount: int
    category: OverheadCategory = OverheadCategory.OTHER


class OverheadAllocation(NamedTuple):
    total_monthly: int
    total_yearly: int
    per_unit_allocation: int
    items: tuple[OverheadItem, ...]


class OverheadAdjustment(NamedTuple):
    adjusted_profit: int
    total_overhead: int
    profit_before_overhead: int


# ---------------------------------------------------------------------------
# Presets for common seller set-ups (monthly, minor units)
# ---------------------------------------------------------------------------

OVERHEAD_PRESETS: Mapping[str, tuple[OverheadItem, ...]] = MappingProxyType({
    "home_seller": (
        OverheadItem("Etsy Plus subscription", 1000, OverheadCategory.SOFTWARE),
        OverheadItem("Packaging supplies", 2000, OverheadCategory.OTHER),
        OverheadItem("Home office utilities", 3000, OverheadCategory.UTILITIES),
    ),
    "small_business": (
        OverheadItem("Studio/workspace rent", 30000, OverheadCategory.RENT),
        OverheadItem("Utilities", 8000, OverheadCategory.UTILITIES),
        OverheadItem("Business insurance", 5000, OverheadCategory.INSURANCE),
        OverheadItem("Software subscriptions", 3000, OverheadCategory.SOFTWARE),
        OverheadItem("Marketing/ads", 5000, OverheadCategory.MARKETING),
    ),
    "studio": (
        OverheadItem("Studio rent", 50000, OverheadCategory.RENT),
        OverheadItem("Utilities", 15000, OverheadCategory.UTILITIES),
        OverheadItem("Insurance", 8000, OverheadCategory.INSURANCE),
        OverheadItem("Equipment maintenance", 5000, OverheadCategory.OTHER),
        OverheadItem("Software/tools", 5000, OverheadCategory.SOFTWARE),
        OverheadItem("Marketing", 10000, OverheadCategory.MARKETING),
    ),
})


def allocate_overhead(
    items: Iterable[OverheadItem],
    estimated_monthly_sales: int,
) -> OverheadAllocation:
    """
    Aggregate overheads and allocate them per unit sold.

    per_unit_allocation = round_half_up(total_monthly / estimated_monthly_sales),
    or 0 when no sales are expected.

    Raises:
        InvalidInput: Negative item amount or negative sales estimate.
    """
    items = tuple(items)
    for item in items:
        require_non_negative(f"overhead '{item.name}' amount", item.amount)
    require_non_negative("estimated_monthly_sales", estimated_monthly_sales)

    total_monthly = sum(item.amount for item in items)
    per_unit = 0
    if estimated_monthly_sales > 0:
        per_unit = round_minor(Decimal(total_monthly) / estimated_monthly_sales)

    allocation = OverheadAllocation(
        total_monthly=total_monthly,
        total_yearly=total_monthly * MONTHS_PER_YEAR,
        per_unit_allocation=per_unit,
        items=items,
    )
    logger.debug(
        "overhead_allocated",
        items=len(items),
        total_monthly=total_monthly,
        estimated_monthly_sales=estimated_monthly_sales,
        per_unit_allocation=per_unit,
        source="overhead",
    )
    return allocation


def apply_overhead(base_profit: int, overhead_per_unit: int, quantity: int) -> OverheadAdjustment:
    """
    Subtract allocated overhead from a profit figure.

    Negative adjusted profit is returned as-is.

    Raises:
        InvalidInput: Negative overhead or quantity < 1.
    """
    require_non_negative("overhead_per_unit", overhead_per_unit)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidInput(f"quantity must be a positive integer, got {quantity!r}")
    if isinstance(base_profit, bool) or not isinstance(base_profit, int):
        raise InvalidInput(f"base_profit must be an integer amount, got {base_profit!r}")

    total_overhead = overhead_per_unit * quantity
    return OverheadAdjustment(
        adjusted_profit=base_profit - total_overhead,
        total_overhead=total_overhead,
        profit_before_overhead=base_profit,
    )


def overhead_by_category(items: Iterable[OverheadItem]) -> dict[OverheadCategory, int]:
    totals: dict[OverheadCategory, int] = {}
    for item in items:
        category = item.category or OverheadCategory.OTHER
        totals[category] = totals.get(category, 0) + item.amount
    return totals
