"""
Pricewise — Batch Pricing

Per-unit profit at each order-quantity tier of a supplier's price-break table.
Higher quantities usually buy a lower unit cost; one-time setup costs are
spread across the batch.

Best tier = highest margin; ties go to the smallest quantity so we never
recommend a larger commitment than needed.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable, NamedTuple, Optional, Sequence

import structlog

from pricewise.config import settings
from pricewise.engine.profit import CalculationInput, evaluate_profit
from pricewise.errors import InvalidInput
from pricewise.utils.money import (
    Number,
    require_non_negative,
    require_percentage,
    round_minor,
    scale_by_percent_change,
)

logger = structlog.get_logger(__name__)


class QuantityBreak(NamedTuple):
    """One row of a supplier price-break table."""
    quantity: int
    unit_cost: int


class BulkDiscount(NamedTuple):
    min_quantity: int
    discount_percent: Decimal


class BatchTier(NamedTuple):
    quantity: int
    unit_cost: int          # all-in cost per unit at this quantity
    profit_per_unit: int
    total_profit: int
    margin: Decimal


def _require_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidInput(f"quantity must be a positive integer, got {quantity!r}")


def tiers_from_bulk_discounts(
    base_unit_cost: int,
    discounts: Iterable[BulkDiscount],
    quantities: Optional[Sequence[int]] = None,
) -> tuple[QuantityBreak, ...]:
    """
    Build a price-break table from percentage bulk discounts.

    Each quantity gets the discount of the highest min_quantity it reaches.

    Args:
        base_unit_cost: Undiscounted unit cost in minor units.
        discounts: (min_quantity, discount_percent) pairs.
        quantities: Quantities to tabulate (default settings.BATCH_DEFAULT_QUANTITIES).
    """
    require_non_negative("base_unit_cost", base_unit_cost)
    ordered = sorted(
        (
            BulkDiscount(d.min_quantity, require_percentage("discount_percent", d.discount_percent))
            for d in discounts
        ),
        key=lambda d: d.min_quantity,
        reverse=True,
    )

    table = []
    for quantity in settings.BATCH_DEFAULT_QUANTITIES if quantities is None else quantities:
        _require_quantity(quantity)
        unit_cost = base_unit_cost
        for discount in ordered:
            if quantity >= discount.min_quantity:
                unit_cost = scale_by_percent_change(base_unit_cost, -discount.discount_percent)
                break
        table.append(QuantityBreak(quantity=quantity, unit_cost=unit_cost))
    return tuple(table)


def compute_batch_tiers(
    tier_table: Iterable[QuantityBreak],
    calc_input: CalculationInput,
    fixed_costs_per_unit: int = 0,
    setup_costs: int = 0,
) -> tuple[BatchTier, ...]:
    """
    Profit per unit, total profit and margin at each quantity tier.

    Each tier runs the core calculator for a single unit whose product cost
    is the tier's unit cost plus fixed_costs_per_unit plus its share of
    setup_costs. Sale price, shipping, platform, payment and VAT come from
    calc_input.

    Returns:
        Tiers sorted by quantity.

    Raises:
        InvalidInput: Quantity < 1 or any negative cost.
    """
    require_non_negative("fixed_costs_per_unit", fixed_costs_per_unit)
    require_non_negative("setup_costs", setup_costs)

    tiers = []
    for row in sorted(tier_table, key=lambda r: r.quantity):
        _require_quantity(row.quantity)
        require_non_negative("unit_cost", row.unit_cost)

        setup_share = round_minor(Decimal(setup_costs) / row.quantity)
        unit_cost = row.unit_cost + fixed_costs_per_unit + setup_share

        snap = evaluate_profit(calc_input._replace(product_cost=unit_cost, quantity=1))
        tiers.append(
            BatchTier(
                quantity=row.quantity,
                unit_cost=unit_cost,
                profit_per_unit=snap.profit,
                total_profit=snap.profit * row.quantity,
                margin=snap.margin,
            )
        )

    logger.debug(
        "batch_tiers_computed",
        sale_price=calc_input.sale_price,
        quantities=[t.quantity for t in tiers],
        margins=[str(t.margin) for t in tiers],
        source="batch",
    )
    return tuple(tiers)


def best_batch_tier(tiers: Iterable[BatchTier]) -> Optional[BatchTier]:
    """Tier with the highest margin; smallest quantity among equal maxima."""
    best: Optional[BatchTier] = None
    for tier in tiers:
        if (
            best is None
            or tier.margin > best.margin
            or (tier.margin == best.margin and tier.quantity < best.quantity)
        ):
            best = tier
    return best


def optimal_bulk_tier(tiers: Iterable[BatchTier]) -> Optional[BatchTier]:
    """Tier with the highest profit per unit; smallest quantity on ties."""
    best: Optional[BatchTier] = None
    for tier in tiers:
        if (
            best is None
            or tier.profit_per_unit > best.profit_per_unit
            or (tier.profit_per_unit == best.profit_per_unit and tier.quantity < best.quantity)
        ):
            best = tier
    return best


def break_even_quantity(setup_costs: int, profit_per_unit: Number) -> Optional[int]:
    """
    Units needed before per-unit profit pays back one-time setup costs.

    Returns:
        ceil(setup_costs / profit_per_unit), or None if profit_per_unit <= 0.
    """
    require_non_negative("setup_costs", setup_costs)
    profit = Decimal(str(profit_per_unit))
    if profit <= 0:
        return None
    return math.ceil(Decimal(setup_costs) / profit)
