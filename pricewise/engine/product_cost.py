"""
Pricewise — Product Cost

Unit cost of a product, which feeds CalculationInput.product_cost.

Products are a tagged variant on ``kind``:
- handmade: materials + labour + packaging
- sourced: supplier cost + supplier shipping
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, NamedTuple, Optional, Union

import structlog

from pricewise.config import ProductKind, SourceType
from pricewise.errors import InvalidInput
from pricewise.utils.money import Number, require_non_negative, round_minor, to_decimal

logger = structlog.get_logger(__name__)

_ZERO = Decimal("0")
_SIXTY = Decimal("60")
_HUNDRED = Decimal("100")


class MaterialUsage(NamedTuple):
    name: str
    cost_per_unit: int      # minor units per material unit (sheet, ml, g, ...)
    quantity: Number


class LabourTask(NamedTuple):
    name: str
    minutes: Number
    rate_per_hour: int


class HandmadeProduct(NamedTuple):
    materials: tuple[MaterialUsage, ...] = ()
    labour_tasks: tuple[LabourTask, ...] = ()
    labour_minutes: Number = _ZERO    # simple labour entry, used when tasks cost nothing
    labour_rate: int = 0              # per hour
    packaging_cost: int = 0
    kind: ProductKind = ProductKind.HANDMADE


class SourcedProduct(NamedTuple):
    supplier_cost: int
    supplier_shipping_cost: int = 0
    source_type: SourceType = SourceType.DROPSHIP
    kind: ProductKind = ProductKind.SOURCED


Product = Union[HandmadeProduct, SourcedProduct]


class ProductCost(NamedTuple):
    materials: int
    labour: int
    packaging: int
    shipping: int
    total: int


def _non_negative_decimal(name: str, value: Number) -> Decimal:
    amount = to_decimal(value, name)
    if amount < _ZERO:
        raise InvalidInput(f"{name} must be non-negative, got {value}")
    return amount


def _handmade_cost(product: HandmadeProduct) -> ProductCost:
    require_non_negative("packaging_cost", product.packaging_cost)
    require_non_negative("labour_rate", product.labour_rate)

    materials_exact = _ZERO
    for material in product.materials:
        require_non_negative(f"material '{material.name}' cost_per_unit", material.cost_per_unit)
        qty = _non_negative_decimal(f"material '{material.name}' quantity", material.quantity)
        materials_exact += Decimal(material.cost_per_unit) * qty

    task_labour = _ZERO
    for task in product.labour_tasks:
        require_non_negative(f"task '{task.name}' rate_per_hour", task.rate_per_hour)
        minutes = _non_negative_decimal(f"task '{task.name}' minutes", task.minutes)
        task_labour += minutes / _SIXTY * task.rate_per_hour

    simple_minutes = _non_negative_decimal("labour_minutes", product.labour_minutes)
    simple_labour = simple_minutes / _SIXTY * product.labour_rate

    # Itemised tasks win over the simple minutes × rate entry
    labour_exact = task_labour if task_labour > _ZERO else simple_labour

    materials = round_minor(materials_exact)
    labour = round_minor(labour_exact)
    return ProductCost(
        materials=materials,
        labour=labour,
        packaging=product.packaging_cost,
        shipping=0,
        total=materials + labour + product.packaging_cost,
    )


def _sourced_cost(product: SourcedProduct) -> ProductCost:
    require_non_negative("supplier_cost", product.supplier_cost)
    require_non_negative("supplier_shipping_cost", product.supplier_shipping_cost)
    return ProductCost(
        materials=product.supplier_cost,
        labour=0,
        packaging=0,
        shipping=product.supplier_shipping_cost,
        total=product.supplier_cost + product.supplier_shipping_cost,
    )


def calculate_product_cost(product: Product) -> ProductCost:
    """
    Unit cost breakdown for a handmade or sourced product.

    Raises:
        InvalidInput: Unknown product kind or any negative amount.
    """
    if product.kind == ProductKind.HANDMADE:
        cost = _handmade_cost(product)
    elif product.kind == ProductKind.SOURCED:
        cost = _sourced_cost(product)
    else:
        raise InvalidInput(f"Unsupported product kind '{product.kind}'")

    logger.debug(
        "product_cost_calculated",
        kind=ProductKind(product.kind).value,
        materials=cost.materials,
        labour=cost.labour,
        total=cost.total,
        source="product_cost",
    )
    return cost


def profit_per_hour(profit: int, labour_minutes: Number) -> Optional[Decimal]:
    """Profit earned per hour of labour; None when no labour is recorded."""
    minutes = _non_negative_decimal("labour_minutes", labour_minutes)
    if minutes == _ZERO:
        return None
    return Decimal(profit) / (minutes / _SIXTY)


def calculate_bundle_cost(product_costs: Iterable[int]) -> int:
    total = 0
    for cost in product_costs:
        require_non_negative("product cost", cost)
        total += cost
    return total


def calculate_bundle_discount(total_cost: int, suggested_price: int) -> Decimal:
    """
    Percentage a bundle's suggested price undercuts the sum of its parts.

    Returns 0 when the suggested price is not below the total or is not positive.
    """
    if suggested_price >= total_cost or suggested_price <= 0:
        return _ZERO
    return Decimal(total_cost - suggested_price) / Decimal(total_cost) * _HUNDRED
