"""
Pricewise — What-If Scenarios

Applies relative percentage changes to material cost, labour cost, shipping
and sale price, re-runs the full calculation and reports the change versus
the baseline. Presets are just named delta bundles.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, NamedTuple, Optional, Sequence

import structlog

from pricewise.engine.profit import CalculationInput, CalculationResult, calculate
from pricewise.errors import InvalidInput
from pricewise.utils.money import (
    Number,
    require_non_negative,
    scale_by_percent_change,
    to_decimal,
)

logger = structlog.get_logger(__name__)

_ZERO = Decimal("0")
_FLOOR = Decimal("-100")


class ScenarioDeltas(NamedTuple):
    """Percentage changes; -20 means a 20% reduction."""
    name: str = "Custom"
    material_cost_change: Number = _ZERO
    labour_cost_change: Number = _ZERO
    shipping_cost_change: Number = _ZERO
    sale_price_change: Number = _ZERO


class ScenarioParams(NamedTuple):
    """Baseline a scenario is measured against."""
    base_input: CalculationInput
    material_cost: int
    labour_cost: int
    base_profit: int
    base_margin: Decimal


class ScenarioResult(NamedTuple):
    scenario: ScenarioDeltas
    result: CalculationResult
    profit: int
    margin: Decimal
    profit_change: int
    margin_change: Decimal
    new_sale_price: int
    new_cost: int


SCENARIO_PRESETS: tuple[ScenarioDeltas, ...] = (
    ScenarioDeltas("Supplier Price +10%", material_cost_change=Decimal("10")),
    ScenarioDeltas("Supplier Price +20%", material_cost_change=Decimal("20")),
    ScenarioDeltas("Shipping Cost +25%", shipping_cost_change=Decimal("25")),
    ScenarioDeltas("Sale Price -10%", sale_price_change=Decimal("-10")),
    ScenarioDeltas("Sale Price -20%", sale_price_change=Decimal("-20")),
    ScenarioDeltas("Premium Price +15%", sale_price_change=Decimal("15")),
    ScenarioDeltas(
        "Cost Increase +15%",
        material_cost_change=Decimal("15"),
        labour_cost_change=Decimal("15"),
        shipping_cost_change=Decimal("15"),
    ),
    ScenarioDeltas("Bulk Discount -20% cost", material_cost_change=Decimal("-20")),
)


def build_scenario_params(
    calc_input: CalculationInput,
    material_cost: int,
    labour_cost: int = 0,
) -> ScenarioParams:
    """
    Derive the baseline for scenario analysis.

    The baseline product cost is material_cost + labour_cost; every other
    field comes from calc_input.
    """
    require_non_negative("material_cost", material_cost)
    require_non_negative("labour_cost", labour_cost)

    base_input = calc_input._replace(product_cost=material_cost + labour_cost)
    baseline = calculate(base_input)
    return ScenarioParams(
        base_input=base_input,
        material_cost=material_cost,
        labour_cost=labour_cost,
        base_profit=baseline.profit,
        base_margin=baseline.margin,
    )


def _delta(name: str, value: Number) -> Decimal:
    delta = to_decimal(value, name)
    if delta < _FLOOR:
        raise InvalidInput(f"{name} cannot be below -100%, got {value}")
    return delta


def evaluate_scenario(params: ScenarioParams, deltas: ScenarioDeltas) -> ScenarioResult:
    """
    Re-run the calculation with perturbed inputs.

    Each input becomes round_half_up(base × (1 + delta / 100)).

    Raises:
        InvalidInput: If any delta is below -100.
    """
    base = params.base_input
    material = scale_by_percent_change(
        params.material_cost, _delta("material_cost_change", deltas.material_cost_change)
    )
    labour = scale_by_percent_change(
        params.labour_cost, _delta("labour_cost_change", deltas.labour_cost_change)
    )
    shipping = scale_by_percent_change(
        base.shipping_cost, _delta("shipping_cost_change", deltas.shipping_cost_change)
    )
    sale_price = scale_by_percent_change(
        base.sale_price, _delta("sale_price_change", deltas.sale_price_change)
    )

    result = calculate(
        base._replace(
            product_cost=material + labour,
            shipping_cost=shipping,
            sale_price=sale_price,
        )
    )
    new_cost = material + labour + (shipping if base.seller_pays_shipping else 0)

    scenario_result = ScenarioResult(
        scenario=deltas,
        result=result,
        profit=result.profit,
        margin=result.margin,
        profit_change=result.profit - params.base_profit,
        margin_change=result.margin - params.base_margin,
        new_sale_price=sale_price,
        new_cost=new_cost,
    )
    logger.debug(
        "scenario_evaluated",
        scenario=deltas.name,
        profit=result.profit,
        profit_change=scenario_result.profit_change,
        margin_change=str(scenario_result.margin_change),
        source="scenario",
    )
    return scenario_result


def evaluate_presets(
    params: ScenarioParams,
    presets: Sequence[ScenarioDeltas] = SCENARIO_PRESETS,
) -> tuple[ScenarioResult, ...]:
    return tuple(evaluate_scenario(params, preset) for preset in presets)


def worst_case(results: Iterable[ScenarioResult]) -> Optional[ScenarioResult]:
    """Lowest-profit scenario (first on ties)."""
    worst: Optional[ScenarioResult] = None
    for result in results:
        if worst is None or result.profit < worst.profit:
            worst = result
    return worst


def best_case(results: Iterable[ScenarioResult]) -> Optional[ScenarioResult]:
    """Highest-profit scenario (first on ties)."""
    best: Optional[ScenarioResult] = None
    for result in results:
        if best is None or result.profit > best.profit:
            best = result
    return best
