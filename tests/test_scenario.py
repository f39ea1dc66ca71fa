"""Tests for what-if scenario analysis."""

from __future__ import annotations

from decimal import Decimal

import pytest

from pricewise.engine.profit import CalculationInput, calculate
from pricewise.engine.scenario import (
    SCENARIO_PRESETS,
    ScenarioDeltas,
    ScenarioParams,
    best_case,
    build_scenario_params,
    evaluate_presets,
    evaluate_scenario,
    worst_case,
)
from pricewise.errors import InvalidInput


@pytest.fixture
def params(etsy_input: CalculationInput) -> ScenarioParams:
    return build_scenario_params(etsy_input, material_cost=400, labour_cost=100)


class TestBaseline:
    def test_params_capture_baseline(self, params: ScenarioParams) -> None:
        assert params.base_input.product_cost == 500
        assert params.base_profit == 923
        assert params.base_margin == Decimal("46.15")

    def test_null_scenario_reproduces_baseline(self, params: ScenarioParams) -> None:
        outcome = evaluate_scenario(params, ScenarioDeltas())
        assert outcome.profit_change == 0
        assert outcome.margin_change == Decimal("0")
        assert outcome.result == calculate(params.base_input)
        assert outcome.new_sale_price == 2000
        assert outcome.new_cost == 800


class TestEvaluateScenario:
    def test_material_increase(self, params: ScenarioParams) -> None:
        outcome = evaluate_scenario(params, ScenarioDeltas(material_cost_change=10))
        assert outcome.profit == 883
        assert outcome.profit_change == -40
        assert outcome.new_cost == 440 + 100 + 300

    def test_price_cut_changes_fees(self, params: ScenarioParams) -> None:
        # 1800 + 300 shipping: fees 137 + 84 + 35
        outcome = evaluate_scenario(params, ScenarioDeltas(sale_price_change=-10))
        assert outcome.new_sale_price == 1800
        assert outcome.result.total_fees == 256
        assert outcome.profit == 744
        assert outcome.profit_change == -179

    def test_buyer_paid_shipping_not_in_cost(self, etsy_input: CalculationInput) -> None:
        params = build_scenario_params(etsy_input._replace(seller_pays_shipping=False), 500)
        outcome = evaluate_scenario(params, ScenarioDeltas(shipping_cost_change=50))
        assert outcome.new_cost == 500

    def test_minus_100_zeroes_input(self, params: ScenarioParams) -> None:
        outcome = evaluate_scenario(params, ScenarioDeltas(labour_cost_change=-100))
        assert outcome.new_cost == 400 + 300

    def test_delta_below_minus_100_raises(self, params: ScenarioParams) -> None:
        with pytest.raises(InvalidInput, match="below -100%"):
            evaluate_scenario(params, ScenarioDeltas(sale_price_change=-150))

    def test_negative_material_cost_raises(self, etsy_input: CalculationInput) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            build_scenario_params(etsy_input, material_cost=-1)


class TestPresets:
    def test_eight_presets(self) -> None:
        assert len(SCENARIO_PRESETS) == 8

    def test_preset_profits(self, params: ScenarioParams) -> None:
        results = evaluate_presets(params)
        assert [r.profit for r in results] == [883, 843, 841, 744, 565, 1192, 799, 1003]

    def test_worst_and_best(self, params: ScenarioParams) -> None:
        results = evaluate_presets(params)
        assert worst_case(results).scenario.name == "Sale Price -20%"
        assert best_case(results).scenario.name == "Premium Price +15%"

    def test_empty(self) -> None:
        assert worst_case([]) is None
        assert best_case([]) is None
