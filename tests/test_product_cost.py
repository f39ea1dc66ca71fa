"""Tests for handmade / sourced product costing and bundles."""

from __future__ import annotations

from decimal import Decimal

import pytest

from pricewise.config import SourceType
from pricewise.engine.product_cost import (
    HandmadeProduct,
    LabourTask,
    MaterialUsage,
    ProductCost,
    SourcedProduct,
    calculate_bundle_cost,
    calculate_bundle_discount,
    calculate_product_cost,
    profit_per_hour,
)
from pricewise.errors import InvalidInput


class TestHandmade:
    def test_materials_labour_packaging(self) -> None:
        product = HandmadeProduct(
            materials=(
                MaterialUsage("Silver wire", 250, Decimal("1.5")),
                MaterialUsage("Beads", 10, 12),
            ),
            labour_tasks=(LabourTask("Assembly", 30, 1500),),
            packaging_cost=80,
        )
        assert calculate_product_cost(product) == ProductCost(
            materials=495, labour=750, packaging=80, shipping=0, total=1325,
        )

    def test_simple_labour_without_tasks(self) -> None:
        product = HandmadeProduct(labour_minutes=45, labour_rate=1200)
        assert calculate_product_cost(product).labour == 900

    def test_zero_cost_tasks_fall_back_to_simple(self) -> None:
        product = HandmadeProduct(
            labour_tasks=(LabourTask("Design", 0, 1500),),
            labour_minutes=60,
            labour_rate=1000,
        )
        assert calculate_product_cost(product).labour == 1000

    def test_tasks_win_over_simple(self) -> None:
        product = HandmadeProduct(
            labour_tasks=(LabourTask("Sanding", 20, 1200),),
            labour_minutes=60,
            labour_rate=1000,
        )
        assert calculate_product_cost(product).labour == 400

    def test_fractional_material_rounds(self) -> None:
        product = HandmadeProduct(materials=(MaterialUsage("Resin", 333, "0.5"),))
        assert calculate_product_cost(product).materials == 167

    def test_negative_quantity_raises(self) -> None:
        product = HandmadeProduct(materials=(MaterialUsage("Resin", 333, -1),))
        with pytest.raises(InvalidInput, match="Resin"):
            calculate_product_cost(product)

    def test_negative_packaging_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            calculate_product_cost(HandmadeProduct(packaging_cost=-5))


class TestSourced:
    def test_supplier_plus_shipping(self) -> None:
        cost = calculate_product_cost(
            SourcedProduct(1200, 350, source_type=SourceType.PRINT_ON_DEMAND)
        )
        assert cost.materials == 1200
        assert cost.shipping == 350
        assert cost.labour == 0
        assert cost.total == 1550

    def test_negative_supplier_cost_raises(self) -> None:
        with pytest.raises(InvalidInput, match="supplier_cost"):
            calculate_product_cost(SourcedProduct(-1))


class TestDispatch:
    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(InvalidInput, match="Unsupported product kind"):
            calculate_product_cost(HandmadeProduct(kind="mystery"))  # type: ignore[arg-type]


class TestBundles:
    def test_bundle_cost(self) -> None:
        assert calculate_bundle_cost([1325, 1550, 125]) == 3000

    def test_bundle_discount(self) -> None:
        assert calculate_bundle_discount(3000, 2400) == Decimal("20")

    @pytest.mark.parametrize("suggested", [3000, 3500, 0])
    def test_no_discount(self, suggested: int) -> None:
        assert calculate_bundle_discount(3000, suggested) == Decimal("0")

    def test_negative_component_raises(self) -> None:
        with pytest.raises(InvalidInput):
            calculate_bundle_cost([100, -1])


class TestProfitPerHour:
    def test_half_hour(self) -> None:
        assert profit_per_hour(923, 30) == Decimal("1846")

    def test_no_labour(self) -> None:
        assert profit_per_hour(923, 0) is None
