"""
Pricewise — Shared pytest Fixtures

Provides common calculation inputs for all test modules:
- The Etsy reference listing (cost 5.00, price 20.00, seller-paid shipping 3.00)
- A plain Amazon listing with no shipping
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from pricewise.config import PlatformKey
from pricewise.engine.profit import CalculationInput


# ---------------------------------------------------------------------------
# Calculation inputs
# ---------------------------------------------------------------------------


@pytest.fixture
def etsy_input() -> CalculationInput:
    """
    Reference Etsy listing.

    Fees on a 2300 subtotal: 150 + 92 + 20 + 15 = 277.
    Profit 2000 - 800 - 277 = 923, margin 46.15%.
    """
    return CalculationInput(
        product_cost=500,
        sale_price=2000,
        shipping_cost=300,
        seller_pays_shipping=True,
        quantity=1,
        platform=PlatformKey.ETSY,
    )


@pytest.fixture
def amazon_input() -> CalculationInput:
    """Amazon referral fee only: 15% of the item price."""
    return CalculationInput(
        product_cost=850,
        sale_price=2000,
        platform=PlatformKey.AMAZON,
        target_margin=Decimal("30"),
    )
