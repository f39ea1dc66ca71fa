"""Tests for seller profiles and the VAT threshold check."""

from __future__ import annotations

from decimal import Decimal

import pytest

from pricewise.config import Currency, PaymentMethod, PlatformKey, settings
from pricewise.engine.profile import (
    SellerProfile,
    VatThresholdStatus,
    build_input,
    vat_threshold_status,
)
from pricewise.engine.profit import calculate
from pricewise.errors import InvalidInput, UnsupportedCurrency


class TestBuildInput:
    def test_defaults(self) -> None:
        calc_input = build_input(SellerProfile(), product_cost=500, sale_price=2000)
        assert calc_input.vat_rate == Decimal("20")
        assert calc_input.is_vat_registered is False
        assert calc_input.platform == PlatformKey.ETSY
        assert calc_input.payment_method == PaymentMethod.PLATFORM_INCLUDED
        assert calc_input.target_margin == Decimal("30")

    def test_currency_drives_vat_rate(self) -> None:
        calc_input = build_input(SellerProfile(currency="EUR"), 500, 2000)
        assert calc_input.vat_rate == Decimal("19")

    def test_explicit_overrides(self) -> None:
        profile = SellerProfile(primary_platform="ebay", payment_method="paypal")
        calc_input = build_input(
            profile, 500, 2000,
            platform="amazon",
            payment_method=PaymentMethod.STRIPE,
            target_margin=40,
        )
        assert calc_input.platform == PlatformKey.AMAZON
        assert calc_input.payment_method == PaymentMethod.STRIPE
        assert calc_input.target_margin == Decimal("40")

    def test_registered_seller_end_to_end(self) -> None:
        profile = SellerProfile(vat_registered=True)
        result = calculate(build_input(profile, 500, 2000, shipping_cost=300, seller_pays_shipping=True))
        assert result.receipts_ex_vat == 1667
        assert result.profit == 590

    def test_profiles_are_independent(self) -> None:
        gbp = build_input(SellerProfile(currency=Currency.GBP), 500, 2000)
        usd = build_input(SellerProfile(currency=Currency.USD), 500, 2000)
        assert gbp.vat_rate == Decimal("20")
        assert usd.vat_rate == Decimal("0")

    def test_bad_margin_raises(self) -> None:
        with pytest.raises(InvalidInput, match="target_margin"):
            build_input(SellerProfile(default_target_margin=100), 500, 2000)

    def test_unsupported_currency_raises(self) -> None:
        with pytest.raises(UnsupportedCurrency):
            build_input(SellerProfile(currency="XYZ"), 500, 2000)


class TestVatThreshold:
    """GBP threshold is 9,000,000 minor units; warning from 80%."""

    @pytest.mark.parametrize(
        "turnover,expected",
        [
            (0, VatThresholdStatus.BELOW),
            (7_199_999, VatThresholdStatus.BELOW),
            (7_200_000, VatThresholdStatus.APPROACHING),
            (8_999_999, VatThresholdStatus.APPROACHING),
            (9_000_000, VatThresholdStatus.EXCEEDED),
            (12_000_000, VatThresholdStatus.EXCEEDED),
        ],
    )
    def test_gbp_bands(self, turnover: int, expected: VatThresholdStatus) -> None:
        assert vat_threshold_status(turnover, SellerProfile()) == expected

    def test_no_threshold_currency(self) -> None:
        profile = SellerProfile(currency=Currency.USD)
        assert vat_threshold_status(50_000_000, profile) == VatThresholdStatus.NOT_APPLICABLE

    def test_warning_ratio_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "VAT_WARNING_RATIO", Decimal("0.5"))
        assert vat_threshold_status(4_500_000, SellerProfile()) == VatThresholdStatus.APPROACHING

    def test_negative_turnover_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            vat_threshold_status(-1, SellerProfile())
