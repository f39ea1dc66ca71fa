"""
Pricewise — Seller Profile

Seller preferences (currency, VAT registration, default margin, hourly rate,
primary platform) as an explicit value passed into calculations. Nothing here
is process-global; two sellers can be priced side by side.

VAT threshold check:
- NOT_APPLICABLE: the currency has no registration threshold
- BELOW:          turnover < VAT_WARNING_RATIO × threshold
- APPROACHING:    VAT_WARNING_RATIO × threshold <= turnover < threshold
- EXCEEDED:       turnover >= threshold
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import NamedTuple, Optional

import structlog

from pricewise.config import Currency, PaymentMethod, PlatformKey, settings
from pricewise.engine.fees import FeeTerm, PlatformLike, parse_platform
from pricewise.engine.payment import PaymentMethodLike, parse_payment_method
from pricewise.engine.profit import CalculationInput
from pricewise.utils.currency import CurrencyLike, get_currency
from pricewise.utils.money import Number, require_non_negative, require_percentage

logger = structlog.get_logger(__name__)


class VatThresholdStatus(str, Enum):
    NOT_APPLICABLE = "not_applicable"
    BELOW = "below"
    APPROACHING = "approaching"
    EXCEEDED = "exceeded"


class SellerProfile(NamedTuple):
    currency: CurrencyLike = Currency.GBP
    vat_registered: bool = False
    default_target_margin: Number = Decimal("30")
    default_hourly_rate: int = 1500     # minor units per hour
    primary_platform: PlatformLike = PlatformKey.ETSY
    payment_method: PaymentMethodLike = PaymentMethod.PLATFORM_INCLUDED


def build_input(
    profile: SellerProfile,
    product_cost: int,
    sale_price: int,
    shipping_cost: int = 0,
    seller_pays_shipping: bool = False,
    quantity: int = 1,
    platform: Optional[PlatformLike] = None,
    payment_method: Optional[PaymentMethodLike] = None,
    target_margin: Optional[Number] = None,
    custom_fees: tuple[FeeTerm, ...] = (),
) -> CalculationInput:
    """
    Build a CalculationInput with the seller's defaults filled in.

    The VAT rate is the standard rate of the profile's currency. Explicit
    arguments override the profile's platform, payment method and margin.

    Raises:
        UnsupportedCurrency: Profile currency not supported.
        UnknownPlatform / InvalidInput: Invalid platform, payment method or margin.
    """
    config = get_currency(profile.currency)
    margin = profile.default_target_margin if target_margin is None else target_margin

    return CalculationInput(
        product_cost=product_cost,
        sale_price=sale_price,
        shipping_cost=shipping_cost,
        seller_pays_shipping=seller_pays_shipping,
        quantity=quantity,
        platform=parse_platform(profile.primary_platform if platform is None else platform),
        vat_rate=config.vat_rate,
        is_vat_registered=bool(profile.vat_registered),
        payment_method=parse_payment_method(
            profile.payment_method if payment_method is None else payment_method
        ),
        target_margin=require_percentage("target_margin", margin, upper_inclusive=False),
        custom_fees=tuple(custom_fees),
    )


def vat_threshold_status(annual_turnover: int, profile: SellerProfile) -> VatThresholdStatus:
    """Where annual turnover sits relative to the currency's VAT registration threshold."""
    require_non_negative("annual_turnover", annual_turnover)
    config = get_currency(profile.currency)

    if config.vat_threshold <= 0:
        status = VatThresholdStatus.NOT_APPLICABLE
    elif annual_turnover >= config.vat_threshold:
        status = VatThresholdStatus.EXCEEDED
    elif Decimal(annual_turnover) >= Decimal(config.vat_threshold) * settings.VAT_WARNING_RATIO:
        status = VatThresholdStatus.APPROACHING
    else:
        status = VatThresholdStatus.BELOW

    warn = status in (VatThresholdStatus.APPROACHING, VatThresholdStatus.EXCEEDED)
    if warn and not profile.vat_registered:
        logger.warning(
            "vat_threshold_warning",
            currency=config.code.value,
            annual_turnover=annual_turnover,
            threshold=config.vat_threshold,
            status=status.value,
            source="profile",
        )
    return status
