"""
Pricewise — Payment Processor Fees

External payment processors charge a percentage plus a fixed fee per order.
Platforms that bundle payment processing into their own fee schedule allow
``platform_included``; offering that choice elsewhere is the caller's
responsibility to prevent (see available_payment_methods).
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, NamedTuple, Union

import structlog

from pricewise.config import PaymentMethod
from pricewise.engine.fees import (
    EMPTY_FEES,
    FeeLine,
    FeeSummary,
    PlatformLike,
    get_platform_schedule,
)
from pricewise.errors import InvalidInput
from pricewise.utils.money import percent_of, require_non_negative

logger = structlog.get_logger(__name__)

PaymentMethodLike = Union[PaymentMethod, str]


class PaymentMethodConfig(NamedTuple):
    key: PaymentMethod
    label: str
    percentage_fee: Decimal   # e.g. 3.6 for 3.6%
    fixed_fee: int            # minor units


PAYMENT_METHODS: Mapping[PaymentMethod, PaymentMethodConfig] = MappingProxyType({
    PaymentMethod.PLATFORM_INCLUDED: PaymentMethodConfig(
        PaymentMethod.PLATFORM_INCLUDED, "Included in Platform", Decimal("0"), 0,
    ),
    PaymentMethod.PAYPAL: PaymentMethodConfig(
        PaymentMethod.PAYPAL, "PayPal", Decimal("3.6"), 30,
    ),
    PaymentMethod.STRIPE: PaymentMethodConfig(
        PaymentMethod.STRIPE, "Stripe", Decimal("2.9"), 30,
    ),
    PaymentMethod.SQUARE: PaymentMethodConfig(
        PaymentMethod.SQUARE, "Square", Decimal("2.7"), 20,
    ),
    PaymentMethod.MANUAL: PaymentMethodConfig(
        PaymentMethod.MANUAL, "Cash / Manual", Decimal("0"), 0,
    ),
})

# Methods that never add a processor fee
_FREE_METHODS = frozenset({PaymentMethod.PLATFORM_INCLUDED, PaymentMethod.MANUAL})


def parse_payment_method(method: PaymentMethodLike) -> PaymentMethod:
    try:
        return PaymentMethod(method.strip().lower() if isinstance(method, str) else method)
    except ValueError as exc:
        raise InvalidInput(f"Unknown payment method '{method}'") from exc


def calculate_payment_fees(order_total: int, method: PaymentMethodLike) -> FeeSummary:
    """
    Calculate payment processing fees for one order.

    Formula: round_half_up(order_total × pct / 100) + fixed

    Args:
        order_total: Amount the buyer pays, in minor units.
        method: Selected payment method.

    Returns:
        FeeSummary; empty for platform_included and manual.

    Raises:
        InvalidInput: If order_total is negative or the method is unknown.
    """
    require_non_negative("order_total", order_total)
    method = parse_payment_method(method)

    if method in _FREE_METHODS:
        return EMPTY_FEES

    config = PAYMENT_METHODS[method]
    percentage_fee = percent_of(order_total, config.percentage_fee)
    fixed_fee = config.fixed_fee

    breakdown: list[FeeLine] = []
    if percentage_fee > 0:
        breakdown.append(
            FeeLine(f"{config.label} ({config.percentage_fee.normalize():f}%)", percentage_fee)
        )
    if fixed_fee > 0:
        breakdown.append(FeeLine(f"{config.label} fixed fee", fixed_fee))

    summary = FeeSummary(total=percentage_fee + fixed_fee, breakdown=tuple(breakdown))
    logger.debug(
        "payment_fees_calculated",
        method=method.value,
        order_total=order_total,
        total=summary.total,
        source="payment",
    )
    return summary


def platform_includes_payment_processing(platform: PlatformLike) -> bool:
    """True iff the platform's own fee schedule already covers card processing."""
    return get_platform_schedule(platform).includes_payment_processing


def available_payment_methods(platform: PlatformLike) -> tuple[PaymentMethod, ...]:
    """Payment methods a form may offer for this platform."""
    if platform_includes_payment_processing(platform):
        return tuple(PaymentMethod)
    return tuple(m for m in PaymentMethod if m != PaymentMethod.PLATFORM_INCLUDED)
