"""
Pricewise — Platform Fee Schedules

Per-platform fee term tables and the evaluator that charges them against an
order. Each term is either a percentage of a base (item, shipping, subtotal,
or the running post-fee order total) or a fixed minor-unit amount.

Terms are evaluated strictly left to right: an ``order``-based term sees the
subtotal less every fee charged before it.
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, Sequence, Union

import structlog

from pricewise.config import FeeBase, FeeType, PlatformKey
from pricewise.errors import InvalidInput, UnknownPlatform
from pricewise.utils.money import percent_of, require_non_negative, to_decimal

logger = structlog.get_logger(__name__)

PlatformLike = Union[PlatformKey, str]


class FeeTerm(NamedTuple):
    """A named charge. ``value`` is a percent for PERCENTAGE, minor units for FIXED."""
    label: str
    type: FeeType
    base: FeeBase
    value: Decimal


class FeeLine(NamedTuple):
    label: str
    amount: int


class FeeSummary(NamedTuple):
    total: int
    breakdown: tuple[FeeLine, ...]


class OrderContext(NamedTuple):
    """Amounts a fee schedule is charged against, in minor units."""
    item_price: int
    shipping_cost: int = 0

    @property
    def subtotal(self) -> int:
        return self.item_price + self.shipping_cost


class PlatformSchedule(NamedTuple):
    key: PlatformKey
    name: str
    fees: tuple[FeeTerm, ...]
    vat_on_shipping: bool
    includes_payment_processing: bool
    is_custom: bool = False


EMPTY_FEES = FeeSummary(total=0, breakdown=())


def _pct(label: str, base: FeeBase, value: str) -> FeeTerm:
    return FeeTerm(label, FeeType.PERCENTAGE, base, Decimal(value))


def _fixed(label: str, base: FeeBase, value: int) -> FeeTerm:
    return FeeTerm(label, FeeType.FIXED, base, Decimal(value))


# ---------------------------------------------------------------------------
# Static platform schedules
# ---------------------------------------------------------------------------

PLATFORM_SCHEDULES: Mapping[PlatformKey, PlatformSchedule] = MappingProxyType({
    PlatformKey.ETSY: PlatformSchedule(
        key=PlatformKey.ETSY,
        name="Etsy",
        fees=(
            _pct("Transaction fee", FeeBase.SUBTOTAL, "6.5"),
            _pct("Payment processing", FeeBase.SUBTOTAL, "4"),
            _fixed("Payment fixed fee", FeeBase.ORDER, 20),
            _fixed("Listing fee", FeeBase.ITEM, 15),
        ),
        vat_on_shipping=True,
        includes_payment_processing=True,
    ),
    PlatformKey.EBAY: PlatformSchedule(
        key=PlatformKey.EBAY,
        name="eBay",
        fees=(
            _pct("Final value fee", FeeBase.SUBTOTAL, "10"),
            _pct("Payment processing", FeeBase.SUBTOTAL, "2.9"),
        ),
        vat_on_shipping=True,
        includes_payment_processing=True,
    ),
    PlatformKey.AMAZON: PlatformSchedule(
        key=PlatformKey.AMAZON,
        name="Amazon",
        fees=(
            _pct("Referral fee", FeeBase.ITEM, "15"),
        ),
        vat_on_shipping=False,
        includes_payment_processing=False,
    ),
    PlatformKey.SHOPIFY: PlatformSchedule(
        key=PlatformKey.SHOPIFY,
        name="Shopify",
        fees=(
            _pct("Transaction fee", FeeBase.SUBTOTAL, "2.9"),
            _pct("Payment processing", FeeBase.SUBTOTAL, "2.9"),
        ),
        vat_on_shipping=True,
        includes_payment_processing=True,
    ),
    PlatformKey.TIKTOK: PlatformSchedule(
        key=PlatformKey.TIKTOK,
        name="TikTok Shop",
        fees=(
            _pct("Commission", FeeBase.ITEM, "5"),
            _pct("Payment processing", FeeBase.SUBTOTAL, "2.9"),
        ),
        vat_on_shipping=True,
        includes_payment_processing=True,
    ),
    PlatformKey.CUSTOM: PlatformSchedule(
        key=PlatformKey.CUSTOM,
        name="Custom",
        fees=(),
        vat_on_shipping=True,
        includes_payment_processing=False,
        is_custom=True,
    ),
})


def parse_platform(platform: PlatformLike) -> PlatformKey:
    """Normalize a platform key; unknown keys raise UnknownPlatform."""
    if isinstance(platform, PlatformKey):
        return platform
    if isinstance(platform, str):
        normalized = platform.strip().lower()
        by_value = {key.value: key for key in PlatformKey}
        if normalized in by_value:
            return by_value[normalized]
    raise UnknownPlatform(f"Unknown platform '{platform}'")


def get_platform_schedule(platform: PlatformLike) -> PlatformSchedule:
    return PLATFORM_SCHEDULES[parse_platform(platform)]


def make_fee_term(
    label: str,
    fee_type: FeeType | str,
    base: FeeBase | str,
    value: int | str | Decimal,
) -> FeeTerm:
    """
    Build a validated fee term from loosely-typed caller input.

    Raises:
        InvalidInput: If type/base are unknown or value is negative.
    """
    try:
        fee_type = FeeType(fee_type)
        base = FeeBase(base)
    except ValueError as exc:
        raise InvalidInput(f"Invalid fee term '{label}': {exc}") from exc

    amount = to_decimal(value, f"fee term '{label}' value")
    if amount < 0:
        raise InvalidInput(f"fee term '{label}' value must be non-negative, got {value}")
    if fee_type == FeeType.FIXED and amount != amount.to_integral_value():
        raise InvalidInput(f"fixed fee term '{label}' must be whole minor units, got {value}")
    return FeeTerm(label=label, type=fee_type, base=base, value=amount)


def resolve_fee_terms(
    platform: PlatformLike,
    custom_fees: Sequence[FeeTerm] = (),
) -> tuple[FeeTerm, ...]:
    """
    Return the fee terms to charge for a platform.

    Static platforms use their configured schedule and ignore custom_fees.
    ``custom`` takes the caller-supplied list, which must not be empty.

    Raises:
        UnknownPlatform: Unknown key, or ``custom`` with no fee list supplied.
    """
    schedule = get_platform_schedule(platform)
    if not schedule.is_custom:
        return schedule.fees

    if not custom_fees:
        raise UnknownPlatform("Platform 'custom' requires an explicit fee list")
    return tuple(
        make_fee_term(term.label, term.type, term.base, term.value) for term in custom_fees
    )


def _resolve_base(term: FeeTerm, context: OrderContext, fees_so_far: int) -> int:
    if term.base == FeeBase.ITEM:
        return context.item_price
    if term.base == FeeBase.SHIPPING:
        return context.shipping_cost
    if term.base == FeeBase.SUBTOTAL:
        return context.subtotal
    if term.base == FeeBase.ORDER:
        # Fees can exceed the subtotal; a percentage never turns into a credit
        return max(0, context.subtotal - fees_so_far)
    raise InvalidInput(f"Unsupported fee base: {term.base}")


def evaluate_fees(fee_terms: Iterable[FeeTerm], context: OrderContext) -> FeeSummary:
    """
    Charge a fee schedule against an order.

    Formulas:
    - percentage: round_half_up(base × value / 100)
    - fixed: value, whatever the base

    Args:
        fee_terms: Terms in schedule order.
        context: Item price and shipping cost in minor units.

    Returns:
        FeeSummary with the total and a breakdown of every nonzero term,
        in schedule order.

    Raises:
        InvalidInput: If any context amount or term value is negative.
    """
    require_non_negative("item_price", context.item_price)
    require_non_negative("shipping_cost", context.shipping_cost)

    fees_so_far = 0
    breakdown: list[FeeLine] = []

    for term in fee_terms:
        if term.value < 0:
            raise InvalidInput(f"fee term '{term.label}' value must be non-negative")

        if term.type == FeeType.PERCENTAGE:
            base_amount = _resolve_base(term, context, fees_so_far)
            amount = percent_of(base_amount, term.value)
        elif term.type == FeeType.FIXED:
            amount = int(term.value)
        else:
            raise InvalidInput(f"Unsupported fee type: {term.type}")

        fees_so_far += amount
        if amount != 0:
            breakdown.append(FeeLine(label=term.label, amount=amount))

    summary = FeeSummary(total=fees_so_far, breakdown=tuple(breakdown))
    logger.debug(
        "fees_evaluated",
        item_price=context.item_price,
        shipping_cost=context.shipping_cost,
        terms=len(breakdown),
        total=summary.total,
        source="fees",
    )
    return summary


def combine_fees(*summaries: FeeSummary) -> FeeSummary:
    """Concatenate fee summaries, keeping breakdown order."""
    breakdown = tuple(line for summary in summaries for line in summary.breakdown)
    return FeeSummary(total=sum(s.total for s in summaries), breakdown=breakdown)


def scale_fees(summary: FeeSummary, quantity: int) -> FeeSummary:
    """Multiply a per-unit fee summary by a quantity."""
    return FeeSummary(
        total=summary.total * quantity,
        breakdown=tuple(
            FeeLine(label=line.label, amount=line.amount * quantity)
            for line in summary.breakdown
        ),
    )
