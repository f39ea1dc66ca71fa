"""
Pricewise — Core Profit Calculator

Profit = Revenue - Total_Cost - Total_Fees

- Revenue = sale_price × quantity
- Total_Cost = (product_cost + shipping if the seller pays it) × quantity
- Total_Fees = (platform fees + payment fees for ONE unit) × quantity
- Margin = Profit / Revenue × 100 (0 when revenue is 0)

VAT-registered sellers report profit on receipts excluding VAT, while fees are
still charged on the gross (VAT-inclusive) price the buyer pays.

Break-even and target prices are solved numerically: exponential bracketing
followed by integer bisection. The returned price is the smallest whole
minor-unit price meeting the goal, so plugging it back in leaves profit
within one minor unit of the goal.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Iterable, NamedTuple, Optional, Sequence

import structlog

from pricewise.config import PaymentMethod, PlatformKey, settings
from pricewise.engine.fees import (
    EMPTY_FEES,
    FeeLine,
    FeeSummary,
    FeeTerm,
    OrderContext,
    PlatformLike,
    combine_fees,
    evaluate_fees,
    get_platform_schedule,
    parse_platform,
    resolve_fee_terms,
    scale_fees,
)
from pricewise.engine.payment import (
    PaymentMethodLike,
    calculate_payment_fees,
    parse_payment_method,
)
from pricewise.errors import InvalidInput
from pricewise.utils.money import (
    Number,
    require_non_negative,
    require_percentage,
    round_minor,
)

logger = structlog.get_logger(__name__)

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


class CalculationInput(NamedTuple):
    """Everything one calculation needs. Money in minor units, rates in percent."""
    product_cost: int
    sale_price: int
    shipping_cost: int = 0
    seller_pays_shipping: bool = False
    quantity: int = 1
    platform: PlatformLike = PlatformKey.ETSY
    vat_rate: Number = _ZERO
    is_vat_registered: bool = False
    payment_method: PaymentMethodLike = PaymentMethod.PLATFORM_INCLUDED
    target_margin: Number = Decimal("30")
    custom_fees: tuple[FeeTerm, ...] = ()


class ProfitSnapshot(NamedTuple):
    """Profit arithmetic at one price, without price solving."""
    revenue: int
    total_cost: int
    total_fees: int
    fee_breakdown: tuple[FeeLine, ...]
    profit: int
    margin: Decimal
    receipts_ex_vat: Optional[int]


class CalculationResult(NamedTuple):
    revenue: int
    total_cost: int
    total_fees: int
    fee_breakdown: tuple[FeeLine, ...]
    profit: int
    margin: Decimal
    break_even_price: Optional[int]
    target_price: Optional[int]
    receipts_ex_vat: Optional[int]


class PlatformQuote(NamedTuple):
    platform: PlatformKey
    name: str
    snapshot: ProfitSnapshot


class _PricingModel(NamedTuple):
    """Validated, normalized form of a CalculationInput (price excluded)."""
    product_cost: int
    shipping_cost: int
    seller_pays_shipping: bool
    quantity: int
    fee_terms: tuple[FeeTerm, ...]
    vat_rate: Decimal
    is_vat_registered: bool
    payment_method: PaymentMethod
    target_margin: Decimal


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _prepare(calc_input: CalculationInput) -> _PricingModel:
    require_non_negative("sale_price", calc_input.sale_price)
    require_non_negative("product_cost", calc_input.product_cost)
    require_non_negative("shipping_cost", calc_input.shipping_cost)

    quantity = calc_input.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidInput(f"quantity must be a positive integer, got {quantity!r}")

    fee_terms = resolve_fee_terms(calc_input.platform, calc_input.custom_fees)

    return _PricingModel(
        product_cost=calc_input.product_cost,
        shipping_cost=calc_input.shipping_cost,
        seller_pays_shipping=bool(calc_input.seller_pays_shipping),
        quantity=quantity,
        fee_terms=fee_terms,
        vat_rate=require_percentage("vat_rate", calc_input.vat_rate),
        is_vat_registered=bool(calc_input.is_vat_registered),
        payment_method=parse_payment_method(calc_input.payment_method),
        target_margin=require_percentage(
            "target_margin", calc_input.target_margin, upper_inclusive=False
        ),
    )


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def _unit_fees(model: _PricingModel, sale_price: int) -> FeeSummary:
    shipping_for_fees = model.shipping_cost if model.seller_pays_shipping else 0
    platform_fees = evaluate_fees(model.fee_terms, OrderContext(sale_price, shipping_for_fees))

    if model.payment_method in (PaymentMethod.PLATFORM_INCLUDED, PaymentMethod.MANUAL):
        payment_fees = EMPTY_FEES
    else:
        # Processor charges on what the buyer actually pays
        buyer_pays = sale_price + (0 if model.seller_pays_shipping else model.shipping_cost)
        payment_fees = calculate_payment_fees(buyer_pays, model.payment_method)

    return combine_fees(platform_fees, payment_fees)


def _snapshot(model: _PricingModel, sale_price: int, quantity: int) -> ProfitSnapshot:
    fees = scale_fees(_unit_fees(model, sale_price), quantity)

    revenue = sale_price * quantity
    unit_cost = model.product_cost + (model.shipping_cost if model.seller_pays_shipping else 0)
    total_cost = unit_cost * quantity

    receipts_ex_vat: Optional[int] = None
    effective_revenue = revenue
    if model.is_vat_registered and model.vat_rate > _ZERO:
        receipts_ex_vat = round_minor(Decimal(revenue) / (_ONE + model.vat_rate / _HUNDRED))
        effective_revenue = receipts_ex_vat

    profit = effective_revenue - total_cost - fees.total
    margin = _ZERO
    if effective_revenue > 0:
        margin = Decimal(profit) / Decimal(effective_revenue) * _HUNDRED

    return ProfitSnapshot(
        revenue=revenue,
        total_cost=total_cost,
        total_fees=fees.total,
        fee_breakdown=fees.breakdown,
        profit=profit,
        margin=margin,
        receipts_ex_vat=receipts_ex_vat,
    )


def _solve_min_price(
    model: _PricingModel,
    meets_goal: Callable[[ProfitSnapshot], bool],
) -> Optional[int]:
    """Smallest unit price p with meets_goal(p) and not meets_goal(p - 1)."""

    def at(price: int) -> bool:
        return meets_goal(_snapshot(model, price, 1))

    if at(0):
        return 0

    ceiling = settings.SOLVER_PRICE_CEILING
    unit_cost = model.product_cost + (model.shipping_cost if model.seller_pays_shipping else 0)
    low, high = 0, min(max(1, unit_cost), ceiling)

    while not at(high):
        if high >= ceiling:
            return None
        low, high = high, min(high * 2, ceiling)

    while high - low > 1:
        mid = (low + high) // 2
        if at(mid):
            high = mid
        else:
            low = mid
    return high


def _solve_break_even(model: _PricingModel) -> Optional[int]:
    return _solve_min_price(model, lambda snap: snap.profit >= 0)


def _solve_target(model: _PricingModel) -> Optional[int]:
    target = model.target_margin
    return _solve_min_price(model, lambda snap: snap.profit >= 0 and snap.margin >= target)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def evaluate_profit(calc_input: CalculationInput) -> ProfitSnapshot:
    """
    Run the profit arithmetic for one input without solving for prices.

    Raises:
        InvalidInput: Negative money, quantity < 1, or a rate outside [0, 100].
        UnknownPlatform: Unknown platform key, or custom without a fee list.
    """
    model = _prepare(calc_input)
    return _snapshot(model, calc_input.sale_price, model.quantity)


def calculate(calc_input: CalculationInput) -> CalculationResult:
    """
    Full profit calculation: fee breakdown, profit, margin, break-even price
    and the price that achieves ``target_margin``.

    Fees are computed once per unit and multiplied by quantity. Solved prices
    are per unit and None when no price below the solver ceiling reaches the
    goal (e.g. percentage fees totalling 100% or more).

    Raises:
        InvalidInput: Negative money, quantity < 1, or a rate outside its range.
        UnknownPlatform: Unknown platform key, or custom without a fee list.
    """
    model = _prepare(calc_input)
    snap = _snapshot(model, calc_input.sale_price, model.quantity)
    break_even_price = _solve_break_even(model)
    target_price = _solve_target(model)

    result = CalculationResult(
        revenue=snap.revenue,
        total_cost=snap.total_cost,
        total_fees=snap.total_fees,
        fee_breakdown=snap.fee_breakdown,
        profit=snap.profit,
        margin=snap.margin,
        break_even_price=break_even_price,
        target_price=target_price,
        receipts_ex_vat=snap.receipts_ex_vat,
    )

    logger.info(
        "profit_calculated",
        platform=parse_platform(calc_input.platform).value,
        payment_method=model.payment_method.value,
        quantity=model.quantity,
        revenue=result.revenue,
        total_fees=result.total_fees,
        profit=result.profit,
        margin=str(result.margin),
        break_even_price=break_even_price,
        target_price=target_price,
        source="profit",
    )
    return result


def compare_platforms(
    calc_input: CalculationInput,
    platforms: Optional[Iterable[PlatformLike]] = None,
) -> tuple[PlatformQuote, ...]:
    """
    Evaluate the same product on several platforms.

    Args:
        calc_input: Input whose platform field is replaced per quote.
        platforms: Platforms to compare (default: every static platform).
    """
    if platforms is None:
        keys: Sequence[PlatformKey] = [k for k in PlatformKey if k != PlatformKey.CUSTOM]
    else:
        keys = [parse_platform(p) for p in platforms]

    quotes = []
    for key in keys:
        schedule = get_platform_schedule(key)
        snap = evaluate_profit(calc_input._replace(platform=key))
        quotes.append(PlatformQuote(platform=key, name=schedule.name, snapshot=snap))

    logger.debug(
        "platforms_compared",
        platforms=[q.platform.value for q in quotes],
        profits=[q.snapshot.profit for q in quotes],
        source="profit",
    )
    return tuple(quotes)


def best_platform(quotes: Sequence[PlatformQuote]) -> Optional[PlatformQuote]:
    """Highest-profit quote; the earliest one wins a tie."""
    best: Optional[PlatformQuote] = None
    for quote in quotes:
        if best is None or quote.snapshot.profit > best.snapshot.profit:
            best = quote
    return best
