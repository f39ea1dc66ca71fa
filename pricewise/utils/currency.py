"""
Pricewise — Currency Conversion & Formatting

Minor/major unit conversion and locale-aware display strings for the ten
supported selling currencies.

All money inside the engine is an ``int`` in minor units (pence, cents; yen
have no minor unit). Conversion to major units returns Decimal, never float.
Formatting is display-only: it never rounds or mutates the minor-unit value.
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, NamedTuple, Union

import structlog

from pricewise.config import Currency
from pricewise.errors import InvalidInput, UnsupportedCurrency
from pricewise.utils.money import Number, round_minor, to_decimal

logger = structlog.get_logger(__name__)

CurrencyLike = Union[Currency, str]


class CurrencyConfig(NamedTuple):
    """Static configuration for one currency."""
    code: Currency
    symbol: str
    name: str
    locale: str
    decimal_places: int
    vat_rate: Decimal       # standard VAT/GST rate, percent
    vat_threshold: int      # registration threshold, minor units (0 = none)


class LocaleFormat(NamedTuple):
    """How a locale lays out a currency amount."""
    group_separator: str
    decimal_separator: str
    symbol_first: bool
    symbol_spaced: bool


# ---------------------------------------------------------------------------
# Currency table
# ---------------------------------------------------------------------------

CURRENCIES: Mapping[Currency, CurrencyConfig] = MappingProxyType({
    Currency.GBP: CurrencyConfig(
        code=Currency.GBP, symbol="£", name="British Pound", locale="en-GB",
        decimal_places=2, vat_rate=Decimal("20"), vat_threshold=9_000_000,
    ),
    Currency.USD: CurrencyConfig(
        code=Currency.USD, symbol="$", name="US Dollar", locale="en-US",
        decimal_places=2, vat_rate=Decimal("0"), vat_threshold=0,  # no federal VAT
    ),
    Currency.EUR: CurrencyConfig(
        code=Currency.EUR, symbol="€", name="Euro", locale="de-DE",
        decimal_places=2, vat_rate=Decimal("19"), vat_threshold=2_200_000,  # Germany
    ),
    Currency.CAD: CurrencyConfig(
        code=Currency.CAD, symbol="C$", name="Canadian Dollar", locale="en-CA",
        decimal_places=2, vat_rate=Decimal("5"), vat_threshold=3_000_000,  # GST
    ),
    Currency.AUD: CurrencyConfig(
        code=Currency.AUD, symbol="A$", name="Australian Dollar", locale="en-AU",
        decimal_places=2, vat_rate=Decimal("10"), vat_threshold=7_500_000,  # GST
    ),
    Currency.JPY: CurrencyConfig(
        code=Currency.JPY, symbol="¥", name="Japanese Yen", locale="ja-JP",
        decimal_places=0, vat_rate=Decimal("10"), vat_threshold=10_000_000,
    ),
    Currency.CHF: CurrencyConfig(
        code=Currency.CHF, symbol="CHF", name="Swiss Franc", locale="de-CH",
        decimal_places=2, vat_rate=Decimal("8.1"), vat_threshold=10_000_000,
    ),
    Currency.SEK: CurrencyConfig(
        code=Currency.SEK, symbol="kr", name="Swedish Krona", locale="sv-SE",
        decimal_places=2, vat_rate=Decimal("25"), vat_threshold=8_000_000,
    ),
    Currency.NOK: CurrencyConfig(
        code=Currency.NOK, symbol="kr", name="Norwegian Krone", locale="nb-NO",
        decimal_places=2, vat_rate=Decimal("25"), vat_threshold=5_000_000,
    ),
    Currency.DKK: CurrencyConfig(
        code=Currency.DKK, symbol="kr", name="Danish Krone", locale="da-DK",
        decimal_places=2, vat_rate=Decimal("25"), vat_threshold=5_000_000,
    ),
})

_LOCALE_FORMATS: Mapping[str, LocaleFormat] = MappingProxyType({
    "en-GB": LocaleFormat(",", ".", symbol_first=True, symbol_spaced=False),
    "en-US": LocaleFormat(",", ".", symbol_first=True, symbol_spaced=False),
    "en-CA": LocaleFormat(",", ".", symbol_first=True, symbol_spaced=False),
    "en-AU": LocaleFormat(",", ".", symbol_first=True, symbol_spaced=False),
    "ja-JP": LocaleFormat(",", ".", symbol_first=True, symbol_spaced=False),
    "de-DE": LocaleFormat(".", ",", symbol_first=False, symbol_spaced=True),
    "de-CH": LocaleFormat("’", ".", symbol_first=True, symbol_spaced=True),
    "sv-SE": LocaleFormat(" ", ",", symbol_first=False, symbol_spaced=True),
    "nb-NO": LocaleFormat(" ", ",", symbol_first=False, symbol_spaced=True),
    "da-DK": LocaleFormat(".", ",", symbol_first=False, symbol_spaced=True),
})


def get_currency(currency: CurrencyLike) -> CurrencyConfig:
    """
    Look up the configuration for a currency.

    Args:
        currency: A Currency member or its ISO code (case-insensitive).

    Raises:
        UnsupportedCurrency: If the code is not one of the supported currencies.
    """
    if isinstance(currency, Currency):
        return CURRENCIES[currency]

    if isinstance(currency, str):
        code = currency.strip().upper()
        if code in Currency.__members__:
            return CURRENCIES[Currency[code]]

    logger.warning("currency_unsupported", currency=repr(currency), source="currency")
    raise UnsupportedCurrency(f"Unsupported currency '{currency}'")


def _scale(config: CurrencyConfig) -> Decimal:
    return Decimal(10) ** config.decimal_places


def to_minor_units(major_amount: Number, currency: CurrencyLike) -> int:
    """
    Convert a major-unit amount (e.g. pounds) to minor units (e.g. pence).

    Rounds half away from zero, symmetrically for negative amounts.

    Examples:
        >>> to_minor_units("19.99", Currency.GBP)
        1999
        >>> to_minor_units(1234.5, Currency.JPY)
        1235
    """
    config = get_currency(currency)
    amount = to_decimal(major_amount, "major_amount")
    return round_minor(amount * _scale(config))


def to_major_units(minor_amount: int, currency: CurrencyLike) -> Decimal:
    """Convert minor units back to major units. Exact; no rounding."""
    config = get_currency(currency)
    if isinstance(minor_amount, bool) or not isinstance(minor_amount, int):
        raise InvalidInput(f"minor_amount must be an integer, got {minor_amount!r}")
    return Decimal(minor_amount) / _scale(config)


def format_currency(minor_amount: int, currency: CurrencyLike) -> str:
    """
    Render a minor-unit amount for display in the currency's locale.

    Examples:
        >>> format_currency(123456, Currency.GBP)
        '£1,234.56'
        >>> format_currency(123456, Currency.EUR)
        '1.234,56 €'
        >>> format_currency(1235, Currency.JPY)
        '¥1,235'
    """
    config = get_currency(currency)
    major = to_major_units(minor_amount, config.code)
    layout = _LOCALE_FORMATS[config.locale]

    # Format with neutral placeholders, then swap in the locale's separators
    digits = format(abs(major), f",.{config.decimal_places}f")
    digits = (
        digits.replace(",", "\x00")
        .replace(".", layout.decimal_separator)
        .replace("\x00", layout.group_separator)
    )

    gap = " " if layout.symbol_spaced else ""
    if layout.symbol_first:
        text = f"{config.symbol}{gap}{digits}"
    else:
        text = f"{digits}{gap}{config.symbol}"

    return f"-{text}" if minor_amount < 0 else text
