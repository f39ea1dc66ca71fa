"""
Pricewise — Currency Conversion & Formatting Tests

Minor/major conversion must round half away from zero and round-trip
exactly; formatting follows each currency's locale.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from pricewise.config import Currency
from pricewise.errors import InvalidInput, UnsupportedCurrency
from pricewise.utils.currency import (
    CURRENCIES,
    format_currency,
    get_currency,
    to_major_units,
    to_minor_units,
)


class TestCurrencyTable:
    def test_all_currencies_configured(self) -> None:
        assert set(CURRENCIES) == set(Currency)

    def test_only_yen_has_no_minor_unit(self) -> None:
        zero_dp = [c for c, cfg in CURRENCIES.items() if cfg.decimal_places == 0]
        assert zero_dp == [Currency.JPY]

    def test_lookup_is_case_insensitive(self) -> None:
        assert get_currency("gbp").code == Currency.GBP
        assert get_currency(" eur ").code == Currency.EUR

    def test_unknown_code_raises(self) -> None:
        with pytest.raises(UnsupportedCurrency, match="XYZ"):
            get_currency("XYZ")

    def test_unsupported_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            get_currency("BTC")


class TestToMinorUnits:
    def test_pounds_to_pence(self) -> None:
        assert to_minor_units("19.99", Currency.GBP) == 1999

    def test_float_input(self) -> None:
        assert to_minor_units(10.1, Currency.USD) == 1010

    def test_yen_rounds_half_up(self) -> None:
        assert to_minor_units(1234.5, Currency.JPY) == 1235

    def test_negative_rounds_away_from_zero(self) -> None:
        assert to_minor_units("-0.005", Currency.GBP) == -1

    def test_sub_minor_fraction_rounds(self) -> None:
        assert to_minor_units("0.125", Currency.EUR) == 13


class TestToMajorUnits:
    def test_exact_decimal(self) -> None:
        assert to_major_units(1999, Currency.GBP) == Decimal("19.99")

    def test_yen_unchanged(self) -> None:
        assert to_major_units(1235, Currency.JPY) == Decimal("1235")

    def test_rejects_non_integer(self) -> None:
        with pytest.raises(InvalidInput, match="integer"):
            to_major_units(1.5, Currency.GBP)  # type: ignore[arg-type]

    @pytest.mark.parametrize("currency", list(Currency))
    def test_round_trip(self, currency: Currency) -> None:
        for minor in (0, 1, 99, 100, 123456, -4321):
            assert to_minor_units(to_major_units(minor, currency), currency) == minor

    @pytest.mark.parametrize(
        "currency,major,expected",
        [
            (Currency.GBP, "1.239", Decimal("1.24")),
            (Currency.GBP, "1.234", Decimal("1.23")),
            (Currency.EUR, "19.995", Decimal("20.00")),
            (Currency.JPY, "1234.5", Decimal("1235")),
            (Currency.JPY, "99.4", Decimal("99")),
        ],
    )
    def test_major_round_trip_loses_sub_minor_precision(
        self, currency: Currency, major: str, expected: Decimal
    ) -> None:
        assert to_major_units(to_minor_units(major, currency), currency) == expected


class TestFormatCurrency:
    @pytest.mark.parametrize(
        "currency,expected",
        [
            (Currency.GBP, "£1,234.56"),
            (Currency.USD, "$1,234.56"),
            (Currency.CAD, "C$1,234.56"),
            (Currency.AUD, "A$1,234.56"),
            (Currency.EUR, "1.234,56 €"),
            (Currency.CHF, "CHF 1’234.56"),
            (Currency.SEK, "1 234,56 kr"),
            (Currency.NOK, "1 234,56 kr"),
            (Currency.DKK, "1.234,56 kr"),
        ],
    )
    def test_locale_layout(self, currency: Currency, expected: str) -> None:
        assert format_currency(123456, currency) == expected

    def test_yen_has_no_decimals(self) -> None:
        assert format_currency(1235, Currency.JPY) == "¥1,235"

    def test_zero(self) -> None:
        assert format_currency(0, Currency.GBP) == "£0.00"

    def test_negative_amount(self) -> None:
        assert format_currency(-123456, Currency.USD) == "-$1,234.56"

    def test_accepts_string_code(self) -> None:
        assert format_currency(999, "gbp") == "£9.99"
