"""
Tests for amount and currency normalization.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from decimal import Decimal

from receipt_extraction.utils.money import (
    MoneyFormat,
    normalize_amount,
    normalize_currency,
    parse_money,
    round_amount,
)


class TestParseMoney:
    """Numeric parsing across US and European conventions."""

    def test_us_format_with_thousands(self):
        assert parse_money("$1,234.56") == Decimal("1234.56")

    def test_european_decimal_comma(self):
        assert parse_money("12,50€") == Decimal("12.50")

    def test_european_thousands_dot(self):
        assert parse_money("1.234,56") == Decimal("1234.56")

    def test_european_thousands_space(self):
        assert parse_money("1 234,56 €") == Decimal("1234.56")
        assert parse_money("12\u00a0500,00") == Decimal("12500.00")

    def test_plain_dot_decimal(self):
        assert parse_money("8.00") == Decimal("8.00")

    def test_format_hint_overrides_detection(self):
        """A US hint reads the comma as a thousands separator."""
        assert parse_money("1,234", MoneyFormat.US) == Decimal("1234")
        assert parse_money("1,23", MoneyFormat.EUROPEAN) == Decimal("1.23")

    def test_garbage_returns_none(self):
        assert parse_money("abc") is None
        assert parse_money("") is None
        assert parse_money(None) is None

    def test_sign_is_stripped(self):
        """Only digits and separators reach the parser."""
        assert parse_money("-5.00") == Decimal("5.00")


class TestNormalizeAmount:
    """Match groups to (amount, currency)."""

    def test_symbol_after(self):
        parsed = normalize_amount({'amount': '8,00', 'post': '€'})
        assert parsed.amount == 8.0
        assert parsed.currency == 'EUR'

    def test_symbol_before(self):
        parsed = normalize_amount({'amount': '5.70', 'pre': '$'})
        assert parsed.amount == 5.7
        assert parsed.currency == 'USD'

    def test_code_is_case_insensitive(self):
        assert normalize_amount({'amount': '3.00', 'post': 'GBP'}).currency == 'GBP'
        assert normalize_amount({'amount': '3.00', 'pre': 'usd'}).currency == 'USD'

    def test_no_symbol_uses_default(self):
        assert normalize_amount({'amount': '3.00'}).currency == 'EUR'
        assert normalize_amount({'amount': '3.00'}, default_currency='USD').currency == 'USD'

    def test_malformed_amount_becomes_zero(self):
        """Parse failures score out downstream instead of raising."""
        parsed = normalize_amount({'amount': 'n/a', 'post': '€'})
        assert parsed.amount == 0.0
        assert parsed.currency == 'EUR'

    def test_missing_amount_group(self):
        assert normalize_amount({}).amount == 0.0


class TestCurrencyHelpers:
    """Currency lookup and rounding."""

    def test_normalize_currency(self):
        assert normalize_currency('€') == 'EUR'
        assert normalize_currency('¥') == 'JPY'
        assert normalize_currency(None) == 'EUR'
        assert normalize_currency('XYZ', default='USD') == 'USD'

    def test_round_amount_half_up(self):
        assert round_amount(2.675) == 2.68
        assert round_amount(Decimal("1.005")) == 1.01
