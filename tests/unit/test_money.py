"""
Unit tests for Money.

Verifies:
- Decimal precision and float prohibition
- Rounding determinism per currency
- Same-currency enforcement for arithmetic and comparison
"""

import pytest
from decimal import Decimal, ROUND_DOWN

from inventory_kernel.domain.values import Currency, Money, sum_money


class TestConstruction:
    """Tests for Money construction."""

    def test_of_string(self):
        money = Money.of("100.50", "USD")
        assert money.amount == Decimal("100.50")
        assert money.currency == Currency("USD")

    def test_of_int(self):
        assert Money.of(7, "EUR").amount == Decimal("7")

    def test_large_number(self):
        """Precision is not truncated at construction."""
        money = Money.of("123456789012345678901234567.123456789", "USD")
        assert money.amount == Decimal("123456789012345678901234567.123456789")

    def test_float_rejected(self):
        with pytest.raises(ValueError, match="float"):
            Money.of(1.5, "USD")

    def test_float_rejected_in_constructor(self):
        with pytest.raises(ValueError):
            Money(0.1, Currency("USD"))

    def test_invalid_amount(self):
        with pytest.raises(ValueError):
            Money("not a number", Currency("USD"))

    def test_invalid_currency(self):
        with pytest.raises(ValueError, match="currency code"):
            Money.of("1", "XXX")

    def test_lowercase_currency_normalized(self):
        assert Money.of("1", "usd").currency.code == "USD"

    def test_zero(self):
        zero = Money.zero("JPY")
        assert zero.is_zero
        assert not zero.is_positive
        assert not zero.is_negative

    def test_hashable(self):
        assert len({Money.of("1.00", "USD"), Money.of("1.00", "USD")}) == 1


class TestRounding:
    """Rounding follows the currency's minor units, half-up by default."""

    @pytest.mark.parametrize("amount,currency,expected", [
        ("10.555", "USD", "10.56"),
        ("10.554", "USD", "10.55"),
        ("10.545", "USD", "10.55"),
        ("10.5", "JPY", "11"),
        ("1.2345", "KWD", "1.235"),
        ("-2.345", "USD", "-2.35"),
    ])
    def test_round_half_up(self, amount, currency, expected):
        assert Money.of(amount, currency).round().amount == Decimal(expected)

    @pytest.mark.parametrize("amount,currency,expected", [
        ("5", "USD", "5.00"),
        ("1500.4", "JPY", "1500"),
        ("1.2", "KWD", "1.200"),
    ])
    def test_round_pads_to_minor_units(self, amount, currency, expected):
        assert str(Money.of(amount, currency).round().amount) == expected

    def test_explicit_rounding_mode(self):
        assert Money.of("10.559", "USD").round(ROUND_DOWN).amount == Decimal("10.55")

    def test_round_is_deterministic(self):
        money = Money.of("33.335", "USD")
        assert money.round() == money.round()


class TestArithmetic:
    """Tests for Money arithmetic."""

    def test_addition_precision(self):
        assert Money.of("0.1", "USD") + Money.of("0.2", "USD") == Money.of("0.3", "USD")

    def test_subtraction(self):
        assert Money.of("10", "USD") - Money.of("12.5", "USD") == Money.of("-2.5", "USD")

    def test_multiply_by_quantity(self):
        assert Money.of("5.25", "USD") * Decimal("4") == Money.of("21", "USD")
        assert 3 * Money.of("2", "USD") == Money.of("6", "USD")

    def test_divide(self):
        assert Money.of("10", "USD") / 4 == Money.of("2.5", "USD")

    def test_negation_and_abs(self):
        money = Money.of("3", "USD")
        assert (-money).is_negative
        assert abs(-money) == money

    def test_mixed_currency_addition_rejected(self):
        with pytest.raises(ValueError, match="different currencies"):
            Money.of("1", "USD") + Money.of("1", "EUR")

    def test_mixed_currency_comparison_rejected(self):
        with pytest.raises(ValueError):
            Money.of("1", "USD") < Money.of("1", "EUR")

    def test_comparison(self):
        assert Money.of("1", "USD") < Money.of("2", "USD")
        assert Money.of("2", "USD") >= Money.of("2.00", "USD")

    def test_float_multiplier_not_supported(self):
        with pytest.raises(TypeError):
            Money.of("1", "USD") * 1.5


class TestSumMoney:

    def test_empty_is_zero_in_currency(self):
        total = sum_money([], "EUR")
        assert total.is_zero
        assert total.currency.code == "EUR"

    def test_sum(self):
        total = sum_money([Money.of("1.10", "USD"), Money.of("2.20", "USD")], "USD")
        assert total == Money.of("3.30", "USD")

    def test_mixed_currency_rejected(self):
        with pytest.raises(ValueError):
            sum_money([Money.of("1", "USD"), Money.of("1", "EUR")], "USD")
