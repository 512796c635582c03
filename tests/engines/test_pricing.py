"""Tests for supplier discount pricing."""

from decimal import Decimal

import pytest

from inventory_engines.pricing import DiscountType, calculate_effective_price
from inventory_kernel.domain.values import Money


BASE = Money.of("100.00", "USD")


class TestEffectivePrice:

    def test_percentage(self):
        assert calculate_effective_price(BASE, DiscountType.PERCENTAGE, 10) == Money.of("90", "USD")

    def test_fixed(self):
        assert calculate_effective_price(BASE, DiscountType.FIXED, "15.50") == Money.of("84.50", "USD")

    def test_volume_behaves_as_percentage(self):
        price = calculate_effective_price(BASE, DiscountType.VOLUME, 5, quantity=500)

        assert price == Money.of("95", "USD")

    def test_none(self):
        assert calculate_effective_price(BASE, DiscountType.NONE, 50) == BASE

    def test_accepts_string_type(self):
        assert calculate_effective_price(BASE, "percentage", 25) == Money.of("75", "USD")

    def test_floored_at_zero(self):
        price = calculate_effective_price(BASE, DiscountType.FIXED, 150)

        assert price.is_zero
        assert price.currency.code == "USD"

    def test_full_percentage_discount(self):
        assert calculate_effective_price(BASE, DiscountType.PERCENTAGE, 100).is_zero

    def test_negative_discount_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            calculate_effective_price(BASE, DiscountType.PERCENTAGE, -5)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            calculate_effective_price(BASE, "tiered", 5)

    def test_keeps_currency(self):
        price = calculate_effective_price(Money.of("80", "EUR"), DiscountType.PERCENTAGE, Decimal("12.5"))

        assert price == Money.of("70", "EUR")
