"""
Tests for stock status classification.
"""

from decimal import Decimal

import pytest

from inventory_engines.stock_status import Severity, StockState, get_stock_status


class TestGetStockStatus:
    """Tests for get_stock_status."""

    @pytest.mark.parametrize("allocated,reorder_point,max_stock", [
        (0, 0, None),
        (5, 10, 100),
        (0, -1, 1),
    ])
    def test_zero_on_hand_always_out_of_stock(self, allocated, reorder_point, max_stock):
        status = get_stock_status(0, allocated, reorder_point, max_stock)

        assert status.state is StockState.OUT_OF_STOCK
        assert status.severity is Severity.ERROR
        assert status.message == "Out of stock"

    def test_negative_on_hand_out_of_stock(self):
        assert get_stock_status(-3, 0, 10).state is StockState.OUT_OF_STOCK

    def test_fully_allocated_out_of_stock(self):
        """Full allocation wins over the low-stock threshold."""
        status = get_stock_status(5, 5, 10)

        assert status.state is StockState.OUT_OF_STOCK
        assert status.severity is Severity.ERROR
        assert status.message == "All 5 units on hand are allocated"

    def test_over_allocated_out_of_stock(self):
        assert get_stock_status(5, 8, 0).state is StockState.OUT_OF_STOCK

    def test_low_stock_at_reorder_point(self):
        status = get_stock_status(10, 2, 10)

        assert status.state is StockState.LOW_STOCK
        assert status.severity is Severity.WARNING
        assert "reorder point is 10" in status.message

    def test_low_stock_wins_over_overstock(self):
        """Low-stock is checked before max stock."""
        status = get_stock_status(10, 0, 20, max_stock=5)

        assert status.state is StockState.LOW_STOCK

    def test_overstocked(self):
        status = get_stock_status(150, 0, 10, max_stock=100)

        assert status.state is StockState.OVERSTOCKED
        assert status.severity is Severity.INFO
        assert "exceeds maximum of 100" in status.message

    def test_at_max_is_in_stock(self):
        assert get_stock_status(100, 0, 10, max_stock=100).state is StockState.IN_STOCK

    def test_in_stock(self):
        status = get_stock_status(50, 5, 10)

        assert status.state is StockState.IN_STOCK
        assert status.severity is Severity.SUCCESS
        assert not status.needs_attention

    def test_quantity_available(self):
        status = get_stock_status(Decimal("50"), Decimal("12.5"), 10)

        assert status.quantity_available == Decimal("37.5")

    def test_needs_attention(self):
        assert get_stock_status(0, 0, 0).needs_attention
        assert get_stock_status(5, 0, 10).needs_attention
        assert not get_stock_status(200, 0, 10, 100).needs_attention

    def test_string_inputs(self):
        assert get_stock_status("8", "0", "10").state is StockState.LOW_STOCK
