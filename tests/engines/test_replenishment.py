"""
Tests for replenishment math.

Safety stock, reorder point and EOQ are ceiling-rounded whole units.
"""

from decimal import Decimal

import pytest

from inventory_engines.replenishment import (
    DEFAULT_Z_SCORE,
    DemandStatistics,
    calculate_eoq,
    calculate_reorder_point,
    calculate_safety_stock,
    plan_replenishment,
    z_score_for_service_level,
)
from inventory_kernel.domain.values import Money


class TestDemandStatistics:

    def test_population_statistics(self):
        stats = DemandStatistics.from_daily_demand([2, 4, 4, 4, 5, 5, 7, 9])

        assert stats.days == 8
        assert stats.total == Decimal("40")
        assert stats.mean == Decimal("5")
        assert stats.std_dev == Decimal("2")
        assert stats.peak == Decimal("9")
        assert stats.minimum == Decimal("2")

    def test_empty_series(self):
        stats = DemandStatistics.from_daily_demand([])

        assert stats.days == 0
        assert stats.mean == Decimal("0")
        assert stats.std_dev == Decimal("0")

    def test_rejects_float(self):
        with pytest.raises(ValueError):
            DemandStatistics.from_daily_demand([1.5])


class TestZScore:

    @pytest.mark.parametrize("level,expected", [
        ("0.95", Decimal("1.64")),
        ("0.99", Decimal("2.33")),
        ("0.5", Decimal("0")),
        ("0.950", Decimal("1.64")),
    ])
    def test_table_values(self, level, expected):
        assert z_score_for_service_level(level) == expected

    def test_interpolates_between_entries(self):
        assert z_score_for_service_level("0.925") == Decimal("1.46")

    @pytest.mark.parametrize("level", ["0.3", "0.9999"])
    def test_outside_table_uses_default(self, level):
        assert z_score_for_service_level(level) == DEFAULT_Z_SCORE


class TestFormulas:

    def test_safety_stock(self):
        """1.64 * 2 * sqrt(4) = 6.56, rounded up."""
        assert calculate_safety_stock(Decimal("1.64"), Decimal("2"), 4) == Decimal("7")

    def test_safety_stock_zero_variance(self):
        assert calculate_safety_stock(Decimal("1.64"), Decimal("0"), 7) == Decimal("0")

    def test_reorder_point(self):
        """5 * 4 + 7 = 27."""
        assert calculate_reorder_point(Decimal("5"), 4, Decimal("7")) == Decimal("27")

    def test_reorder_point_rounds_up(self):
        assert calculate_reorder_point(Decimal("2.1"), 3, Decimal("0")) == Decimal("7")

    @pytest.mark.parametrize("demand,order_cost,holding,expected", [
        ("1000", "50", "2.5", Decimal("200")),
        ("1200", "50", "2.5", Decimal("220")),
    ])
    def test_eoq(self, demand, order_cost, holding, expected):
        assert calculate_eoq(Decimal(demand), Decimal(order_cost), Decimal(holding)) == expected

    def test_eoq_zero_holding_cost_uses_thirty_days(self):
        assert calculate_eoq(Decimal("3650"), Decimal("50"), Decimal("0")) == Decimal("300")

    @pytest.mark.parametrize("call", [
        lambda: calculate_safety_stock(Decimal("-1"), Decimal("1"), 1),
        lambda: calculate_safety_stock(Decimal("1"), Decimal("1"), -1),
        lambda: calculate_reorder_point(Decimal("-1"), 1, Decimal("0")),
        lambda: calculate_reorder_point(Decimal("1"), 1, Decimal("-1")),
        lambda: calculate_eoq(Decimal("-1"), Decimal("1"), Decimal("1")),
        lambda: calculate_eoq(Decimal("1"), Decimal("1"), Decimal("-1")),
    ])
    def test_negative_inputs_rejected(self, call):
        with pytest.raises(ValueError):
            call()


class TestPlanReplenishment:

    def test_constant_demand(self):
        plan = plan_replenishment([5] * 30, Money.of("10.00", "USD"))

        assert plan.sufficient_history is True
        assert plan.z_score == Decimal("1.64")
        assert plan.safety_stock == Decimal("0")
        assert plan.reorder_point == Decimal("35")
        assert plan.economic_order_quantity == Decimal("271")
        assert plan.message == ""

    def test_insufficient_history(self):
        plan = plan_replenishment([5] * 10, Money.of("10.00", "USD"))

        assert plan.sufficient_history is False
        assert plan.statistics.days == 10
        assert plan.safety_stock is None
        assert plan.reorder_point is None
        assert plan.economic_order_quantity is None
        assert plan.message == "Need at least 30 days of demand history, have 10"

    def test_min_history_configurable(self):
        plan = plan_replenishment([5] * 10, Money.of("10.00", "USD"), min_history_days=7)

        assert plan.sufficient_history is True

    def test_variable_demand_adds_safety_stock(self):
        demand = [2, 4, 4, 4, 5, 5, 7, 9] * 4
        plan = plan_replenishment(demand, Money.of("10.00", "USD"), lead_time_days=4)

        assert plan.statistics.std_dev == Decimal("2")
        assert plan.safety_stock == Decimal("7")
        assert plan.reorder_point == Decimal("27")

    def test_emits_engine_trace(self, captured_logs):
        plan_replenishment([5] * 30, Money.of("10.00", "USD"))

        traces = [r for r in captured_logs() if r["message"] == "INVENTORY_ENGINE_TRACE"]
        assert traces
        assert traces[-1]["engine_name"] == "replenishment"
