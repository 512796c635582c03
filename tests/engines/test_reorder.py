"""
Tests for reorder analysis.

Covers:
- Urgency ladder at or below the reorder point
- Advisory and adequate-stock branches above it
- Recommended quantity (EOQ vs multiple of reorder point)
- Ranking by urgency
"""

from decimal import Decimal

import pytest

from inventory_engines.reorder import (
    ReorderAnalysis,
    ReorderUrgency,
    analyze_reorder,
    rank_recommendations,
)


class TestBelowReorderPoint:
    """Items at or below their reorder point."""

    def test_critical_by_days_until_stockout(self):
        """5 available / 2 per day = 2.5 days <= 3: critical."""
        analysis = analyze_reorder(on_hand=5, allocated=0, reorder_point=10, avg_daily_demand=2)

        assert analysis.should_reorder is True
        assert analysis.days_until_stockout == Decimal("2.5")
        assert analysis.urgency is ReorderUrgency.CRITICAL
        assert analysis.recommended_quantity == Decimal("20")

    def test_critical_when_nothing_available(self):
        analysis = analyze_reorder(5, 5, 10, 0)

        assert analysis.urgency is ReorderUrgency.CRITICAL
        assert analysis.available_quantity == Decimal("0")

    def test_critical_at_three_days(self):
        assert analyze_reorder(6, 0, 10, 2).urgency is ReorderUrgency.CRITICAL

    def test_high(self):
        """10 / 2 = 5 days."""
        assert analyze_reorder(10, 0, 10, 2).urgency is ReorderUrgency.HIGH

    def test_high_at_seven_days(self):
        assert analyze_reorder(14, 0, 14, 2).urgency is ReorderUrgency.HIGH

    def test_medium(self):
        """10 / 1 = 10 days."""
        analysis = analyze_reorder(10, 0, 10, 1)

        assert analysis.urgency is ReorderUrgency.MEDIUM
        assert analysis.should_reorder

    def test_unknown_days_is_medium(self):
        """No demand history: days unknown, still reorder at medium."""
        analysis = analyze_reorder(8, 0, 10, 0)

        assert analysis.days_until_stockout is None
        assert analysis.urgency is ReorderUrgency.MEDIUM
        assert "N/A" in analysis.message

    def test_eoq_used_when_given(self):
        analysis = analyze_reorder(5, 0, 10, 2, eoq=40)

        assert analysis.recommended_quantity == Decimal("40")
        assert "Order 40 units" in analysis.message

    def test_custom_multiplier(self):
        analysis = analyze_reorder(5, 0, 10, 2, quantity_multiplier=Decimal("1.5"))

        assert analysis.recommended_quantity == Decimal("15")


class TestAboveReorderPoint:
    """Items above their reorder point."""

    def test_low_urgency_advisory(self):
        """20 / 2 = 10 days <= 14: advise without reordering."""
        analysis = analyze_reorder(20, 0, 10, 2)

        assert analysis.should_reorder is False
        assert analysis.urgency is ReorderUrgency.LOW
        assert analysis.recommended_quantity == Decimal("20")
        assert analysis.message.startswith("Stock will run out in 10 days")

    def test_advisory_at_horizon(self):
        assert analyze_reorder(28, 0, 10, 2).urgency is ReorderUrgency.LOW

    def test_adequate(self):
        analysis = analyze_reorder(100, 0, 10, 2)

        assert analysis.should_reorder is False
        assert analysis.urgency is ReorderUrgency.NONE
        assert analysis.recommended_quantity == Decimal("0")
        assert analysis.message == "Stock levels adequate"
        assert not analysis.is_actionable

    def test_adequate_without_demand(self):
        analysis = analyze_reorder(50, 0, 10, 0)

        assert analysis.urgency is ReorderUrgency.NONE
        assert analysis.days_until_stockout is None

    def test_allocation_counts_against_availability(self):
        """On hand above ROP, but allocations leave only 6 days."""
        analysis = analyze_reorder(30, 18, 10, 2)

        assert analysis.available_quantity == Decimal("12")
        assert analysis.urgency is ReorderUrgency.LOW

    def test_custom_horizon(self):
        assert analyze_reorder(40, 0, 10, 2, advisory_horizon_days=30).urgency is ReorderUrgency.LOW
        assert analyze_reorder(40, 0, 10, 2).urgency is ReorderUrgency.NONE


class TestRankRecommendations:
    """Tests for urgency ranking."""

    def _analysis(self, urgency: ReorderUrgency) -> ReorderAnalysis:
        return ReorderAnalysis(
            should_reorder=True,
            urgency=urgency,
            available_quantity=Decimal("0"),
            days_until_stockout=None,
            recommended_quantity=Decimal("0"),
            message="",
        )

    def test_critical_first(self):
        analyses = [
            self._analysis(ReorderUrgency.LOW),
            self._analysis(ReorderUrgency.CRITICAL),
            self._analysis(ReorderUrgency.MEDIUM),
            self._analysis(ReorderUrgency.HIGH),
        ]

        ranked = rank_recommendations(analyses)

        assert [a.urgency for a in ranked] == [
            ReorderUrgency.CRITICAL,
            ReorderUrgency.HIGH,
            ReorderUrgency.MEDIUM,
            ReorderUrgency.LOW,
        ]

    def test_key_extracts_analysis(self):
        pairs = [("b", self._analysis(ReorderUrgency.MEDIUM)), ("a", self._analysis(ReorderUrgency.HIGH))]

        ranked = rank_recommendations(pairs, key=lambda pair: pair[1])

        assert [name for name, _ in ranked] == ["a", "b"]

    def test_stable_within_urgency(self):
        first = self._analysis(ReorderUrgency.HIGH)
        second = self._analysis(ReorderUrgency.HIGH)

        ranked = rank_recommendations([first, second])

        assert ranked[0] is first
        assert ranked[1] is second

    @pytest.mark.parametrize("urgency,rank", [
        (ReorderUrgency.CRITICAL, 0),
        (ReorderUrgency.NONE, 4),
    ])
    def test_rank_values(self, urgency, rank):
        assert urgency.rank == rank
