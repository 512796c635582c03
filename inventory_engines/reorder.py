"""
Module: inventory_engines.reorder
Responsibility:
    Decide whether an item should be reordered, how urgently, and how much,
    from its current position and average daily demand.

Architecture position:
    Engines -- pure decision logic, zero I/O, no retries.

Invariants enforced:
    - available = on_hand - allocated; days_until_stockout is None when
      demand is not positive.
    - Urgency ladder at or below the reorder point: critical (nothing
      available or <= 3 days), high (<= 7 days), medium (otherwise,
      including unknown days).
    - Above the reorder point, stock running out within the advisory
      horizon yields a low-urgency advisory; anything else is adequate.

Failure modes:
    - None.  Every numeric input yields an analysis.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from inventory_engines.formatting import format_days, format_quantity
from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.cost_layer import to_quantity
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.reorder")

CRITICAL_DAYS = Decimal("3")
HIGH_DAYS = Decimal("7")
ADVISORY_HORIZON_DAYS = Decimal("14")
DEFAULT_QUANTITY_MULTIPLIER = Decimal("2")


class ReorderUrgency(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @property
    def rank(self) -> int:
        """Sort key: 0 is most urgent."""
        return _URGENCY_RANK[self]


_URGENCY_RANK = {
    ReorderUrgency.CRITICAL: 0,
    ReorderUrgency.HIGH: 1,
    ReorderUrgency.MEDIUM: 2,
    ReorderUrgency.LOW: 3,
    ReorderUrgency.NONE: 4,
}


@dataclass(frozen=True)
class ReorderAnalysis:
    """Derived reorder decision; recomputed on every query, never stored."""

    should_reorder: bool
    urgency: ReorderUrgency
    available_quantity: Decimal
    days_until_stockout: Decimal | None
    recommended_quantity: Decimal
    message: str

    @property
    def is_actionable(self) -> bool:
        return self.urgency is not ReorderUrgency.NONE


@traced_engine(
    "reorder",
    "1.0",
    fingerprint_fields=("on_hand", "allocated", "reorder_point", "avg_daily_demand", "eoq"),
)
def analyze_reorder(
    on_hand: Decimal | int | str,
    allocated: Decimal | int | str,
    reorder_point: Decimal | int | str,
    avg_daily_demand: Decimal | int | str,
    eoq: Decimal | int | str | None = None,
    advisory_horizon_days: Decimal | int = ADVISORY_HORIZON_DAYS,
    quantity_multiplier: Decimal | int = DEFAULT_QUANTITY_MULTIPLIER,
) -> ReorderAnalysis:
    """
    Analyse one item's reorder position.

    Args:
        on_hand: Quantity physically on hand.
        allocated: Quantity reserved against orders.
        reorder_point: Trigger level.
        avg_daily_demand: Average units consumed per day.
        eoq: Economic order quantity; when None the recommendation is
            ``quantity_multiplier * reorder_point``.
        advisory_horizon_days: Days-to-stockout below which an item above
            its reorder point still gets a low-urgency advisory.
        quantity_multiplier: Multiplier of the reorder point used when no
            EOQ is known.

    Example:
        >>> analyze_reorder(5, 0, 10, 2).urgency
        <ReorderUrgency.CRITICAL: 'critical'>
    """
    on_hand_q = to_quantity(on_hand)
    allocated_q = to_quantity(allocated)
    rop = to_quantity(reorder_point)
    demand = to_quantity(avg_daily_demand)
    horizon = to_quantity(advisory_horizon_days)

    available = on_hand_q - allocated_q
    days = available / demand if demand > 0 else None
    recommended = to_quantity(eoq) if eoq is not None else rop * to_quantity(quantity_multiplier)

    if on_hand_q <= rop:
        if available <= 0 or (days is not None and days <= CRITICAL_DAYS):
            urgency = ReorderUrgency.CRITICAL
        elif days is not None and days <= HIGH_DAYS:
            urgency = ReorderUrgency.HIGH
        else:
            urgency = ReorderUrgency.MEDIUM
        message = (
            f"Stock at or below reorder point ({format_quantity(on_hand_q)} <= "
            f"{format_quantity(rop)}); {format_days(days)} of stock available. "
            f"Order {format_quantity(recommended)} units"
        )
        analysis = ReorderAnalysis(True, urgency, available, days, recommended, message)
    elif days is not None and days <= horizon:
        message = (
            f"Stock will run out in {format_days(days)}; consider ordering "
            f"{format_quantity(recommended)} units"
        )
        analysis = ReorderAnalysis(False, ReorderUrgency.LOW, available, days, recommended, message)
    else:
        analysis = ReorderAnalysis(
            False, ReorderUrgency.NONE, available, days, Decimal("0"), "Stock levels adequate",
        )

    logger.debug("reorder_analyzed", extra={
        "on_hand": str(on_hand_q),
        "available": str(available),
        "reorder_point": str(rop),
        "days_until_stockout": str(days) if days is not None else None,
        "urgency": analysis.urgency.value,
    })
    return analysis


def rank_recommendations(
    items: Iterable[Any],
    key: Callable[[Any], ReorderAnalysis] = lambda item: item,
) -> list[Any]:
    """Stable sort by urgency, most urgent first.

    ``key`` extracts the ReorderAnalysis from each item, so callers can rank
    (item, analysis) pairs as well as bare analyses.
    """
    return sorted(items, key=lambda item: key(item).urgency.rank)
