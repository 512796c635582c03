"""
inventory_engines.turnover -- Inventory turnover rate and days on hand.

Period COGS is annualised (``cogs * 365 / period_days``) and divided by the
average inventory value.  A zero inventory value gives a zero rate rather
than dividing by zero; a zero rate gives zero days on hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from inventory_engines.tracer import traced_engine
from inventory_kernel.domain.values import Money

DAYS_PER_YEAR = Decimal("365")


class TurnoverRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


# Minimum annual turns for each rating, best first.
TURNOVER_BENCHMARKS: tuple[tuple[TurnoverRating, Decimal], ...] = (
    (TurnoverRating.EXCELLENT, Decimal("12")),
    (TurnoverRating.GOOD, Decimal("6")),
    (TurnoverRating.AVERAGE, Decimal("3")),
)


@dataclass(frozen=True)
class TurnoverResult:
    period_days: int
    period_cogs: Money
    average_inventory_value: Money
    annualized_cogs: Money
    turnover_rate: Decimal
    days_on_hand: int
    rating: TurnoverRating


def rate_turnover(turnover_rate: Decimal) -> TurnoverRating:
    for rating, minimum in TURNOVER_BENCHMARKS:
        if turnover_rate >= minimum:
            return rating
    return TurnoverRating.POOR


@traced_engine("turnover", "1.0", fingerprint_fields=("period_days",))
def calculate_turnover(
    period_cogs: Money,
    average_inventory_value: Money,
    period_days: int,
) -> TurnoverResult:
    """
    Annualised turnover for a reporting period.

    Args:
        period_cogs: Cost of goods sold over the period.
        average_inventory_value: Average value of stock held.
        period_days: Length of the period in days (must be positive).

    Raises:
        ValueError: If period_days is not positive, or currencies differ.
    """
    if period_days <= 0:
        raise ValueError(f"period_days must be positive, got {period_days}")
    if period_cogs.currency != average_inventory_value.currency:
        raise ValueError(
            f"Currency mismatch: {period_cogs.currency} vs {average_inventory_value.currency}"
        )

    annualized = period_cogs * DAYS_PER_YEAR / period_days
    if average_inventory_value.is_positive:
        rate = annualized.amount / average_inventory_value.amount
    else:
        rate = Decimal("0")
    days_on_hand = DAYS_PER_YEAR / rate if rate > 0 else Decimal("0")

    return TurnoverResult(
        period_days=period_days,
        period_cogs=period_cogs,
        average_inventory_value=average_inventory_value,
        annualized_cogs=annualized,
        turnover_rate=rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
        days_on_hand=int(days_on_hand.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
        rating=rate_turnover(rate),
    )
