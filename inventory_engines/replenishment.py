"""
Replenishment Math (``inventory_engines.replenishment``).

Responsibility
--------------
Demand statistics, safety stock, reorder point (ROP) and Economic Order
Quantity (EOQ) from an item's daily demand history.  Textbook formulas
with no side effects.

Architecture
------------
Layer: **Engines** -- pure functions.  No I/O, no session, no clock.
Called from ``inventory_services.replenishment_service`` and from tests.

Invariants
----------
- Decimal arithmetic throughout; ``float`` inputs are rejected.
- Safety stock, ROP and EOQ are whole units, rounded up (ceiling).
- ``calculate_eoq`` falls back to 30 days of demand when holding cost is 0.

Failure Modes
-------------
- ``calculate_safety_stock`` / ``calculate_reorder_point`` /
  ``calculate_eoq``: raise ``ValueError`` on negative inputs.
- ``plan_replenishment``: never raises on short history; it returns a plan
  with ``sufficient_history=False`` and no computed quantities.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal

from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.cost_layer import to_quantity
from inventory_kernel.domain.values import Money
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.replenishment")

ZERO = Decimal("0")
DAYS_PER_YEAR = Decimal("365")
FALLBACK_ORDER_DAYS = Decimal("30")
DEFAULT_Z_SCORE = Decimal("1.64")

# Service level -> z-score for a one-tailed normal distribution.
Z_SCORES: dict[Decimal, Decimal] = {
    Decimal("0.5"): Decimal("0"),
    Decimal("0.6"): Decimal("0.25"),
    Decimal("0.7"): Decimal("0.52"),
    Decimal("0.75"): Decimal("0.67"),
    Decimal("0.8"): Decimal("0.84"),
    Decimal("0.85"): Decimal("1.04"),
    Decimal("0.9"): Decimal("1.28"),
    Decimal("0.95"): Decimal("1.64"),
    Decimal("0.97"): Decimal("1.88"),
    Decimal("0.98"): Decimal("2.05"),
    Decimal("0.99"): Decimal("2.33"),
    Decimal("0.995"): Decimal("2.58"),
    Decimal("0.999"): Decimal("3.09"),
}


def _ceil(value: Decimal) -> Decimal:
    return value.to_integral_value(rounding=ROUND_CEILING)


@dataclass(frozen=True)
class DemandStatistics:
    """Summary statistics of a daily demand series."""

    days: int
    total: Decimal
    mean: Decimal
    std_dev: Decimal
    peak: Decimal
    minimum: Decimal

    @classmethod
    def from_daily_demand(cls, values: Sequence[Decimal | int | str]) -> DemandStatistics:
        """
        Compute statistics over daily demand quantities.

        Uses the population standard deviation.  An empty series yields
        all-zero statistics.
        """
        quantities = [to_quantity(v) for v in values]
        if not quantities:
            return cls(days=0, total=ZERO, mean=ZERO, std_dev=ZERO, peak=ZERO, minimum=ZERO)

        count = Decimal(len(quantities))
        total = sum(quantities, ZERO)
        mean = total / count
        variance = sum(((q - mean) ** 2 for q in quantities), ZERO) / count
        return cls(
            days=len(quantities),
            total=total,
            mean=mean,
            std_dev=variance.sqrt(),
            peak=max(quantities),
            minimum=min(quantities),
        )


@dataclass(frozen=True)
class ReplenishmentPlan:
    """
    Safety stock, reorder point and order quantity for one item.

    When ``sufficient_history`` is False only ``statistics`` is meaningful;
    the computed quantities are None.
    """

    sufficient_history: bool
    statistics: DemandStatistics
    service_level: Decimal
    lead_time_days: int
    z_score: Decimal | None = None
    safety_stock: Decimal | None = None
    reorder_point: Decimal | None = None
    economic_order_quantity: Decimal | None = None
    message: str = ""


def z_score_for_service_level(service_level: Decimal | str) -> Decimal:
    """
    Z-score for a service level in [0.5, 0.999].

    Exact table hits (to three decimal places) are returned directly;
    values between table entries are linearly interpolated.  Anything
    outside the table returns the 95% default of 1.64.
    """
    level = to_quantity(service_level)
    rounded = level.quantize(Decimal("0.001"))
    for key, z in Z_SCORES.items():
        if key == rounded:
            return z

    keys = sorted(Z_SCORES)
    for low, high in zip(keys, keys[1:]):
        if low <= level <= high:
            ratio = (level - low) / (high - low)
            return Z_SCORES[low] + ratio * (Z_SCORES[high] - Z_SCORES[low])

    logger.debug("z_score_default_used", extra={"service_level": str(level)})
    return DEFAULT_Z_SCORE


def calculate_safety_stock(
    z_score: Decimal,
    demand_std_dev: Decimal,
    lead_time_days: int,
) -> Decimal:
    """
    Safety stock in whole units.

    Formula: ``SS = ceil(z * sigma * sqrt(L))``

    Raises:
        ValueError: If any input is negative.
    """
    if z_score < 0:
        raise ValueError(f"z_score must be non-negative, got {z_score}")
    if demand_std_dev < 0:
        raise ValueError(f"demand_std_dev must be non-negative, got {demand_std_dev}")
    if lead_time_days < 0:
        raise ValueError(f"lead_time_days must be non-negative, got {lead_time_days}")

    return _ceil(z_score * demand_std_dev * Decimal(lead_time_days).sqrt())


def calculate_reorder_point(
    avg_daily_usage: Decimal,
    lead_time_days: int,
    safety_stock: Decimal,
) -> Decimal:
    """
    Reorder point in whole units.

    Formula: ``ROP = ceil(avg_daily_usage * lead_time_days + safety_stock)``

    Raises:
        ValueError: If inputs are negative.
    """
    if avg_daily_usage < 0:
        raise ValueError(f"avg_daily_usage must be non-negative, got {avg_daily_usage}")
    if lead_time_days < 0:
        raise ValueError(f"lead_time_days must be non-negative, got {lead_time_days}")
    if safety_stock < 0:
        raise ValueError(f"safety_stock must be non-negative, got {safety_stock}")

    return _ceil(avg_daily_usage * lead_time_days + safety_stock)


def calculate_eoq(
    annual_demand: Decimal,
    order_cost: Decimal,
    holding_cost: Decimal,
) -> Decimal:
    """
    Economic Order Quantity using the Wilson formula, in whole units.

    Formula: ``EOQ = ceil(sqrt(2 * D * S / H))``.  With zero holding cost
    the formula is undefined and the result is 30 days of average demand.

    Args:
        annual_demand: Annual demand in units (D).
        order_cost: Cost per order placed (S).
        holding_cost: Annual holding cost per unit (H).

    Raises:
        ValueError: If any input is negative.
    """
    if annual_demand < 0:
        raise ValueError(f"annual_demand must be non-negative, got {annual_demand}")
    if order_cost < 0:
        raise ValueError(f"order_cost must be non-negative, got {order_cost}")
    if holding_cost < 0:
        raise ValueError(f"holding_cost must be non-negative, got {holding_cost}")

    if holding_cost == 0:
        return _ceil(annual_demand / DAYS_PER_YEAR * FALLBACK_ORDER_DAYS)

    numerator = Decimal("2") * annual_demand * order_cost
    return _ceil((numerator / holding_cost).sqrt())


@traced_engine(
    "replenishment",
    "1.0",
    fingerprint_fields=("service_level", "lead_time_days", "min_history_days"),
)
def plan_replenishment(
    daily_demand: Sequence[Decimal | int | str],
    unit_cost: Money,
    service_level: Decimal | str = Decimal("0.95"),
    lead_time_days: int = 7,
    ordering_cost: Decimal | str = Decimal("50"),
    holding_cost_percent: Decimal | str = Decimal("0.25"),
    min_history_days: int = 30,
) -> ReplenishmentPlan:
    """
    Full replenishment plan from a daily demand history.

    Args:
        daily_demand: One quantity per day, oldest first.
        unit_cost: Unit cost used to derive the annual holding cost.
        service_level: Target probability of not stocking out.
        lead_time_days: Supplier lead time.
        ordering_cost: Fixed cost per order (S).
        holding_cost_percent: Annual holding cost as a fraction of unit cost.
        min_history_days: Observations required before a plan is produced.
    """
    level = to_quantity(service_level)
    stats = DemandStatistics.from_daily_demand(daily_demand)

    if stats.days < min_history_days:
        logger.info("replenishment_insufficient_history", extra={
            "days_available": stats.days,
            "min_history_days": min_history_days,
        })
        return ReplenishmentPlan(
            sufficient_history=False,
            statistics=stats,
            service_level=level,
            lead_time_days=lead_time_days,
            message=(
                f"Need at least {min_history_days} days of demand history, "
                f"have {stats.days}"
            ),
        )

    z = z_score_for_service_level(level)
    safety_stock = calculate_safety_stock(z, stats.std_dev, lead_time_days)
    reorder_point = calculate_reorder_point(stats.mean, lead_time_days, safety_stock)
    holding_cost = unit_cost.amount * to_quantity(holding_cost_percent)
    eoq = calculate_eoq(stats.mean * DAYS_PER_YEAR, to_quantity(ordering_cost), holding_cost)

    logger.debug("replenishment_planned", extra={
        "service_level": str(level),
        "z_score": str(z),
        "safety_stock": str(safety_stock),
        "reorder_point": str(reorder_point),
        "economic_order_quantity": str(eoq),
    })

    return ReplenishmentPlan(
        sufficient_history=True,
        statistics=stats,
        service_level=level,
        lead_time_days=lead_time_days,
        z_score=z,
        safety_stock=safety_stock,
        reorder_point=reorder_point,
        economic_order_quantity=eoq,
    )
