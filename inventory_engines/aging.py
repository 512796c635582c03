"""
Module: inventory_engines.aging
Responsibility:
    Classify an item's remaining cost layers into fixed age buckets, each
    carrying a risk tier, and summarise the result into a slow-moving
    stock report with recommendations.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain and engines.valuation.

Invariants enforced:
    - Purity: no clock access; ``as_of`` is always passed in.
    - Partition: every layer with positive remaining quantity lands in
      exactly one bucket.  Depleted layers are excluded.
    - Future-dated receipts (negative age) clamp into the first bucket.
    - Decimal-only arithmetic for quantities and values.

Failure modes:
    - ValueError if layers carry different currencies (Money refuses to
      add across currencies).

Usage:
    from inventory_engines.aging import InventoryAgingAnalyzer

    report = InventoryAgingAnalyzer().analyze(layers, as_of=date(2024, 6, 30))
    for summary in report.buckets:
        print(summary.bucket.label, summary.total_value)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from inventory_engines.formatting import format_money, format_percentage
from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.cost_layer import CostLayer
from inventory_kernel.domain.values import Money, sum_money
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.aging")


class RiskTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class AgeBucket:
    """
    Definition of an aging bucket.

    Contract:
        Frozen dataclass representing a contiguous range of days.
    Guarantees:
        - min_days >= 0.
        - max_days >= min_days (when bounded).
    """

    label: str
    min_days: int
    max_days: int | None  # None = unbounded (e.g., 91+)
    risk_tier: RiskTier

    def __post_init__(self) -> None:
        if self.min_days < 0:
            raise ValueError("min_days cannot be negative")
        if self.max_days is not None and self.max_days < self.min_days:
            raise ValueError("max_days cannot be less than min_days")

    def contains(self, age_days: int) -> bool:
        """Check if age falls within this bucket."""
        if age_days < self.min_days:
            return False
        if self.max_days is None:
            return True
        return age_days <= self.max_days

    @property
    def is_unbounded(self) -> bool:
        return self.max_days is None


INVENTORY_AGE_BUCKETS: tuple[AgeBucket, ...] = (
    AgeBucket("0-30 days", 0, 30, RiskTier.LOW),
    AgeBucket("31-60 days", 31, 60, RiskTier.MEDIUM),
    AgeBucket("61-90 days", 61, 90, RiskTier.HIGH),
    AgeBucket("91+ days", 91, None, RiskTier.CRITICAL),
)


@dataclass(frozen=True)
class AgedLayer:
    """A cost layer with its age classification."""

    layer: CostLayer
    age_days: int
    bucket: AgeBucket

    @property
    def quantity(self) -> Decimal:
        return self.layer.quantity_remaining

    @property
    def value(self) -> Money:
        return self.layer.remaining_value


@dataclass(frozen=True)
class BucketSummary:
    """Totals for one age bucket."""

    bucket: AgeBucket
    item_count: int
    total_quantity: Decimal
    total_value: Money
    layers: tuple[AgedLayer, ...] = ()


@dataclass(frozen=True)
class AgingRecommendation:
    type: str  # "slow_moving" | "turn_rate"
    priority: str  # "high" | "medium"
    message: str


@dataclass(frozen=True)
class AgingReport:
    """
    Complete inventory aging report.

    Guarantees:
        - ``buckets`` covers every configured bucket, in order, even empty ones.
        - ``total_value`` equals the sum of bucket values.
    """

    as_of: date
    buckets: tuple[BucketSummary, ...]
    total_items: int
    total_quantity: Decimal
    total_value: Money
    average_age_days: int
    oldest: AgedLayer | None
    recommendations: tuple[AgingRecommendation, ...] = ()

    def bucket(self, label: str) -> BucketSummary:
        """Look up a bucket summary by label."""
        for summary in self.buckets:
            if summary.bucket.label == label:
                return summary
        raise KeyError(label)

    def value_by_tier(self) -> dict[RiskTier, Money]:
        return {s.bucket.risk_tier: s.total_value for s in self.buckets}

    def share_of_value(self, label: str) -> Decimal:
        """Percentage (0-100) of total value held in one bucket."""
        if self.total_value.is_zero:
            return Decimal("0")
        return self.bucket(label).total_value.amount / self.total_value.amount * 100


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


class InventoryAgingAnalyzer:
    """
    Age cost layers into fixed risk buckets.

    Contract:
        Pure functions -- no I/O, no database access.
    Guarantees:
        - ``classify`` maps every integer age to exactly one bucket.
    """

    BUCKETS = INVENTORY_AGE_BUCKETS

    def __init__(self, recent_share_threshold: Decimal | int = 30) -> None:
        self.recent_share_threshold = Decimal(str(recent_share_threshold))

    def calculate_age(self, received_at: date | datetime, as_of: date | datetime) -> int:
        """Whole days between receipt and ``as_of`` (negative if received later)."""
        return (_as_date(as_of) - _as_date(received_at)).days

    def classify(self, age_days: int) -> AgeBucket:
        if age_days < 0:
            logger.debug("age_classification_negative", extra={"age_days": age_days})
            return self.BUCKETS[0]
        for bucket in self.BUCKETS:
            if bucket.contains(age_days):
                return bucket
        # Unreachable while the final bucket is unbounded
        raise ValueError(f"Age {age_days} does not fit any bucket")

    def age_layer(self, layer: CostLayer, as_of: date | datetime) -> AgedLayer:
        age_days = self.calculate_age(layer.received_at, as_of)
        return AgedLayer(layer=layer, age_days=age_days, bucket=self.classify(age_days))

    @traced_engine("inventory_aging", "1.0")
    def analyze(
        self,
        layers: Sequence[CostLayer],
        as_of: date | datetime,
        currency: str = "USD",
    ) -> AgingReport:
        """
        Build an aging report for the given layers.

        Args:
            layers: Cost layers, any order; depleted layers are ignored.
            as_of: Date the ages are measured to.
            currency: Currency for zero totals when no layer remains.
        """
        report_date = _as_date(as_of)
        active = sorted(
            (layer for layer in layers if layer.quantity_remaining > 0),
            key=lambda layer: layer.received_at,
        )
        report_currency = active[0].currency if active else currency
        aged = [self.age_layer(layer, report_date) for layer in active]

        summaries = []
        for bucket in self.BUCKETS:
            members = tuple(a for a in aged if a.bucket is bucket)
            summaries.append(BucketSummary(
                bucket=bucket,
                item_count=len(members),
                total_quantity=sum((a.quantity for a in members), Decimal("0")),
                total_value=sum_money((a.value for a in members), report_currency),
                layers=members,
            ))

        total_quantity = sum((a.quantity for a in aged), Decimal("0"))
        total_value = sum_money((a.value for a in aged), report_currency)

        average_age = 0
        if total_quantity > 0:
            weighted = sum((Decimal(max(a.age_days, 0)) * a.quantity for a in aged), Decimal("0"))
            average_age = int((weighted / total_quantity).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

        report = AgingReport(
            as_of=report_date,
            buckets=tuple(summaries),
            total_items=len(aged),
            total_quantity=total_quantity,
            total_value=total_value,
            average_age_days=average_age,
            oldest=aged[0] if aged else None,
        )
        recommendations = self.recommendations(report)
        if recommendations:
            report = replace(report, recommendations=recommendations)

        logger.info("inventory_aging_analyzed", extra={
            "as_of": report_date.isoformat(),
            "layer_count": len(layers),
            "aged_layer_count": len(aged),
            "total_value": str(total_value.amount),
            "recommendation_count": len(recommendations),
        })
        return report

    def recommendations(self, report: AgingReport) -> tuple[AgingRecommendation, ...]:
        """Slow-moving and turn-rate advice derived from bucket values."""
        if report.total_value.is_zero:
            return ()

        result: list[AgingRecommendation] = []
        critical = report.buckets[-1]
        if critical.total_value.is_positive:
            result.append(AgingRecommendation(
                type="slow_moving",
                priority="high",
                message=(
                    f"{format_money(critical.total_value)} of inventory is older than "
                    f"{critical.bucket.min_days - 1} days; consider markdown or disposal"
                ),
            ))

        recent_share = report.share_of_value(report.buckets[0].bucket.label)
        if recent_share < self.recent_share_threshold:
            result.append(AgingRecommendation(
                type="turn_rate",
                priority="medium",
                message=(
                    f"Only {format_percentage(recent_share)} of inventory value is "
                    f"recent stock; review purchasing patterns"
                ),
            ))
        return tuple(result)
