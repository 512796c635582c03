"""
inventory_services.replenishment_service -- Stock status and reorder advice.

Responsibility:
    Load items from the database and run the pure stock-status, reorder and
    replenishment engines against them with the active policy's
    parameters.  Builds the ranked reorder recommendation list for an
    organization.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Read-only: never writes items or layers.

Failure modes:
    - InventoryItemNotFoundError for an unknown inventory_id.
    - ValueError for an unknown urgency filter or a non-positive limit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory_config.schema import CostingPolicy
from inventory_engines.reorder import (
    ReorderAnalysis,
    ReorderUrgency,
    analyze_reorder,
    rank_recommendations,
)
from inventory_engines.replenishment import ReplenishmentPlan, plan_replenishment
from inventory_engines.stock_status import StockStatus, get_stock_status
from inventory_engines.valuation import weighted_average_cost
from inventory_kernel.domain.values import Money
from inventory_kernel.exceptions import InventoryItemNotFoundError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.models.cost_layer import CostLayerModel
from inventory_kernel.models.inventory_item import InventoryItemModel

logger = get_logger("services.replenishment")

URGENCY_FILTERS: dict[str, frozenset[ReorderUrgency]] = {
    "all": frozenset({
        ReorderUrgency.CRITICAL,
        ReorderUrgency.HIGH,
        ReorderUrgency.MEDIUM,
        ReorderUrgency.LOW,
    }),
    "high": frozenset({ReorderUrgency.CRITICAL, ReorderUrgency.HIGH}),
    "critical": frozenset({ReorderUrgency.CRITICAL}),
}


@dataclass(frozen=True)
class ReorderRecommendation:
    """One item's reorder analysis with its identifying fields."""

    inventory_id: UUID
    sku: str
    name: str
    location_id: str | None
    analysis: ReorderAnalysis


@dataclass(frozen=True)
class ReorderRecommendations:
    """Ranked recommendations plus counts by urgency over all actionable items."""

    items: tuple[ReorderRecommendation, ...]
    summary: dict[str, int] = field(default_factory=dict)


class ReplenishmentService:
    """
    Reorder analysis over persisted items.

    Contract:
        Receives Session and CostingPolicy via constructor injection.
    Guarantees:
        - Recommendations are ranked critical first; ties keep SKU order.
        - ``summary`` counts are computed before filtering and limiting.
    """

    def __init__(self, session: Session, policy: CostingPolicy | None = None):
        self.session = session
        self.policy = policy or CostingPolicy()

    def stock_status(self, inventory_id: UUID) -> StockStatus:
        item = self._get_item(inventory_id)
        return get_stock_status(
            item.quantity_on_hand,
            item.quantity_allocated,
            item.reorder_point,
            item.max_stock_level,
        )

    def analyze_item(self, inventory_id: UUID) -> ReorderAnalysis:
        return self._analyze(self._get_item(inventory_id))

    def reorder_recommendations(
        self,
        organization_id: UUID,
        urgency_filter: str = "all",
        limit: int = 50,
    ) -> ReorderRecommendations:
        """
        Ranked reorder recommendations for an organization.

        Args:
            urgency_filter: "all" (every actionable item), "high"
                (critical and high) or "critical".
            limit: Maximum number of items returned.
        """
        if urgency_filter not in URGENCY_FILTERS:
            raise ValueError(
                f"urgency_filter must be one of {sorted(URGENCY_FILTERS)}, got '{urgency_filter}'"
            )
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        stmt = (
            select(InventoryItemModel)
            .where(InventoryItemModel.organization_id == organization_id)
            .order_by(InventoryItemModel.sku)
        )
        with LogContext.bind(organization_id=str(organization_id)):
            recommendations = [
                ReorderRecommendation(
                    inventory_id=item.id,
                    sku=item.sku,
                    name=item.name,
                    location_id=item.location_id,
                    analysis=self._analyze(item),
                )
                for item in self.session.execute(stmt).scalars().all()
            ]
        actionable = [r for r in recommendations if r.analysis.is_actionable]

        summary = {"total": len(actionable)}
        for urgency in (
            ReorderUrgency.CRITICAL,
            ReorderUrgency.HIGH,
            ReorderUrgency.MEDIUM,
            ReorderUrgency.LOW,
        ):
            summary[urgency.value] = sum(1 for r in actionable if r.analysis.urgency is urgency)

        wanted = URGENCY_FILTERS[urgency_filter]
        ranked = rank_recommendations(
            (r for r in actionable if r.analysis.urgency in wanted),
            key=lambda r: r.analysis,
        )

        logger.info("reorder_recommendations_built", extra={
            "organization_id": str(organization_id),
            "urgency_filter": urgency_filter,
            "item_count": len(recommendations),
            "actionable_count": len(actionable),
            "returned_count": min(len(ranked), limit),
        })
        return ReorderRecommendations(items=tuple(ranked[:limit]), summary=summary)

    def plan_item(
        self,
        inventory_id: UUID,
        daily_demand: Sequence[Decimal | int | str],
        service_level: Decimal | None = None,
        lead_time_days: int | None = None,
    ) -> ReplenishmentPlan:
        """
        Safety stock, reorder point and EOQ for an item.

        The item's weighted-average layer cost drives the holding cost;
        when no stock remains the policy's ``fallback_unit_cost`` is used.
        """
        item = self._get_item(inventory_id)
        rules = self.policy.replenishment

        stmt = select(CostLayerModel).where(CostLayerModel.inventory_id == inventory_id)
        layers = [m.to_domain() for m in self.session.execute(stmt).scalars().all()]
        unit_cost = weighted_average_cost(layers, currency=item.unit_cost_currency)
        if unit_cost.is_zero:
            unit_cost = Money.of(self.policy.fallback_unit_cost, item.unit_cost_currency)

        return plan_replenishment(
            daily_demand,
            unit_cost,
            service_level=service_level if service_level is not None else rules.default_service_level,
            lead_time_days=(
                lead_time_days if lead_time_days is not None else rules.default_lead_time_days
            ),
            ordering_cost=rules.ordering_cost,
            holding_cost_percent=rules.holding_cost_percent,
            min_history_days=rules.min_history_days,
        )

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _analyze(self, item: InventoryItemModel) -> ReorderAnalysis:
        rules = self.policy.replenishment
        return analyze_reorder(
            item.quantity_on_hand,
            item.quantity_allocated,
            item.reorder_point,
            item.average_daily_demand,
            eoq=item.economic_order_quantity,
            advisory_horizon_days=rules.advisory_horizon_days,
            quantity_multiplier=rules.recommended_quantity_multiplier,
        )

    def _get_item(self, inventory_id: UUID) -> InventoryItemModel:
        item = self.session.get(InventoryItemModel, inventory_id)
        if item is None:
            raise InventoryItemNotFoundError(str(inventory_id))
        return item
