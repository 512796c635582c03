"""
inventory_services.valuation_service -- Cost layer persistence and FIFO issue.

Responsibility:
    Manage an item's cost layers in the database: create layers on receipt,
    issue stock oldest-first through the pure FIFO engine, persist the
    decremented layers and on-hand quantity, and produce valuation and
    aging reports.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Composes ``consume_fifo``, ``value_layers`` and
    ``InventoryAgingAnalyzer`` with ``CostLayerModel`` /
    ``InventoryItemModel`` persistence.  Pure types live in
    inventory_engines.valuation.

Invariants enforced:
    - Conservation: layer decrements and the on-hand decrement come from
      the same engine result and are flushed together.
    - Layers are never deleted; depleted layers stay at zero remaining.
    - Policy decides shortfall handling: with
      ``allow_negative_inventory=False`` an issue that would leave a
      shortfall raises before anything is written.

Failure modes:
    - InventoryItemNotFoundError for an unknown inventory_id.
    - InvalidCostLayerError on receipt of a non-positive quantity or a
      negative unit cost.
    - CurrencyMismatchError when a receipt's currency differs from the
      item's costing currency.
    - InsufficientInventoryError on shortfall when negatives are disallowed.

Audit relevance:
    Every receipt and issue is logged with inventory_id, quantities and
    cost.  The engine calls underneath emit INVENTORY_ENGINE_TRACE.

Usage:
    service = ValuationService(session, clock, policy)
    service.receive_layer(item_id, Decimal("10"), Money.of("5.00", "USD"))
    result = service.issue_fifo(item_id, Decimal("4"))
    result.total_cost  # Money("20.00", "USD")
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory_config.schema import CostingPolicy
from inventory_engines.aging import AgingReport, InventoryAgingAnalyzer
from inventory_engines.valuation import (
    CostLayer,
    FIFOIssueResult,
    ItemValuation,
    LayerReference,
    consume_fifo,
    value_layers,
)
from inventory_engines.valuation.cost_layer import to_quantity
from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.values import Money
from inventory_kernel.exceptions import (
    CurrencyMismatchError,
    InsufficientInventoryError,
    InvalidCostLayerError,
    InventoryItemNotFoundError,
)
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.models.cost_layer import CostLayerModel
from inventory_kernel.models.inventory_item import InventoryItemModel

logger = get_logger("services.valuation")


class ValuationService:
    """
    Persistent FIFO costing for inventory items.

    Contract:
        Receives Session, Clock and CostingPolicy via constructor injection.
        Flushes but never commits; the caller owns the transaction.
    Guarantees:
        - ``receive_layer`` persists one CostLayerModel and increments
          on-hand by the received quantity.
        - ``issue_fifo`` consumes oldest layers first and, unless
          simulating, writes every changed layer and the new on-hand.
        - ``list_layers`` returns layers in FIFO order.
    Non-goals:
        - No locking beyond ``SELECT ... FOR UPDATE`` on the item's layers;
          concurrent issue coordination is the database's job.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        policy: CostingPolicy | None = None,
    ):
        self.session = session
        self.clock = clock or SystemClock()
        self.policy = policy or CostingPolicy()
        self.aging = InventoryAgingAnalyzer(
            recent_share_threshold=self.policy.aging.recent_share_threshold,
        )

    # =========================================================================
    # Receipts
    # =========================================================================

    def receive_layer(
        self,
        inventory_id: UUID,
        quantity: Decimal | int | str,
        unit_cost: Money,
        received_at: datetime | None = None,
        reference_type: LayerReference | None = None,
        reference_id: UUID | None = None,
        expiry_date: date | None = None,
    ) -> CostLayer:
        """
        Record a goods receipt as a new cost layer.

        Raises:
            InventoryItemNotFoundError: Unknown inventory_id.
            InvalidCostLayerError: Non-positive quantity or negative cost.
            CurrencyMismatchError: Cost currency differs from the item's.
        """
        item = self._get_item(inventory_id)
        if unit_cost.currency.code != item.unit_cost_currency:
            raise CurrencyMismatchError(unit_cost.currency.code, item.unit_cost_currency)

        try:
            layer = CostLayer.create(
                received_at=received_at or self.clock.now(),
                quantity=quantity,
                unit_cost=unit_cost,
                reference_type=reference_type,
                reference_id=reference_id,
                expiry_date=expiry_date,
            )
        except ValueError as e:
            logger.warning("cost_layer_rejected", extra={
                "inventory_id": str(inventory_id),
                "reason": str(e),
            })
            raise InvalidCostLayerError(str(inventory_id), str(e)) from e

        self.session.add(CostLayerModel.from_domain(layer, item.organization_id, item.id))
        item.quantity_on_hand = item.quantity_on_hand + layer.quantity_received
        self.session.flush()

        logger.info("cost_layer_received", extra={
            "inventory_id": str(inventory_id),
            "layer_id": str(layer.layer_id),
            "quantity": str(layer.quantity_received),
            "unit_cost": str(unit_cost.amount),
            "currency": unit_cost.currency.code,
        })
        return layer

    # =========================================================================
    # Queries
    # =========================================================================

    def list_layers(
        self,
        inventory_id: UUID,
        has_remaining: bool | None = None,
    ) -> list[CostLayer]:
        """
        Cost layers for an item in FIFO order.

        Args:
            has_remaining: True for layers with stock left, False for
                depleted layers, None for all.
        """
        self._get_item(inventory_id)
        stmt = self._layers_stmt(inventory_id)
        if has_remaining is True:
            stmt = stmt.where(CostLayerModel.quantity_remaining > 0)
        elif has_remaining is False:
            stmt = stmt.where(CostLayerModel.quantity_remaining <= 0)
        return [m.to_domain() for m in self.session.execute(stmt).scalars().all()]

    def value_item(self, inventory_id: UUID) -> ItemValuation:
        """Weighted-average cost and total value of an item's layers."""
        item = self._get_item(inventory_id)
        return value_layers(self.list_layers(inventory_id), currency=item.unit_cost_currency)

    def aging_report(
        self,
        organization_id: UUID,
        as_of: date | datetime | None = None,
        currency: str | None = None,
    ) -> AgingReport:
        """
        Age the organization's remaining layers costed in one currency.

        ``currency`` defaults to the policy's ``valuation_currency``.  Layers
        in other currencies are left out and counted in the
        ``aging_layers_excluded`` warning; use ``aging_reports_by_currency``
        to see them.  ``as_of`` defaults to the injected clock's current time.
        """
        report_currency = (currency or self.policy.valuation_currency).upper()
        layers = self._remaining_layers(organization_id)
        included = [layer for layer in layers if layer.currency == report_currency]

        excluded = len(layers) - len(included)
        if excluded:
            logger.warning("aging_layers_excluded", extra={
                "organization_id": str(organization_id),
                "currency": report_currency,
                "excluded_layer_count": excluded,
                "excluded_currencies": sorted(
                    {layer.currency for layer in layers} - {report_currency}
                ),
            })

        return self.aging.analyze(
            included,
            as_of or self.clock.now(),
            currency=report_currency,
        )

    def aging_reports_by_currency(
        self,
        organization_id: UUID,
        as_of: date | datetime | None = None,
    ) -> dict[str, AgingReport]:
        """One aging report per costing currency with remaining stock."""
        as_of = as_of or self.clock.now()
        by_currency: dict[str, list[CostLayer]] = {}
        for layer in self._remaining_layers(organization_id):
            by_currency.setdefault(layer.currency, []).append(layer)
        return {
            code: self.aging.analyze(layers, as_of, currency=code)
            for code, layers in sorted(by_currency.items())
        }

    # =========================================================================
    # Issues
    # =========================================================================

    def issue_fifo(
        self,
        inventory_id: UUID,
        quantity: Decimal | int | str,
        simulate: bool = False,
    ) -> FIFOIssueResult:
        """
        Issue stock oldest-first and persist the result.

        Args:
            inventory_id: Item to issue from.
            quantity: Units to issue.
            simulate: Compute cost without writing anything.

        Raises:
            InventoryItemNotFoundError: Unknown inventory_id.
            InsufficientInventoryError: Shortfall while the policy
                disallows negative inventory.
        """
        item = self._get_item(inventory_id)
        stmt = self._layers_stmt(inventory_id)
        if not simulate:
            stmt = stmt.with_for_update()
        models = self.session.execute(stmt).scalars().all()

        with LogContext.bind(
            organization_id=str(item.organization_id),
            inventory_id=str(inventory_id),
            sku=item.sku,
        ):
            result = consume_fifo(
                [m.to_domain() for m in models],
                to_quantity(quantity),
                currency=item.unit_cost_currency,
            )

            if result.shortfall > 0 and not self.policy.allow_negative_inventory:
                logger.warning("fifo_issue_rejected", extra={
                    "requested_quantity": str(result.requested_quantity),
                    "available_quantity": str(result.quantity_issued),
                    "shortfall": str(result.shortfall),
                })
                raise InsufficientInventoryError(
                    str(inventory_id),
                    requested=str(result.requested_quantity),
                    available=str(result.quantity_issued),
                    shortfall=str(result.shortfall),
                )

            if simulate:
                return result

            by_id = {m.id: m for m in models}
            for consumption in result.consumptions:
                by_id[consumption.layer_id].quantity_remaining = consumption.remaining_in_layer
            item.quantity_on_hand = (
                item.quantity_on_hand - result.quantity_issued - result.shortfall
            )
            self.session.flush()

            logger.info("fifo_issue_posted", extra={
                "quantity_issued": str(result.quantity_issued),
                "shortfall": str(result.shortfall),
                "total_cost": str(result.total_cost.amount),
                "layers_consumed": result.layer_count,
                "quantity_on_hand": str(item.quantity_on_hand),
            })
        return result

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _get_item(self, inventory_id: UUID) -> InventoryItemModel:
        item = self.session.get(InventoryItemModel, inventory_id)
        if item is None:
            raise InventoryItemNotFoundError(str(inventory_id))
        return item

    def _remaining_layers(self, organization_id: UUID) -> list[CostLayer]:
        stmt = (
            select(CostLayerModel)
            .where(
                CostLayerModel.organization_id == organization_id,
                CostLayerModel.quantity_remaining > 0,
            )
            .order_by(CostLayerModel.received_at)
        )
        return [m.to_domain() for m in self.session.execute(stmt).scalars().all()]

    @staticmethod
    def _layers_stmt(inventory_id: UUID):
        return (
            select(CostLayerModel)
            .where(CostLayerModel.inventory_id == inventory_id)
            .order_by(CostLayerModel.received_at, CostLayerModel.created_at)
        )
