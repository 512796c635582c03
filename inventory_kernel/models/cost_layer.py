"""
Module: inventory_kernel.models.cost_layer
Responsibility: ORM persistence for FIFO cost layers.  Each row is one goods
    receipt at a unit cost, decremented as stock is issued.
Architecture position: Kernel > Models.  Imports db/base.py, plus the engine
    CostLayer value object for ``to_domain`` / ``from_domain``.

Invariants enforced:
    - 0 <= quantity_remaining <= quantity_received, and quantity_received > 0
      (CHECK constraints, also enforced by the domain CostLayer).
    - unit_cost >= 0.
    - Layers are never deleted; depleted layers stay at quantity_remaining 0
      for valuation history.
    - (organization_id, inventory_id, received_at) index gives FIFO order.

Failure modes:
    - IntegrityError on a CHECK violation.
    - ValueError from ``to_domain`` if a stored row violates the domain
      invariants (e.g. edited outside the service layer).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_engines.valuation.cost_layer import CostLayer, LayerReference
from inventory_kernel.db.base import TrackedBase, UUIDString
from inventory_kernel.domain.values import Money


class CostLayerModel(TrackedBase):
    """
    Persistent storage for one cost layer.

    Contract:
        quantity_received and unit_cost are frozen at creation.  Only
        quantity_remaining changes, and only through ValuationService.
    """

    __tablename__ = "inventory_cost_layers"

    __table_args__ = (
        # Query: all layers for an item, oldest first
        Index("idx_cost_layer_org_inventory", "organization_id", "inventory_id", "received_at"),
        # Query: layers received in a time range (aging)
        Index("idx_cost_layer_received_at", "received_at"),
        CheckConstraint("quantity_received > 0", name="ck_cost_layer_received_positive"),
        CheckConstraint("quantity_remaining >= 0", name="ck_cost_layer_remaining_non_negative"),
        CheckConstraint(
            "quantity_remaining <= quantity_received", name="ck_cost_layer_remaining_le_received",
        ),
        CheckConstraint("unit_cost >= 0", name="ck_cost_layer_cost_non_negative"),
    )

    organization_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    inventory_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("inventory_items.id"),
        nullable=False,
    )

    received_at: Mapped[datetime] = mapped_column(nullable=False)

    quantity_received: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    quantity_remaining: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    unit_cost: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    reference_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    def to_domain(self) -> CostLayer:
        """Convert to the immutable engine value object."""
        return CostLayer(
            layer_id=self.id,
            received_at=self.received_at,
            quantity_received=self.quantity_received,
            quantity_remaining=self.quantity_remaining,
            unit_cost=Money.of(self.unit_cost, self.currency),
            reference_type=LayerReference(self.reference_type) if self.reference_type else None,
            reference_id=self.reference_id,
            expiry_date=self.expiry_date,
        )

    @classmethod
    def from_domain(
        cls,
        layer: CostLayer,
        organization_id: UUID,
        inventory_id: UUID,
    ) -> CostLayerModel:
        return cls(
            id=layer.layer_id,
            organization_id=organization_id,
            inventory_id=inventory_id,
            received_at=layer.received_at,
            quantity_received=layer.quantity_received,
            quantity_remaining=layer.quantity_remaining,
            unit_cost=layer.unit_cost.amount,
            currency=layer.currency,
            reference_type=layer.reference_type.value if layer.reference_type else None,
            reference_id=layer.reference_id,
            expiry_date=layer.expiry_date,
        )

    def __repr__(self) -> str:
        return (
            f"<CostLayer {self.id}: inventory={self.inventory_id} "
            f"remaining={self.quantity_remaining}/{self.quantity_received} "
            f"@ {self.unit_cost} {self.currency}>"
        )
