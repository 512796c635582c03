"""
Module: inventory_kernel.models.inventory_item
Responsibility: ORM persistence for stocked inventory items: the per-location
    quantities, reorder parameters and costing currency that the stock-status,
    reorder and valuation services read.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from engines, services or outer layers.

Invariants enforced:
    - (organization_id, sku, location_id) is unique.
    - quantity_on_hand is decremented only by ValuationService.issue_fifo,
      in the same transaction that updates the consumed cost layers.

Failure modes:
    - IntegrityError on a duplicate (organization_id, sku, location_id).
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TrackedBase, UUIDString


class InventoryItemModel(TrackedBase):
    """
    One stocked item at one location.

    Non-goals:
        - Does NOT store value; value is derived from the item's cost layers.
    """

    __tablename__ = "inventory_items"

    __table_args__ = (
        UniqueConstraint(
            "organization_id", "sku", "location_id", name="uq_inventory_item_org_sku_location",
        ),
        Index("idx_inventory_item_org", "organization_id"),
    )

    organization_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    sku: Mapped[str] = mapped_column(String(100), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    location_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    quantity_on_hand: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    quantity_allocated: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    reorder_point: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    max_stock_level: Mapped[Decimal | None] = mapped_column(Numeric(38, 9), nullable=True)

    economic_order_quantity: Mapped[Decimal | None] = mapped_column(Numeric(38, 9), nullable=True)

    average_daily_demand: Mapped[Decimal] = mapped_column(
        Numeric(38, 9), nullable=False, default=Decimal("0"),
    )

    unit_cost_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    @property
    def quantity_available(self) -> Decimal:
        return self.quantity_on_hand - self.quantity_allocated

    def __repr__(self) -> str:
        return (
            f"<InventoryItem {self.id}: sku={self.sku} "
            f"on_hand={self.quantity_on_hand} allocated={self.quantity_allocated}>"
        )
