"""
inventory_engines.valuation.cost_layer -- Cost layer domain objects.

Responsibility:
    Define immutable value objects for inventory cost layers, per-layer
    consumption details, and FIFO issue results.  These model the flow of
    cost from goods receipt to cost of goods sold.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain (Money) and the kernel logger.
    Persistence lives in inventory_kernel.models.cost_layer; the stateful
    ValuationService lives in inventory_services/.

Invariants enforced:
    - Layer quantities: 0 <= quantity_remaining <= quantity_received and
      quantity_received > 0, checked in CostLayer.__post_init__.
    - Non-negative cost: unit_cost must not be negative.
    - Replay safety: all value objects are frozen dataclasses.  Consumption
      returns new layers via ``with_remaining``; nothing is mutated or deleted.

Failure modes:
    - ValueError from CostLayer.__post_init__ on invariant violation.  This is
      a data-model error, distinct from shortfall, which is a reported value.
    - Division-by-zero safe: average_unit_cost returns Money.zero when nothing
      was issued.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from inventory_kernel.domain.values import Money
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.cost_layer")


class LayerReference(str, Enum):
    """What created a cost layer."""

    PURCHASE_ORDER = "purchase_order"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"


def to_quantity(value: Decimal | int | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise ValueError(f"Quantity must not be float: {value!r}")
    return Decimal(str(value))


@dataclass(frozen=True, slots=True)
class CostLayer:
    """
    Immutable record of one inventory receipt and how much of it remains.

    A layer is created on goods receipt and decremented on each FIFO
    consumption.  Depleted layers are kept for audit and valuation history.
    """

    layer_id: UUID
    received_at: datetime
    quantity_received: Decimal
    quantity_remaining: Decimal
    unit_cost: Money
    reference_type: LayerReference | None = None
    reference_id: UUID | None = None
    expiry_date: date | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity_received", to_quantity(self.quantity_received))
        object.__setattr__(self, "quantity_remaining", to_quantity(self.quantity_remaining))

        if self.quantity_received <= 0:
            raise ValueError(
                f"Layer quantity_received must be positive, got {self.quantity_received}"
            )
        if self.quantity_remaining < 0:
            raise ValueError(
                f"Layer quantity_remaining cannot be negative, got {self.quantity_remaining}"
            )
        if self.quantity_remaining > self.quantity_received:
            raise ValueError(
                f"Layer quantity_remaining ({self.quantity_remaining}) exceeds "
                f"quantity_received ({self.quantity_received})"
            )
        if self.unit_cost.is_negative:
            raise ValueError(f"Layer unit_cost cannot be negative, got {self.unit_cost}")

    @classmethod
    def create(
        cls,
        received_at: datetime,
        quantity: Decimal | int | str,
        unit_cost: Money,
        layer_id: UUID | None = None,
        quantity_remaining: Decimal | int | str | None = None,
        reference_type: LayerReference | None = None,
        reference_id: UUID | None = None,
        expiry_date: date | None = None,
    ) -> CostLayer:
        """Factory for a receipt layer; remaining defaults to the full quantity.

        Raises:
            ValueError: If quantities or cost violate layer invariants.
        """
        received = to_quantity(quantity)
        remaining = received if quantity_remaining is None else to_quantity(quantity_remaining)
        layer = cls(
            layer_id=layer_id or uuid4(),
            received_at=received_at,
            quantity_received=received,
            quantity_remaining=remaining,
            unit_cost=unit_cost,
            reference_type=reference_type,
            reference_id=reference_id,
            expiry_date=expiry_date,
        )
        logger.debug("cost_layer_created", extra={
            "layer_id": str(layer.layer_id),
            "quantity_received": str(received),
            "unit_cost": str(unit_cost.amount),
            "currency": unit_cost.currency.code,
            "received_at": received_at.isoformat(),
        })
        return layer

    @property
    def currency(self) -> str:
        return self.unit_cost.currency.code

    @property
    def remaining_value(self) -> Money:
        """Value still held in this layer."""
        return self.unit_cost * self.quantity_remaining

    @property
    def consumed_quantity(self) -> Decimal:
        return self.quantity_received - self.quantity_remaining

    @property
    def is_depleted(self) -> bool:
        return self.quantity_remaining <= 0

    @property
    def is_available(self) -> bool:
        return self.quantity_remaining > 0

    def with_remaining(self, quantity_remaining: Decimal) -> CostLayer:
        """Return a copy of this layer with a new remaining quantity."""
        return replace(self, quantity_remaining=quantity_remaining)


@dataclass(frozen=True, slots=True)
class LayerConsumption:
    """Detail of consumption from a single cost layer."""

    layer_id: UUID
    received_at: datetime
    quantity_consumed: Decimal
    unit_cost: Money
    cost_consumed: Money
    remaining_in_layer: Decimal

    @classmethod
    def create(cls, layer: CostLayer, quantity_consumed: Decimal) -> LayerConsumption:
        return cls(
            layer_id=layer.layer_id,
            received_at=layer.received_at,
            quantity_consumed=quantity_consumed,
            unit_cost=layer.unit_cost,
            cost_consumed=layer.unit_cost * quantity_consumed,
            remaining_in_layer=layer.quantity_remaining - quantity_consumed,
        )


@dataclass(frozen=True, slots=True)
class FIFOIssueResult:
    """
    Result of issuing inventory from cost layers oldest-first.

    Contains:
    - ``layers``: every layer (consumed or not) in FIFO order, with updated
      remaining quantities, so callers can replace the stored set atomically
    - ``consumptions``: one entry per layer actually drawn from
    - ``shortfall``: quantity requested that no layer could supply
    """

    requested_quantity: Decimal
    quantity_issued: Decimal
    shortfall: Decimal
    total_cost: Money
    layers: tuple[CostLayer, ...]
    consumptions: tuple[LayerConsumption, ...]

    @property
    def is_fully_satisfied(self) -> bool:
        return self.shortfall == 0

    @property
    def layer_count(self) -> int:
        """Number of layers drawn from."""
        return len(self.consumptions)

    @property
    def remaining_quantity(self) -> Decimal:
        return sum((layer.quantity_remaining for layer in self.layers), Decimal("0"))

    @property
    def average_unit_cost(self) -> Money:
        """Weighted average unit cost of the issued quantity."""
        if self.quantity_issued == 0:
            return Money.zero(self.total_cost.currency)
        return self.total_cost / self.quantity_issued
