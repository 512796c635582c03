"""
Module: inventory_engines.stock_status
Responsibility:
    Classify an inventory position into in_stock / low_stock / out_of_stock /
    overstocked, each with a human-readable message and severity tag.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Check order: zero stock, then full allocation, then reorder point,
      then maximum stock.  An item with nothing on hand is always
      out_of_stock whatever its allocation or reorder point.

Failure modes:
    - None.  Every numeric input produces a status.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from inventory_engines.formatting import format_quantity
from inventory_engines.valuation.cost_layer import to_quantity


class StockState(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    OVERSTOCKED = "overstocked"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


@dataclass(frozen=True)
class StockStatus:
    """Classified stock position."""

    state: StockState
    message: str
    severity: Severity
    quantity_on_hand: Decimal
    quantity_allocated: Decimal

    @property
    def quantity_available(self) -> Decimal:
        return self.quantity_on_hand - self.quantity_allocated

    @property
    def needs_attention(self) -> bool:
        return self.severity in (Severity.ERROR, Severity.WARNING)


def get_stock_status(
    on_hand: Decimal | int | str,
    allocated: Decimal | int | str,
    reorder_point: Decimal | int | str,
    max_stock: Decimal | int | str | None = None,
) -> StockStatus:
    """
    Classify a stock position.

    Args:
        on_hand: Quantity physically on hand.
        allocated: Quantity reserved against orders.
        reorder_point: Level at or below which the item is low.
        max_stock: Optional ceiling above which the item is overstocked.
    """
    on_hand_q = to_quantity(on_hand)
    allocated_q = to_quantity(allocated)
    reorder_q = to_quantity(reorder_point)

    def _status(state: StockState, message: str, severity: Severity) -> StockStatus:
        return StockStatus(
            state=state,
            message=message,
            severity=severity,
            quantity_on_hand=on_hand_q,
            quantity_allocated=allocated_q,
        )

    if on_hand_q <= 0:
        return _status(StockState.OUT_OF_STOCK, "Out of stock", Severity.ERROR)

    if allocated_q >= on_hand_q:
        return _status(
            StockState.OUT_OF_STOCK,
            f"All {format_quantity(on_hand_q)} units on hand are allocated",
            Severity.ERROR,
        )

    if on_hand_q <= reorder_q:
        return _status(
            StockState.LOW_STOCK,
            f"Low stock: {format_quantity(on_hand_q)} on hand, "
            f"reorder point is {format_quantity(reorder_q)}",
            Severity.WARNING,
        )

    if max_stock is not None:
        max_q = to_quantity(max_stock)
        if on_hand_q > max_q:
            return _status(
                StockState.OVERSTOCKED,
                f"Overstocked: {format_quantity(on_hand_q)} on hand "
                f"exceeds maximum of {format_quantity(max_q)}",
                Severity.INFO,
            )

    return _status(StockState.IN_STOCK, "In stock", Severity.SUCCESS)
