"""
inventory_engines.valuation.fifo -- First-in, first-out layer consumption.

Responsibility:
    Walk an item's cost layers oldest-first, drawing the requested issue
    quantity and accumulating cost of goods sold.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Conservation: sum(remaining after) == sum(remaining before) - issued,
      where issued == requested - shortfall.
    - Oldest first: a layer is only drawn from once every earlier layer
      (by received_at) is depleted.
    - All layers are returned, consumed or not, in FIFO order.

Failure modes:
    - None for business conditions.  Insufficient stock is reported as
      ``shortfall``; a negative request issues nothing and logs a warning.
    - ValueError only if layers carry different currencies (Money refuses to
      add across currencies).
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.cost_layer import (
    CostLayer,
    FIFOIssueResult,
    LayerConsumption,
    to_quantity,
)
from inventory_kernel.domain.values import Money
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.fifo")

ZERO = Decimal("0")


def sort_layers_fifo(layers: Sequence[CostLayer]) -> list[CostLayer]:
    """Order layers by receipt time, oldest first (stable for equal times)."""
    return sorted(layers, key=lambda layer: layer.received_at)


@traced_engine("fifo", "1.0", fingerprint_fields=("quantity",))
def consume_fifo(
    layers: Sequence[CostLayer],
    quantity: Decimal | int | str,
    currency: str = "USD",
) -> FIFOIssueResult:
    """
    Issue ``quantity`` units from ``layers`` oldest-first.

    Args:
        layers: All cost layers for one inventory item, in any order.
        quantity: Units to issue; expected to be >= 0.
        currency: Currency for the zero cost when there are no layers.

    Returns:
        FIFOIssueResult with total cost, every layer's updated snapshot,
        per-layer consumption detail and any shortfall.
    """
    requested = to_quantity(quantity)
    ordered = sort_layers_fifo(layers)
    result_currency = ordered[0].currency if ordered else currency

    if requested < 0:
        logger.warning("fifo_negative_issue_ignored", extra={
            "requested_quantity": str(requested),
        })
        return FIFOIssueResult(
            requested_quantity=requested,
            quantity_issued=ZERO,
            shortfall=ZERO,
            total_cost=Money.zero(result_currency),
            layers=tuple(ordered),
            consumptions=(),
        )

    outstanding = requested
    total_cost = Money.zero(result_currency)
    updated: list[CostLayer] = []
    consumptions: list[LayerConsumption] = []

    for layer in ordered:
        if outstanding <= 0 or layer.quantity_remaining <= 0:
            updated.append(layer)
            continue

        take = min(outstanding, layer.quantity_remaining)
        consumption = LayerConsumption.create(layer, take)
        consumptions.append(consumption)
        total_cost = total_cost + consumption.cost_consumed
        outstanding -= take
        updated.append(layer.with_remaining(layer.quantity_remaining - take))

    shortfall = outstanding if outstanding > 0 else ZERO
    issued = requested - shortfall

    if shortfall > 0:
        logger.info("fifo_shortfall", extra={
            "requested_quantity": str(requested),
            "quantity_issued": str(issued),
            "shortfall": str(shortfall),
        })

    logger.debug("fifo_issue_calculated", extra={
        "requested_quantity": str(requested),
        "layers_consumed": len(consumptions),
        "total_cost": str(total_cost.amount),
        "currency": result_currency,
    })

    return FIFOIssueResult(
        requested_quantity=requested,
        quantity_issued=issued,
        shortfall=shortfall,
        total_cost=total_cost,
        layers=tuple(updated),
        consumptions=tuple(consumptions),
    )
