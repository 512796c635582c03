"""
inventory_engines.valuation.calculator -- Weighted-average cost and stock value.

Pure functions over an item's cost layers.  Remaining quantity and value are
summed across every layer; depleted layers contribute zero.  Empty or fully
depleted sets value at zero rather than dividing by zero.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.cost_layer import CostLayer
from inventory_kernel.domain.values import Money, sum_money


@dataclass(frozen=True, slots=True)
class ItemValuation:
    """Point-in-time valuation of one item's layer set."""

    total_quantity: Decimal
    total_value: Money
    weighted_average_cost: Money
    layer_count: int
    active_layer_count: int


def _currency_of(layers: Sequence[CostLayer], default: str) -> str:
    return layers[0].currency if layers else default


def total_inventory_value(layers: Sequence[CostLayer], currency: str = "USD") -> Money:
    """Sum of ``quantity_remaining * unit_cost`` across all layers."""
    return sum_money(
        (layer.remaining_value for layer in layers),
        _currency_of(layers, currency),
    )


def total_remaining_quantity(layers: Sequence[CostLayer]) -> Decimal:
    return sum((layer.quantity_remaining for layer in layers), Decimal("0"))


def weighted_average_cost(layers: Sequence[CostLayer], currency: str = "USD") -> Money:
    """
    Total remaining value divided by total remaining quantity.

    Returns Money.zero when no quantity remains.
    """
    quantity = total_remaining_quantity(layers)
    if quantity == 0:
        return Money.zero(_currency_of(layers, currency))
    return total_inventory_value(layers, currency) / quantity


@traced_engine("valuation", "1.0")
def value_layers(layers: Sequence[CostLayer], currency: str = "USD") -> ItemValuation:
    """Full valuation summary for one item."""
    return ItemValuation(
        total_quantity=total_remaining_quantity(layers),
        total_value=total_inventory_value(layers, currency),
        weighted_average_cost=weighted_average_cost(layers, currency),
        layer_count=len(layers),
        active_layer_count=sum(1 for layer in layers if layer.is_available),
    )
