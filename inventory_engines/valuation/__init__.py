"""
Valuation - Pure cost layer domain objects and FIFO costing.

The stateful ValuationService lives in inventory_services.valuation_service.
"""

from inventory_engines.valuation.calculator import (
    ItemValuation,
    total_inventory_value,
    total_remaining_quantity,
    value_layers,
    weighted_average_cost,
)
from inventory_engines.valuation.cost_layer import (
    CostLayer,
    FIFOIssueResult,
    LayerConsumption,
    LayerReference,
)
from inventory_engines.valuation.fifo import consume_fifo, sort_layers_fifo

__all__ = [
    "CostLayer",
    "LayerConsumption",
    "LayerReference",
    "FIFOIssueResult",
    "ItemValuation",
    "consume_fifo",
    "sort_layers_fifo",
    "total_inventory_value",
    "total_remaining_quantity",
    "value_layers",
    "weighted_average_cost",
]
