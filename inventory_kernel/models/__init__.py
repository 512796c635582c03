"""ORM models for the inventory kernel."""

from inventory_kernel.models.cost_layer import CostLayerModel
from inventory_kernel.models.inventory_item import InventoryItemModel

__all__ = [
    "CostLayerModel",
    "InventoryItemModel",
]
