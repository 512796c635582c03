"""
Inventory services -- stateful orchestration over the costing engines.

Services receive a SQLAlchemy Session and a CostingPolicy via constructor
injection, flush but never commit, and delegate all arithmetic to
inventory_engines.
"""

from inventory_services.replenishment_service import (
    ReorderRecommendation,
    ReorderRecommendations,
    ReplenishmentService,
)
from inventory_services.valuation_service import ValuationService

__all__ = [
    "ReorderRecommendation",
    "ReorderRecommendations",
    "ReplenishmentService",
    "ValuationService",
]
