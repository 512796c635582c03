"""
Module: inventory_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    costing engines.  This is the canonical import surface for
    inventory_services and the report CLI.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain and the kernel logger.
    MUST NOT import inventory_services or inventory_config.

Invariants enforced:
    - Purity: engines never read the clock.  ``as_of`` dates are passed in.
    - Decimal-only arithmetic; floats are rejected at the boundary.
    - Business conditions (shortfall, zero stock, no demand) are reported
      in results, never raised.

Audit relevance:
    Engine entrypoints are wrapped with ``@traced_engine`` and emit
    INVENTORY_ENGINE_TRACE records (engine name, version, input
    fingerprint, duration).

Usage:
    from inventory_engines import consume_fifo, analyze_reorder
    from inventory_engines.aging import InventoryAgingAnalyzer
"""

from inventory_engines.aging import (
    INVENTORY_AGE_BUCKETS,
    AgeBucket,
    AgedLayer,
    AgingRecommendation,
    AgingReport,
    BucketSummary,
    InventoryAgingAnalyzer,
    RiskTier,
)
from inventory_engines.formatting import (
    format_days,
    format_money,
    format_percentage,
    format_quantity,
)
from inventory_engines.pricing import DiscountType, calculate_effective_price
from inventory_engines.reorder import (
    ReorderAnalysis,
    ReorderUrgency,
    analyze_reorder,
    rank_recommendations,
)
from inventory_engines.replenishment import (
    DemandStatistics,
    ReplenishmentPlan,
    calculate_eoq,
    calculate_reorder_point,
    calculate_safety_stock,
    plan_replenishment,
    z_score_for_service_level,
)
from inventory_engines.stock_status import (
    Severity,
    StockState,
    StockStatus,
    get_stock_status,
)
from inventory_engines.turnover import (
    TurnoverRating,
    TurnoverResult,
    calculate_turnover,
)
from inventory_engines.valuation import (
    CostLayer,
    FIFOIssueResult,
    ItemValuation,
    LayerConsumption,
    LayerReference,
    consume_fifo,
    sort_layers_fifo,
    total_inventory_value,
    value_layers,
    weighted_average_cost,
)

__all__ = [
    # Valuation
    "CostLayer",
    "LayerConsumption",
    "LayerReference",
    "FIFOIssueResult",
    "ItemValuation",
    "consume_fifo",
    "sort_layers_fifo",
    "total_inventory_value",
    "value_layers",
    "weighted_average_cost",
    # Stock status
    "StockState",
    "StockStatus",
    "Severity",
    "get_stock_status",
    # Aging
    "INVENTORY_AGE_BUCKETS",
    "AgeBucket",
    "AgedLayer",
    "AgingRecommendation",
    "AgingReport",
    "BucketSummary",
    "InventoryAgingAnalyzer",
    "RiskTier",
    # Reorder
    "ReorderAnalysis",
    "ReorderUrgency",
    "analyze_reorder",
    "rank_recommendations",
    # Replenishment
    "DemandStatistics",
    "ReplenishmentPlan",
    "calculate_eoq",
    "calculate_reorder_point",
    "calculate_safety_stock",
    "plan_replenishment",
    "z_score_for_service_level",
    # Turnover
    "TurnoverRating",
    "TurnoverResult",
    "calculate_turnover",
    # Pricing
    "DiscountType",
    "calculate_effective_price",
    # Formatting
    "format_days",
    "format_money",
    "format_percentage",
    "format_quantity",
]
