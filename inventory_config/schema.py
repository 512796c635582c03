"""
Costing policy schema.

Frozen dataclasses that YAML policy files are parsed into.  The policy is
the only source of tunable costing and replenishment parameters; services
receive a ``CostingPolicy`` and never read files or environment variables
themselves.

Validation runs in ``__post_init__`` and raises ``ConfigurationError``
naming the offending field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from inventory_kernel.domain.currency import CurrencyRegistry
from inventory_kernel.exceptions import ConfigurationError

# ---------------------------------------------------------------------------
# Replenishment
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReplenishmentPolicy:
    """Parameters for safety stock, EOQ and reorder advice."""

    ordering_cost: Decimal = Decimal("50")
    holding_cost_percent: Decimal = Decimal("0.25")
    default_service_level: Decimal = Decimal("0.95")
    default_lead_time_days: int = 7
    min_history_days: int = 30
    advisory_horizon_days: int = 14
    recommended_quantity_multiplier: Decimal = Decimal("2")

    def __post_init__(self) -> None:
        if self.ordering_cost < 0:
            raise ConfigurationError("ordering_cost", "must be non-negative")
        if not Decimal("0") <= self.holding_cost_percent <= Decimal("1"):
            raise ConfigurationError("holding_cost_percent", "must be between 0 and 1")
        if not Decimal("0.5") <= self.default_service_level < Decimal("1"):
            raise ConfigurationError("default_service_level", "must be in [0.5, 1)")
        if self.default_lead_time_days < 0:
            raise ConfigurationError("default_lead_time_days", "must be non-negative")
        if self.min_history_days < 1:
            raise ConfigurationError("min_history_days", "must be at least 1")
        if self.advisory_horizon_days < 0:
            raise ConfigurationError("advisory_horizon_days", "must be non-negative")
        if self.recommended_quantity_multiplier <= 0:
            raise ConfigurationError("recommended_quantity_multiplier", "must be positive")


# ---------------------------------------------------------------------------
# Aging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AgingPolicy:
    """Thresholds for aging recommendations."""

    recent_share_threshold: Decimal = Decimal("30")  # percent of value

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.recent_share_threshold <= Decimal("100"):
            raise ConfigurationError("recent_share_threshold", "must be between 0 and 100")


# ---------------------------------------------------------------------------
# Top-level policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CostingPolicy:
    """
    Complete costing policy for one organization (or the default set).

    ``checksum`` is the SHA-256 of the source document; it is empty for
    policies built in code.
    """

    policy_id: str = "default"
    version: int = 1
    organization_id: str | None = None
    valuation_currency: str = "USD"
    allow_negative_inventory: bool = False
    fallback_unit_cost: Decimal = Decimal("10")
    replenishment: ReplenishmentPolicy = field(default_factory=ReplenishmentPolicy)
    aging: AgingPolicy = field(default_factory=AgingPolicy)
    checksum: str = ""

    def __post_init__(self) -> None:
        if not CurrencyRegistry.is_valid(self.valuation_currency):
            raise ConfigurationError(
                "valuation_currency", f"unknown currency code '{self.valuation_currency}'",
            )
        if self.fallback_unit_cost < 0:
            raise ConfigurationError("fallback_unit_cost", "must be non-negative")
        if self.version < 1:
            raise ConfigurationError("version", "must be at least 1")
