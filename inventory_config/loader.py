"""
Policy Loader (``inventory_config.loader``).

Responsibility
--------------
Loads YAML policy files and parses them into the frozen
``inventory_config.schema`` dataclasses.  Runtime callers go through
``inventory_config.get_active_policy()``; the loader is its internal
tooling.

Invariants enforced
-------------------
* Numeric values are parsed into ``Decimal`` via ``str()``, so YAML floats
  such as ``0.25`` become ``Decimal("0.25")`` exactly.
* Unknown keys are rejected with ``ConfigurationError``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  parsed document.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid or unknown values  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import AgingPolicy, CostingPolicy, ReplenishmentPolicy
from inventory_kernel.exceptions import ConfigurationError

_TOP_LEVEL_KEYS = {
    "policy_id",
    "version",
    "organization_id",
    "valuation_currency",
    "allow_negative_inventory",
    "fallback_unit_cost",
    "replenishment",
    "aging",
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "policy document must be a mapping")
    return data


def _decimal(data: dict[str, Any], key: str, default: Decimal) -> Decimal:
    if key not in data:
        return default
    value = data[key]
    if isinstance(value, bool):
        raise ConfigurationError(key, f"expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigurationError(key, f"expected a number, got {value!r}") from e


def _int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(key, f"expected an integer, got {value!r}")
    return value


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(key, "expected a mapping")
    return section


def _reject_unknown(data: dict[str, Any], allowed: set[str], where: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigurationError(where, f"unknown keys: {', '.join(unknown)}")


def parse_replenishment(data: dict[str, Any]) -> ReplenishmentPolicy:
    defaults = ReplenishmentPolicy()
    _reject_unknown(data, set(ReplenishmentPolicy.__dataclass_fields__), "replenishment")
    return ReplenishmentPolicy(
        ordering_cost=_decimal(data, "ordering_cost", defaults.ordering_cost),
        holding_cost_percent=_decimal(data, "holding_cost_percent", defaults.holding_cost_percent),
        default_service_level=_decimal(
            data, "default_service_level", defaults.default_service_level,
        ),
        default_lead_time_days=_int(data, "default_lead_time_days", defaults.default_lead_time_days),
        min_history_days=_int(data, "min_history_days", defaults.min_history_days),
        advisory_horizon_days=_int(data, "advisory_horizon_days", defaults.advisory_horizon_days),
        recommended_quantity_multiplier=_decimal(
            data, "recommended_quantity_multiplier", defaults.recommended_quantity_multiplier,
        ),
    )


def parse_aging(data: dict[str, Any]) -> AgingPolicy:
    _reject_unknown(data, set(AgingPolicy.__dataclass_fields__), "aging")
    return AgingPolicy(
        recent_share_threshold=_decimal(
            data, "recent_share_threshold", AgingPolicy().recent_share_threshold,
        ),
    )


def parse_policy(data: dict[str, Any], checksum: str = "") -> CostingPolicy:
    """
    Parse a policy document into a CostingPolicy.

    Missing keys take the schema defaults.

    Raises:
        ConfigurationError: on unknown keys or invalid values.
    """
    _reject_unknown(data, _TOP_LEVEL_KEYS, "policy")
    allow_negative = data.get("allow_negative_inventory", False)
    if not isinstance(allow_negative, bool):
        raise ConfigurationError("allow_negative_inventory", "expected true or false")
    organization_id = data.get("organization_id")

    return CostingPolicy(
        policy_id=str(data.get("policy_id", "default")),
        version=_int(data, "version", 1),
        organization_id=str(organization_id) if organization_id is not None else None,
        valuation_currency=str(data.get("valuation_currency", "USD")).upper(),
        allow_negative_inventory=allow_negative,
        fallback_unit_cost=_decimal(data, "fallback_unit_cost", Decimal("10")),
        replenishment=parse_replenishment(_section(data, "replenishment")),
        aging=parse_aging(_section(data, "aging")),
        checksum=checksum,
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def load_policy_file(path: Path) -> CostingPolicy:
    """Load, checksum and parse one policy file."""
    data = load_yaml_file(path)
    return parse_policy(data, checksum=compute_checksum(data))
