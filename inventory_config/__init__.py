"""
inventory_config -- single public entrypoint for costing policy.

Responsibility:
    Provides the ONLY way to obtain costing policy at runtime through
    ``get_active_policy()``.  Services receive the returned
    ``CostingPolicy``; no other component reads policy files or the
    ``INVENTORY_CONFIG_DIR`` environment variable.

Architecture position:
    Configuration -- YAML-driven policy.  Sits above ``inventory_kernel``
    and below ``inventory_services``.  Engines take plain parameters and
    never import from this package.

Invariants enforced:
    - Single entrypoint: all runtime policy flows through ``get_active_policy()``.
    - An organization file ``<organization_id>.yaml`` replaces ``default.yaml``
      entirely; there is no key-level merge.
    - Deterministic checksum: the same YAML document always yields the
      same policy checksum.

Failure modes:
    - ``FileNotFoundError`` -- neither the organization file nor
      ``default.yaml`` exists in the policy directory.
    - ``ConfigurationError`` -- invalid or unknown policy values.
    - ``yaml.YAMLError`` -- malformed YAML.

Audit relevance:
    Every successful ``get_active_policy()`` call emits an
    ``INVENTORY_CONFIG_TRACE`` log entry with the policy id, version,
    checksum and source file, tying each costing decision back to the
    policy that governed it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from inventory_config.loader import load_policy_file
from inventory_config.schema import AgingPolicy, CostingPolicy, ReplenishmentPolicy

_logger = logging.getLogger("inventory_kernel.config")

# Default policy sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

CONFIG_DIR_ENV = "INVENTORY_CONFIG_DIR"


def get_active_policy(
    organization_id: str | None = None,
    config_dir: Path | None = None,
) -> CostingPolicy:
    """The ONLY public policy entrypoint.

    Lookup order for the directory: ``config_dir`` argument, then the
    ``INVENTORY_CONFIG_DIR`` environment variable, then the packaged
    ``inventory_config/sets``.  Within it, ``<organization_id>.yaml`` is
    used when present, otherwise ``default.yaml``.

    Raises:
        FileNotFoundError: If no policy file is found.
        ConfigurationError: If the policy fails validation.
    """
    sets_dir = _resolve_dir(config_dir)
    path = _find_policy_file(sets_dir, organization_id)
    policy = load_policy_file(path)

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "policy_id": policy.policy_id,
            "policy_version": policy.version,
            "checksum": policy.checksum,
            "source": str(path),
            "requested_organization_id": organization_id,
            "valuation_currency": policy.valuation_currency,
            "allow_negative_inventory": policy.allow_negative_inventory,
        },
    )
    return policy


def _resolve_dir(config_dir: Path | None) -> Path:
    if config_dir is not None:
        return Path(config_dir)
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return _DEFAULT_CONFIG_DIR


def _find_policy_file(sets_dir: Path, organization_id: str | None) -> Path:
    if not sets_dir.is_dir():
        raise FileNotFoundError(f"Policy directory not found: {sets_dir}")
    if organization_id:
        candidate = sets_dir / f"{organization_id}.yaml"
        if candidate.is_file():
            return candidate
    default = sets_dir / "default.yaml"
    if not default.is_file():
        raise FileNotFoundError(f"No default.yaml in policy directory: {sets_dir}")
    return default


__all__ = [
    "AgingPolicy",
    "CostingPolicy",
    "ReplenishmentPolicy",
    "get_active_policy",
]
