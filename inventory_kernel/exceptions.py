"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers must be able to tell "item does not exist" from "not enough stock"
without parsing message strings. Every error therefore has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

Example:
    try:
        service.issue_fifo(inventory_id, Decimal("15"))
    except InsufficientInventoryError as e:
        api_response(code=e.code, available=e.available, requested=e.requested)

Pure costing engines do NOT raise these. Shortfalls and zero quantities are
reported as fields on the engine results; only the service layer turns them
into errors, according to the active CostingPolicy.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- InventoryError
    |   +-- InventoryItemNotFoundError
    |   +-- InsufficientInventoryError
    |
    +-- CostLayerError
    |   +-- InvalidCostLayerError
    |
    +-- CurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Inventory       | INVENTORY_ITEM_NOT_FOUND    | Inventory record doesn't exist for org
                | INSUFFICIENT_INVENTORY      | Issue exceeds layers, negatives disallowed
----------------|-----------------------------|-----------------------------------------
Cost layer      | INVALID_COST_LAYER          | Non-positive quantity / negative cost
----------------|-----------------------------|-----------------------------------------
Currency        | CURRENCY_MISMATCH           | Layer currency differs from item currency
----------------|-----------------------------|-----------------------------------------
Configuration   | CONFIGURATION_ERROR         | Invalid costing policy value
"""

from __future__ import annotations

from typing import Any


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses carry a ``code`` class attribute and an HTTP-style
    ``status_code`` used by ``to_error_payload``.
    """

    code: str = "INVENTORY_KERNEL_ERROR"
    status_code: int = 500


# Inventory-related exceptions


class InventoryError(InventoryKernelError):
    """Base exception for inventory item errors."""

    code: str = "INVENTORY_ERROR"
    status_code: int = 400


class InventoryItemNotFoundError(InventoryError):
    """Inventory item with given ID was not found."""

    code: str = "INVENTORY_ITEM_NOT_FOUND"
    status_code: int = 404

    def __init__(self, inventory_id: str):
        self.inventory_id = inventory_id
        super().__init__(f"Inventory item not found: {inventory_id}")


class InsufficientInventoryError(InventoryError):
    """
    Requested issue quantity exceeds what the cost layers hold.

    Raised by the service layer only when the active policy disallows
    negative inventory. The engine result that triggered it is reported
    through ``shortfall``.
    """

    code: str = "INSUFFICIENT_INVENTORY"
    status_code: int = 409

    def __init__(self, inventory_id: str, requested: str, available: str, shortfall: str):
        self.inventory_id = inventory_id
        self.requested = requested
        self.available = available
        self.shortfall = shortfall
        super().__init__(
            f"Insufficient inventory for {inventory_id}: requested {requested}, "
            f"only {available} available in cost layers"
        )


# Cost layer exceptions


class CostLayerError(InventoryKernelError):
    """Base exception for cost layer errors."""

    code: str = "COST_LAYER_ERROR"
    status_code: int = 400


class InvalidCostLayerError(CostLayerError):
    """Cost layer values violate receipt rules."""

    code: str = "INVALID_COST_LAYER"

    def __init__(self, inventory_id: str, reason: str):
        self.inventory_id = inventory_id
        self.reason = reason
        super().__init__(f"Invalid cost layer for {inventory_id}: {reason}")


# Currency exceptions


class CurrencyError(InventoryKernelError):
    """Base exception for currency errors."""

    code: str = "CURRENCY_ERROR"
    status_code: int = 400


class CurrencyMismatchError(CurrencyError):
    """Attempted operation on mismatched currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, currency1: str, currency2: str):
        self.currency1 = currency1
        self.currency2 = currency2
        super().__init__(f"Currency mismatch: {currency1} vs {currency2}")


# Configuration exceptions


class ConfigurationError(InventoryKernelError):
    """Costing policy failed validation."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for '{field}': {reason}")


# ---------------------------------------------------------------------------
# Error normalization
# ---------------------------------------------------------------------------

_STATUS_MESSAGES: dict[int, str] = {
    400: "The request could not be processed. Please check your input.",
    404: "The requested item could not be found.",
    409: "The request conflicts with current stock levels.",
    500: "An unexpected error occurred. Please try again.",
}


def user_message_for_status(status_code: int) -> str:
    """Map a status code to a user-facing message."""
    return _STATUS_MESSAGES.get(status_code, _STATUS_MESSAGES[500])


def to_error_payload(exc: BaseException) -> dict[str, Any]:
    """
    Normalize any exception to ``{message, code, status_code}``.

    Kernel errors keep their own code and status; ``ValueError`` maps to a
    400 validation error; everything else is an opaque 500.
    """
    if isinstance(exc, InventoryKernelError):
        return {
            "message": str(exc),
            "code": exc.code,
            "status_code": exc.status_code,
        }
    if isinstance(exc, ValueError):
        return {
            "message": str(exc),
            "code": "VALIDATION_ERROR",
            "status_code": 400,
        }
    return {
        "message": user_message_for_status(500),
        "code": "INTERNAL_ERROR",
        "status_code": 500,
    }
