"""
inventory_engines.pricing -- Effective supplier price after discount.

Discount types:
    percentage  base * (1 - value / 100)
    fixed       base - value
    volume      same as percentage; ``quantity`` is accepted but not used
    none        base

The effective price is floored at zero.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from inventory_engines.valuation.cost_layer import to_quantity
from inventory_kernel.domain.values import Money
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.pricing")

HUNDRED = Decimal("100")


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    VOLUME = "volume"
    NONE = "none"


def calculate_effective_price(
    base_price: Money,
    discount_type: DiscountType | str,
    discount_value: Decimal | int | str = Decimal("0"),
    quantity: Decimal | int | str | None = None,
) -> Money:
    """
    Apply a discount to a base price.

    Raises:
        ValueError: If discount_type is unknown or discount_value is negative.
    """
    kind = DiscountType(discount_type)
    value = to_quantity(discount_value)
    if value < 0:
        raise ValueError(f"discount_value must be non-negative, got {value}")

    if kind is DiscountType.FIXED:
        price = base_price - Money(value, base_price.currency)
    elif kind in (DiscountType.PERCENTAGE, DiscountType.VOLUME):
        # TODO: apply quantity tiers for VOLUME once supplier price breaks are stored
        price = base_price * (1 - value / HUNDRED)
    else:
        price = base_price

    if price.is_negative:
        logger.debug("effective_price_floored", extra={
            "base_price": str(base_price.amount),
            "discount_type": kind.value,
            "discount_value": str(value),
        })
        price = Money.zero(base_price.currency)
    return price
