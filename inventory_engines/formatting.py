"""
Module: inventory_engines.formatting
Responsibility:
    Display formatting for costing results: money with currency symbol and
    precision, quantities without trailing zeros, day counts and percentages.

Architecture position:
    Engines -- pure helpers, zero I/O.  Used by aging recommendations and
    the report CLI.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from inventory_kernel.domain.values import Money


def format_money(money: Money, show_code: bool = False) -> str:
    """
    Format Money as e.g. ``$1,234.50`` (or ``CHF 1,234.50`` without a symbol).

    Rounded half-up to the currency's decimal places.
    """
    rounded = money.round()
    places = money.currency.decimal_places
    body = f"{abs(rounded.amount):,.{places}f}"
    symbol = money.currency.symbol
    text = f"{symbol}{body}" if symbol else f"{money.currency.code} {body}"
    if rounded.amount < 0:
        text = "-" + text
    if show_code and symbol:
        text = f"{text} {money.currency.code}"
    return text


def format_quantity(quantity: Decimal | int, unit: str | None = None) -> str:
    """Format a quantity with thousands separators and no trailing zeros."""
    value = Decimal(str(quantity)) if not isinstance(quantity, Decimal) else quantity
    if value == value.to_integral_value():
        text = f"{int(value):,}"
    else:
        text = f"{value.normalize():,f}"
    return f"{text} {unit}" if unit else text


def format_days(days: Decimal | int | None) -> str:
    """Format a day count, e.g. ``1 day``, ``2.5 days``; ``N/A`` when unknown."""
    if days is None:
        return "N/A"
    value = Decimal(str(days)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if value == value.to_integral_value():
        value = value.to_integral_value()
    label = "day" if value == 1 else "days"
    return f"{value} {label}"


def format_percentage(value: Decimal | int, places: int = 0) -> str:
    """Format a percentage value (already scaled to 0-100)."""
    quantum = Decimal("1") if places == 0 else Decimal("1").scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded}%"
