#!/usr/bin/env python3
"""
Inventory costing report for one item described in a YAML file.

Prints valuation, stock status, aging and reorder analysis, and optionally
simulates a FIFO issue.  Nothing is written anywhere.

Input file:

    currency: USD
    as_of: 2024-06-30
    item:
      on_hand: 25
      allocated: 5
      reorder_point: 10
      max_stock: 100          # optional
      avg_daily_demand: 2
      eoq: 40                 # optional
    layers:
      - received_at: 2024-01-10
        quantity: 10
        remaining: 10         # optional, defaults to quantity
        unit_cost: "5.00"

Usage:
    python3 scripts/inventory_report.py item.yaml
    python3 scripts/inventory_report.py item.yaml --issue 15
    python3 scripts/inventory_report.py item.yaml --json
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from inventory_engines import (  # noqa: E402
    CostLayer,
    InventoryAgingAnalyzer,
    analyze_reorder,
    consume_fifo,
    format_days,
    format_money,
    format_quantity,
    get_stock_status,
    value_layers,
)
from inventory_kernel.domain.values import Money  # noqa: E402

W = 72


def banner(title: str) -> None:
    print()
    print("=" * W)
    print(f"  {title}")
    print("=" * W)


def section(title: str) -> None:
    print()
    print(f"--- {title} ---")
    print()


def field(name: str, value, indent: int = 4) -> None:
    print(f"{' ' * indent}{name}: {value}")


# =============================================================================
# Input parsing
# =============================================================================


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def _quantity_arg(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: '{value}'") from None


def _date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return _timestamp(datetime.fromisoformat(str(value)))


def parse_layers(data: dict[str, Any]) -> list[CostLayer]:
    currency = data.get("currency", "USD")
    layers = []
    for entry in data.get("layers") or []:
        remaining = entry.get("remaining")
        layers.append(CostLayer.create(
            received_at=_timestamp(entry["received_at"]),
            quantity=_decimal(entry["quantity"]),
            quantity_remaining=_decimal(remaining) if remaining is not None else None,
            unit_cost=Money.of(_decimal(entry["unit_cost"]), currency),
        ))
    return layers


# =============================================================================
# Report
# =============================================================================


def build_report(data: dict[str, Any], issue: Decimal | None = None) -> dict[str, Any]:
    """Run every engine over the item and return a JSON-ready dict."""
    currency = data.get("currency", "USD")
    as_of = _date(data["as_of"]) if data.get("as_of") else date.today()
    item = data.get("item") or {}
    layers = parse_layers(data)

    valuation = value_layers(layers, currency=currency)
    on_hand = _decimal(item.get("on_hand", valuation.total_quantity))
    allocated = _decimal(item.get("allocated", 0))
    reorder_point = _decimal(item.get("reorder_point", 0))
    max_stock = item.get("max_stock")
    eoq = item.get("eoq")

    status = get_stock_status(
        on_hand, allocated, reorder_point,
        _decimal(max_stock) if max_stock is not None else None,
    )
    reorder = analyze_reorder(
        on_hand, allocated, reorder_point,
        _decimal(item.get("avg_daily_demand", 0)),
        eoq=_decimal(eoq) if eoq is not None else None,
    )
    aging = InventoryAgingAnalyzer().analyze(layers, as_of, currency=currency)

    report: dict[str, Any] = {
        "currency": currency,
        "as_of": aging.as_of.isoformat(),
        "valuation": {
            "total_quantity": str(valuation.total_quantity),
            "total_value": str(valuation.total_value.round().amount),
            "weighted_average_cost": str(valuation.weighted_average_cost.round().amount),
            "layer_count": valuation.layer_count,
            "active_layer_count": valuation.active_layer_count,
        },
        "stock_status": {
            "state": status.state.value,
            "severity": status.severity.value,
            "message": status.message,
        },
        "aging": {
            "buckets": [
                {
                    "label": s.bucket.label,
                    "risk_tier": s.bucket.risk_tier.value,
                    "item_count": s.item_count,
                    "total_quantity": str(s.total_quantity),
                    "total_value": str(s.total_value.round().amount),
                }
                for s in aging.buckets
            ],
            "average_age_days": aging.average_age_days,
            "recommendations": [
                {"type": r.type, "priority": r.priority, "message": r.message}
                for r in aging.recommendations
            ],
        },
        "reorder": {
            "should_reorder": reorder.should_reorder,
            "urgency": reorder.urgency.value,
            "available_quantity": str(reorder.available_quantity),
            "days_until_stockout": (
                str(reorder.days_until_stockout)
                if reorder.days_until_stockout is not None else None
            ),
            "recommended_quantity": str(reorder.recommended_quantity),
            "message": reorder.message,
        },
    }

    if issue is not None:
        result = consume_fifo(layers, issue, currency=currency)
        report["fifo_issue"] = {
            "requested_quantity": str(result.requested_quantity),
            "quantity_issued": str(result.quantity_issued),
            "shortfall": str(result.shortfall),
            "total_cost": str(result.total_cost.round().amount),
            "layers_consumed": result.layer_count,
        }
    return report


def print_report(data: dict[str, Any], issue: Decimal | None) -> None:
    currency = data.get("currency", "USD")
    layers = parse_layers(data)
    report = build_report(data, issue)

    banner(f"INVENTORY REPORT as of {report['as_of']}")

    section("Valuation")
    valuation = value_layers(layers, currency=currency)
    field("quantity", format_quantity(valuation.total_quantity))
    field("value", format_money(valuation.total_value))
    field("weighted average cost", format_money(valuation.weighted_average_cost))
    field("layers", f"{valuation.active_layer_count} active of {valuation.layer_count}")

    section("Stock status")
    field(report["stock_status"]["state"], report["stock_status"]["message"])

    section("Aging")
    for bucket in report["aging"]["buckets"]:
        field(
            f"{bucket['label']:<12} ({bucket['risk_tier']})",
            f"{bucket['item_count']} layers, qty {bucket['total_quantity']}, "
            f"value {bucket['total_value']}",
        )
    field("average age", format_days(report["aging"]["average_age_days"]))
    for rec in report["aging"]["recommendations"]:
        field(f"[{rec['priority']}] {rec['type']}", rec["message"])

    section("Reorder")
    field("urgency", report["reorder"]["urgency"])
    field("message", report["reorder"]["message"])

    if "fifo_issue" in report:
        section("Simulated FIFO issue")
        for key, value in report["fifo_issue"].items():
            field(key, value)

    banner("DONE")


# =============================================================================
# Main
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Costing report for an inventory item described in YAML.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/inventory_report.py item.yaml\n"
            "  python3 scripts/inventory_report.py item.yaml --issue 15 --json\n"
        ),
    )
    parser.add_argument("path", type=Path, help="YAML file describing the item and its layers")
    parser.add_argument(
        "--issue", type=_quantity_arg, default=None,
        help="Simulate issuing this quantity FIFO",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Output JSON instead of formatted text",
    )
    args = parser.parse_args(argv)

    # Suppress library logging
    logging.disable(logging.CRITICAL)

    try:
        with open(args.path) as f:
            data = yaml.safe_load(f) or {}
        if args.json:
            print(json.dumps(build_report(data, args.issue), indent=2, default=str))
        else:
            print_report(data, args.issue)
        return 0
    except (OSError, yaml.YAMLError, KeyError, ValueError, InvalidOperation) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        logging.disable(logging.NOTSET)


if __name__ == "__main__":
    sys.exit(main())
