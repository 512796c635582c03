"""Tests for scripts/inventory_report.py."""

import importlib.util
import json
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "inventory_report.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("inventory_report", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


report_script = _load_script()

ITEM = {
    "currency": "USD",
    "as_of": "2024-06-30",
    "item": {
        "on_hand": 30,
        "allocated": 0,
        "reorder_point": 10,
        "avg_daily_demand": 2,
    },
    "layers": [
        {"received_at": "2024-03-01", "quantity": 20, "unit_cost": "7.00"},
        {"received_at": "2024-01-10", "quantity": 10, "unit_cost": "5.00"},
    ],
}


@pytest.fixture
def item_file(tmp_path):
    path = tmp_path / "item.yaml"
    path.write_text(yaml.safe_dump(ITEM))
    return path


class TestBuildReport:

    def test_sections(self):
        data = yaml.safe_load(yaml.safe_dump(ITEM))

        report = report_script.build_report(data)

        assert report["valuation"]["total_value"] == "190.00"
        assert report["valuation"]["weighted_average_cost"] == "6.33"
        assert report["stock_status"]["state"] == "in_stock"
        assert report["reorder"]["urgency"] == "none"
        assert report["aging"]["buckets"][-1]["item_count"] == 2
        assert [r["type"] for r in report["aging"]["recommendations"]] == [
            "slow_moving",
            "turn_rate",
        ]
        assert "fifo_issue" not in report

    def test_simulated_issue(self):
        report = report_script.build_report(ITEM, issue=Decimal("15"))

        assert report["fifo_issue"]["total_cost"] == "85.00"
        assert report["fifo_issue"]["layers_consumed"] == 2
        assert Decimal(report["fifo_issue"]["shortfall"]) == 0

    def test_partially_consumed_layer(self):
        data = dict(ITEM, layers=[
            {"received_at": "2024-01-10", "quantity": 10, "remaining": 4, "unit_cost": "5.00"},
        ])

        layers = report_script.parse_layers(data)

        assert layers[0].quantity_remaining == Decimal("4")
        assert layers[0].received_at.tzinfo is not None


class TestMain:

    def test_json_output(self, item_file, capsys):
        exit_code = report_script.main([str(item_file), "--json", "--issue", "35"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["as_of"] == "2024-06-30"
        assert Decimal(output["fifo_issue"]["shortfall"]) == Decimal("5")

    def test_text_output(self, item_file, capsys):
        exit_code = report_script.main([str(item_file)])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "INVENTORY REPORT as of 2024-06-30" in out
        assert "$190.00" in out
        assert "slow_moving" in out

    def test_missing_file(self, tmp_path, capsys):
        exit_code = report_script.main([str(tmp_path / "missing.yaml")])

        assert exit_code == 1
        assert "ERROR" in capsys.readouterr().err

    def test_invalid_layer(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(dict(ITEM, layers=[
            {"received_at": "2024-01-10", "quantity": 0, "unit_cost": "5.00"},
        ])))

        assert report_script.main([str(path)]) == 1

    def test_non_numeric_unit_cost(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(dict(ITEM, layers=[
            {"received_at": "2024-01-10", "quantity": 10, "unit_cost": "abc"},
        ])))

        assert report_script.main([str(path)]) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_non_numeric_issue_is_usage_error(self, item_file, capsys):
        with pytest.raises(SystemExit) as exc:
            report_script.main([str(item_file), "--issue", "lots"])

        assert exc.value.code == 2
        assert "not a number: 'lots'" in capsys.readouterr().err
