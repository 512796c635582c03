"""
Pytest fixtures for the inventory costing test suite.

Provides:
- Structured logging configured once per session, LogContext cleared per test
- ``captured_logs`` for asserting on emitted JSON log records
- A database session per test (SQLite in-memory by default), rolled back
  after each test
- Deterministic clock, default policy and item factory

Environment Variables:
- DATABASE_URL: database to run service tests against.  Defaults to an
  in-memory SQLite database; set a postgresql+psycopg:// URL to run
  against PostgreSQL.
"""

import json
import logging
import os
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from inventory_config.schema import CostingPolicy
from inventory_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from inventory_kernel.models.inventory_item import InventoryItemModel

DEFAULT_DATABASE_URL = "sqlite://"

TEST_NOW = datetime(2024, 6, 30, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            consume_fifo(layers, 5)
            logs = captured_logs()
            assert any(r["message"] == "INVENTORY_ENGINE_TRACE" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


def get_database_url() -> str:
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


@pytest.fixture(scope="session")
def db_engine():
    """Engine and tables created once per test session."""
    engine = init_engine_from_url(get_database_url())
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(db_engine):
    """Per-test session; everything is rolled back afterwards."""
    sess = get_session()
    yield sess
    sess.rollback()
    sess.close()


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(TEST_NOW)


@pytest.fixture
def policy() -> CostingPolicy:
    return CostingPolicy()


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def make_item(session, organization_id):
    """
    Factory for persisted inventory items.

    Usage::

        item = make_item(sku="WIDGET", reorder_point=10)
    """

    def _make(
        sku: str = "SKU-001",
        name: str = "Widget",
        quantity_on_hand: Decimal | int = 0,
        quantity_allocated: Decimal | int = 0,
        reorder_point: Decimal | int = 0,
        max_stock_level: Decimal | int | None = None,
        economic_order_quantity: Decimal | int | None = None,
        average_daily_demand: Decimal | int = 0,
        unit_cost_currency: str = "USD",
        org_id=None,
        location_id: str | None = None,
    ) -> InventoryItemModel:
        item = InventoryItemModel(
            organization_id=org_id or organization_id,
            sku=sku,
            name=name,
            location_id=location_id,
            quantity_on_hand=Decimal(quantity_on_hand),
            quantity_allocated=Decimal(quantity_allocated),
            reorder_point=Decimal(reorder_point),
            max_stock_level=Decimal(max_stock_level) if max_stock_level is not None else None,
            economic_order_quantity=(
                Decimal(economic_order_quantity) if economic_order_quantity is not None else None
            ),
            average_daily_demand=Decimal(average_daily_demand),
            unit_cost_currency=unit_cost_currency,
        )
        session.add(item)
        session.flush()
        return item

    return _make
