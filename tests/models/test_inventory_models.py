"""
Tests for the inventory ORM models and session handling.

Verifies:
- CostLayerModel <-> CostLayer conversion through the database
- CHECK and UNIQUE constraints
- session_scope commit / rollback
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from inventory_engines.valuation import CostLayer, LayerReference
from inventory_kernel.db.engine import is_postgres, session_scope
from inventory_kernel.domain.values import Money
from inventory_kernel.models import CostLayerModel, InventoryItemModel


class TestCostLayerModel:

    def test_domain_round_trip(self, session, make_item):
        item = make_item()
        layer = CostLayer.create(
            received_at=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
            quantity=Decimal("12.5"),
            unit_cost=Money.of("3.75", "USD"),
            quantity_remaining=Decimal("4"),
            reference_type=LayerReference.TRANSFER,
            reference_id=uuid4(),
            expiry_date=date(2025, 3, 1),
        )
        session.add(CostLayerModel.from_domain(layer, item.organization_id, item.id))
        session.flush()
        session.expire_all()

        stored = session.get(CostLayerModel, layer.layer_id)
        restored = stored.to_domain()

        assert restored.layer_id == layer.layer_id
        assert restored.received_at == layer.received_at
        assert restored.received_at.tzinfo is not None
        assert restored.quantity_received == Decimal("12.5")
        assert restored.quantity_remaining == Decimal("4")
        assert restored.unit_cost == Money.of("3.75", "USD")
        assert restored.reference_type is LayerReference.TRANSFER
        assert restored.reference_id == layer.reference_id
        assert restored.expiry_date == date(2025, 3, 1)

    @pytest.mark.parametrize("received,remaining,cost", [
        ("10", "11", "1.00"),
        ("10", "-1", "1.00"),
        ("0", "0", "1.00"),
        ("10", "5", "-1.00"),
    ])
    def test_check_constraints(self, session, make_item, received, remaining, cost):
        item = make_item()
        session.add(CostLayerModel(
            organization_id=item.organization_id,
            inventory_id=item.id,
            received_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            quantity_received=Decimal(received),
            quantity_remaining=Decimal(remaining),
            unit_cost=Decimal(cost),
            currency="USD",
        ))

        with pytest.raises(IntegrityError):
            session.flush()


class TestInventoryItemModel:

    def test_quantity_available(self, make_item):
        item = make_item(quantity_on_hand=25, quantity_allocated=5)

        assert item.quantity_available == Decimal("20")

    def test_sku_unique_per_organization_and_location(self, session, make_item):
        make_item(sku="DUP", location_id="WH-1")
        make_item(sku="DUP", location_id="WH-2")

        with pytest.raises(IntegrityError):
            make_item(sku="DUP", location_id="WH-1")

    def test_same_sku_in_other_organization(self, make_item):
        make_item(sku="SHARED")
        other = make_item(sku="SHARED", org_id=uuid4())

        assert other.id is not None


class TestSessionScope:

    def _items(self, organization_id):
        with session_scope() as session:
            stmt = select(InventoryItemModel).where(
                InventoryItemModel.organization_id == organization_id,
            )
            return [item.sku for item in session.execute(stmt).scalars().all()]

    def test_commit_on_success(self, db_engine):
        organization_id = uuid4()
        with session_scope() as session:
            session.add(InventoryItemModel(organization_id=organization_id, sku="KEEP", name="Kept"))

        assert self._items(organization_id) == ["KEEP"]

        with session_scope() as session:
            for item in session.execute(
                select(InventoryItemModel).where(InventoryItemModel.organization_id == organization_id)
            ).scalars():
                session.delete(item)

        assert self._items(organization_id) == []

    def test_rollback_on_error(self, db_engine):
        organization_id = uuid4()

        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(InventoryItemModel(organization_id=organization_id, sku="LOST", name="Lost"))
                session.flush()
                raise RuntimeError("abort")

        assert self._items(organization_id) == []

    def test_backend_detection(self, db_engine):
        assert is_postgres() == (db_engine.dialect.name == "postgresql")
