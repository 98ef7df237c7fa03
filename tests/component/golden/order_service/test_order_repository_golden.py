"""
Order Repository Component Golden Tests

OrderRepository against a mocked PostgresClientWrapper: SQL shape,
parameters and row mapping.

Usage:
    pytest tests/component/golden/order_service/test_order_repository_golden.py -v
"""
import pytest
from datetime import datetime, timezone
from decimal import Decimal

from core.config_manager import ConfigManager
from microservices.order_service.order_repository import OrderRepository
from microservices.order_service.models import Order, OrderStatus
from tests.fixtures import make_order

pytestmark = [pytest.mark.component, pytest.mark.golden, pytest.mark.asyncio]

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def order_row(**overrides):
    row = {
        "order_id": "order_test_001",
        "user_id": "user_alice",
        "product_name": "Widget",
        "quantity": 2,
        "price": Decimal("9.99"),
        "status": "PENDING",
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


@pytest.fixture
def repo(mock_db):
    return OrderRepository(config=ConfigManager("order_service"), db=mock_db)


class TestOrderRepositoryGolden:

    async def test_table_name(self, repo):
        assert repo.table == "orders.orders"

    async def test_ensure_schema(self, repo, mock_db):
        await repo.ensure_schema()

        statements = [q[1] for q in mock_db.get_queries("execute")]
        assert "CREATE SCHEMA IF NOT EXISTS orders" in statements[0]
        assert "CREATE TABLE IF NOT EXISTS orders.orders" in statements[1]
        assert "NUMERIC(10, 2)" in statements[1]

    async def test_create_order_maps_row(self, repo, mock_db):
        mock_db.set_row_response(order_row())
        order = make_order(order_id="order_test_001", user_id="user_alice", quantity=2,
                           price=Decimal("9.99"))

        created = await repo.create_order(order)

        assert isinstance(created, Order)
        assert created.status == OrderStatus.PENDING
        assert created.price == Decimal("9.99")
        assert created.created_at == NOW
        _, sql, params = mock_db.last_query
        assert "INSERT INTO orders.orders" in sql
        assert params[:6] == ["order_test_001", "user_alice", "Widget", 2, Decimal("9.99"), "PENDING"]

    async def test_create_order_without_row_fails(self, repo, mock_db):
        with pytest.raises(RuntimeError):
            await repo.create_order(make_order())

    async def test_create_order_propagates_db_error(self, repo, mock_db):
        mock_db.set_error(OSError("connection refused"))

        with pytest.raises(OSError):
            await repo.create_order(make_order())

    async def test_get_missing_order(self, repo):
        assert await repo.get_order("order_missing") is None

    async def test_save_order_missing_returns_none(self, repo, mock_db):
        assert await repo.save_order(make_order()) is None
        _, sql, params = mock_db.last_query
        assert "UPDATE orders.orders" in sql

    async def test_save_order_writes_status(self, repo, mock_db):
        mock_db.set_row_response(order_row(status="CANCELLED"))
        order = make_order(order_id="order_test_001", status=OrderStatus.CANCELLED)

        saved = await repo.save_order(order)

        assert saved.status == OrderStatus.CANCELLED
        _, _, params = mock_db.last_query
        assert params[4] == "CANCELLED"
        assert params[-1] == "order_test_001"

    async def test_get_user_orders_with_status(self, repo, mock_db):
        mock_db.set_rows_response([order_row(status="SHIPPED")])

        orders = await repo.get_user_orders("user_alice", status=OrderStatus.SHIPPED)

        assert [o.status for o in orders] == [OrderStatus.SHIPPED]
        _, sql, params = mock_db.last_query
        assert params == ["user_alice", "SHIPPED"]
        assert "ORDER BY created_at" in sql

    async def test_list_orders(self, repo, mock_db):
        mock_db.set_rows_response([order_row(), order_row(order_id="order_test_002")])

        orders = await repo.list_orders()

        assert [o.order_id for o in orders] == ["order_test_001", "order_test_002"]

    async def test_count_by_status(self, repo, mock_db):
        mock_db.set_value_response(3)

        assert await repo.count_by_status(OrderStatus.PENDING) == 3
        assert mock_db.last_query[2] == ["PENDING"]

    async def test_count_by_user_none_is_zero(self, repo):
        assert await repo.count_by_user("user_alice") == 0

    async def test_total_excludes_cancelled_in_sql(self, repo, mock_db):
        mock_db.set_value_response(Decimal("20.00"))

        total = await repo.total_amount_by_user("user_alice")

        assert total == Decimal("20.00")
        _, sql, params = mock_db.last_query
        assert "SUM(price * quantity)" in sql
        assert "status <> $2" in sql
        assert params == ["user_alice", "CANCELLED"]

    async def test_total_none_is_zero(self, repo):
        assert await repo.total_amount_by_user("user_alice") == Decimal("0")

    async def test_health_check_uses_client(self, repo, mock_db):
        assert await repo.health_check() is True
        assert mock_db.last_query[0] == "health_check"

    async def test_health_check_db_down(self, repo, mock_db):
        mock_db.set_healthy(False)

        assert await repo.health_check() is False
