"""
Order Repository

Data access layer for orders using the asyncpg-backed PostgresClientWrapper.
Aggregates are computed in SQL on NUMERIC columns, so totals stay exact.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from decimal import Decimal
import logging

from core.config_manager import ConfigManager
from core.postgres_client import PostgresClientWrapper, get_postgres_client
from .models import Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderRepository:
    """
    Repository for order data operations

    Implements OrderRepositoryProtocol against PostgreSQL.
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        db: Optional[PostgresClientWrapper] = None
    ):
        """Initialize Order Repository with PostgresClientWrapper"""
        if config is None:
            config = ConfigManager("order_service")

        self.db = db or get_postgres_client("order_service", config.get_infra_config())
        self.schema = config.get_service_config().db_schema
        self.orders_table = "orders"
        self.table = f"{self.schema}.{self.orders_table}"

        logger.info(f"OrderRepository initialized with table {self.table}")

    async def ensure_schema(self) -> None:
        """Create schema and table if missing"""
        await self.db.execute(f"CREATE SCHEMA IF NOT EXISTS {self.schema}")
        await self.db.execute(f'''
            CREATE TABLE IF NOT EXISTS {self.table} (
                order_id VARCHAR(64) PRIMARY KEY,
                user_id VARCHAR(64) NOT NULL,
                product_name VARCHAR(100) NOT NULL,
                quantity INTEGER NOT NULL CHECK (quantity >= 1),
                price NUMERIC(10, 2) NOT NULL CHECK (price > 0),
                status VARCHAR(20) NOT NULL,
                created_at TIMESTAMPTZ NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL
            )
        ''')
        await self.db.execute(
            f"CREATE INDEX IF NOT EXISTS idx_orders_user_id ON {self.table} (user_id)"
        )
        await self.db.execute(
            f"CREATE INDEX IF NOT EXISTS idx_orders_status ON {self.table} (status)"
        )
        logger.info(f"Schema ready: {self.table}")

    async def create_order(self, order: Order) -> Order:
        """Create a new order"""
        now = datetime.now(timezone.utc)
        query = f'''
            INSERT INTO {self.table}
                (order_id, user_id, product_name, quantity, price, status, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $7)
            RETURNING *
        '''
        try:
            row = await self.db.query_row(query, [
                order.order_id,
                order.user_id,
                order.product_name,
                order.quantity,
                order.price,
                order.status.value,
                now,
            ])
        except Exception as e:
            logger.error(f"Failed to create order {order.order_id}: {e}")
            raise

        if not row:
            raise RuntimeError(f"Insert returned no row for order {order.order_id}")
        return self._row_to_order(row)

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get order by ID"""
        try:
            row = await self.db.query_row(
                f"SELECT * FROM {self.table} WHERE order_id = $1", [order_id]
            )
        except Exception as e:
            logger.error(f"Failed to get order {order_id}: {e}")
            raise
        return self._row_to_order(row) if row else None

    async def save_order(self, order: Order) -> Optional[Order]:
        """Overwrite mutable fields; updated_at is set here. Last write wins."""
        query = f'''
            UPDATE {self.table}
            SET user_id = $1, product_name = $2, quantity = $3, price = $4,
                status = $5, updated_at = $6
            WHERE order_id = $7
            RETURNING *
        '''
        try:
            row = await self.db.query_row(query, [
                order.user_id,
                order.product_name,
                order.quantity,
                order.price,
                order.status.value,
                datetime.now(timezone.utc),
                order.order_id,
            ])
        except Exception as e:
            logger.error(f"Failed to save order {order.order_id}: {e}")
            raise
        return self._row_to_order(row) if row else None

    async def list_orders(self) -> List[Order]:
        """List all orders"""
        rows = await self.db.query(f"SELECT * FROM {self.table} ORDER BY created_at, order_id")
        return [self._row_to_order(row) for row in rows]

    async def get_user_orders(
        self,
        user_id: str,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """Get orders for a user, optionally filtered by status"""
        if status is not None:
            rows = await self.db.query(
                f"SELECT * FROM {self.table} WHERE user_id = $1 AND status = $2 "
                f"ORDER BY created_at, order_id",
                [user_id, status.value],
            )
        else:
            rows = await self.db.query(
                f"SELECT * FROM {self.table} WHERE user_id = $1 ORDER BY created_at, order_id",
                [user_id],
            )
        return [self._row_to_order(row) for row in rows]

    async def count_by_status(self, status: OrderStatus) -> int:
        """Count orders in a status"""
        count = await self.db.query_value(
            f"SELECT COUNT(*) FROM {self.table} WHERE status = $1", [status.value]
        )
        return int(count or 0)

    async def count_by_user(self, user_id: str) -> int:
        """Count orders of a user"""
        count = await self.db.query_value(
            f"SELECT COUNT(*) FROM {self.table} WHERE user_id = $1", [user_id]
        )
        return int(count or 0)

    async def total_amount_by_user(self, user_id: str) -> Decimal:
        """Sum of price * quantity over a user's non-cancelled orders"""
        total = await self.db.query_value(
            f"SELECT COALESCE(SUM(price * quantity), 0) FROM {self.table} "
            f"WHERE user_id = $1 AND status <> $2",
            [user_id, OrderStatus.CANCELLED.value],
        )
        return Decimal(total) if total is not None else Decimal("0")

    async def health_check(self) -> bool:
        """Database connectivity check"""
        return await self.db.health_check()

    def _row_to_order(self, row: Dict[str, Any]) -> Order:
        """Convert database row to Order model"""
        return Order(
            order_id=row["order_id"],
            user_id=row["user_id"],
            product_name=row["product_name"],
            quantity=row["quantity"],
            price=Decimal(row["price"]),
            status=OrderStatus(row["status"]),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
