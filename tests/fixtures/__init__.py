"""
Shared test data factories

Build models with sensible defaults; override any field by keyword.
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from microservices.order_service.models import Order, OrderRequest, OrderStatus
from microservices.user_service.models import User, UserRequest, UserStatus


def make_user_id() -> str:
    return f"user_{uuid.uuid4().hex[:12]}"


def make_order_id() -> str:
    return f"order_{uuid.uuid4().hex[:12]}"


def make_email(prefix: str = "test") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}@example.com"


def make_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def make_user(
    user_id: Optional[str] = None,
    name: str = "Test User",
    email: Optional[str] = None,
    status: UserStatus = UserStatus.ACTIVE,
    **overrides: Any,
) -> User:
    """User with created/updated timestamps set"""
    now = make_timestamp()
    return User(
        user_id=user_id or make_user_id(),
        name=name,
        email=email or make_email(),
        status=status,
        created_at=overrides.pop("created_at", now),
        updated_at=overrides.pop("updated_at", now),
        **overrides,
    )


def make_user_request(
    name: str = "Test User",
    email: Optional[str] = None,
    status: Optional[UserStatus] = None,
) -> UserRequest:
    return UserRequest(name=name, email=email or make_email(), status=status)


def make_order(
    order_id: Optional[str] = None,
    user_id: Optional[str] = None,
    product_name: str = "Widget",
    quantity: int = 1,
    price: Decimal = Decimal("10.00"),
    status: OrderStatus = OrderStatus.PENDING,
    **overrides: Any,
) -> Order:
    """Order with created/updated timestamps set"""
    now = make_timestamp()
    return Order(
        order_id=order_id or make_order_id(),
        user_id=user_id or make_user_id(),
        product_name=product_name,
        quantity=quantity,
        price=price,
        status=status,
        created_at=overrides.pop("created_at", now),
        updated_at=overrides.pop("updated_at", now),
        **overrides,
    )


def make_order_request(
    user_id: str,
    product_name: str = "Widget",
    quantity: int = 1,
    price: Decimal = Decimal("10.00"),
    status: Optional[OrderStatus] = None,
) -> OrderRequest:
    return OrderRequest(
        user_id=user_id,
        product_name=product_name,
        quantity=quantity,
        price=price,
        status=status,
    )


__all__ = [
    "make_user_id",
    "make_order_id",
    "make_email",
    "make_timestamp",
    "make_user",
    "make_user_request",
    "make_order",
    "make_order_request",
]
