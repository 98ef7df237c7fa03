"""
Order Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import List, Optional, Protocol, runtime_checkable
from decimal import Decimal

# Import only models (no I/O dependencies)
from core.request_context import RequestContext
from .models import Order, OrderStatus, UserSummary


# ============================================================================
# Custom Exceptions - defined here to avoid importing repository
# ============================================================================

class OrderServiceError(Exception):
    """Base exception for order service errors"""
    pass


class OrderNotFoundError(OrderServiceError):
    """Order not found error"""
    pass


class OrderValidationError(OrderServiceError):
    """Order validation error"""
    pass


class UserNotFoundError(OrderServiceError):
    """Referenced user does not exist in user_service"""
    pass


class UpstreamUnavailableError(OrderServiceError):
    """user_service could not be reached or answered with an error"""
    pass


class InvalidStatusTransitionError(OrderServiceError):
    """Requested status change is not in the transition table"""

    def __init__(self, current: OrderStatus, target: OrderStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from {current.value} to {target.value}")


# ============================================================================
# Repository Protocol
# ============================================================================

@runtime_checkable
class OrderRepositoryProtocol(Protocol):
    """
    Interface for Order Repository.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.
    """

    async def create_order(self, order: Order) -> Order:
        """Insert a new order, returning the stored row"""
        ...

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get order by ID"""
        ...

    async def save_order(self, order: Order) -> Optional[Order]:
        """Overwrite every mutable field of an existing order"""
        ...

    async def list_orders(self) -> List[Order]:
        """List all orders"""
        ...

    async def get_user_orders(
        self,
        user_id: str,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """Get orders for a user, optionally filtered by status"""
        ...

    async def count_by_status(self, status: OrderStatus) -> int:
        """Count orders in a status"""
        ...

    async def count_by_user(self, user_id: str) -> int:
        """Count orders of a user"""
        ...

    async def total_amount_by_user(self, user_id: str) -> Decimal:
        """Sum of price * quantity over a user's non-cancelled orders"""
        ...

    async def health_check(self) -> bool:
        """Database connectivity check"""
        ...


# ============================================================================
# Client Protocols
# ============================================================================

@runtime_checkable
class UserClientProtocol(Protocol):
    """Interface for User Service Client"""

    async def verify_user(
        self,
        user_id: str,
        ctx: Optional[RequestContext] = None
    ) -> UserSummary:
        """Return the user or raise UserNotFoundError / UpstreamUnavailableError"""
        ...

    async def health_check(self) -> bool:
        """True if user_service answers /health"""
        ...
