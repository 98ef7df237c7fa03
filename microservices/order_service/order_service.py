"""
Order Service Business Logic

Business logic layer for order management and user verification against
user_service.

Uses dependency injection for testability:
- Repository is injected, not created at import time
- User service client is injected
"""

from typing import Optional, List
from decimal import Decimal
import logging
import uuid

from core.request_context import RequestContext

# Import protocols (no I/O dependencies) - NOT the concrete repository!
from .protocols import (
    OrderRepositoryProtocol,
    UserClientProtocol,
    OrderServiceError,
    OrderNotFoundError,
    OrderValidationError,
    UserNotFoundError,
    UpstreamUnavailableError,
    InvalidStatusTransitionError,
)
from .models import Order, OrderRequest, OrderStatus, UserSummary
from . import lifecycle

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order management business logic service

    Handles order lifecycle, aggregate queries and user verification.

    Verification and the store write that follows it are two separate
    steps with no lock between them: a user deactivated in between does
    not stop the write.
    """

    def __init__(
        self,
        repository: Optional[OrderRepositoryProtocol] = None,
        user_client: Optional[UserClientProtocol] = None,
    ):
        """
        Initialize service with injected dependencies.

        Args:
            repository: Order repository (inject mock for testing)
            user_client: User service client (inject fake for testing)
        """
        self.repo = repository  # Will be set by factory if None
        self.user_client = user_client

    # ==================== Order Lifecycle Operations ====================

    async def create_order(
        self,
        request: OrderRequest,
        ctx: Optional[RequestContext] = None
    ) -> Order:
        """
        Create a new order after verifying its user

        Args:
            request: Order creation request
            ctx: Request context

        Returns:
            Stored order

        Raises:
            UserNotFoundError: If the user does not exist
            UpstreamUnavailableError: If user_service could not be reached
            OrderServiceError: If the store write fails
        """
        ctx = ctx or RequestContext()
        logger.info(
            f"{ctx} Create order requested: user {request.user_id}, product {request.product_name}"
        )

        self._validate_order_request(request)
        await self._verify_user(request.user_id, ctx, "create_order")

        order = Order(
            order_id=f"order_{uuid.uuid4().hex[:12]}",
            user_id=request.user_id,
            product_name=request.product_name,
            quantity=request.quantity,
            price=request.price,
            status=lifecycle.initial_status(request.status),
        )

        try:
            created = await self.repo.create_order(order)
        except Exception as e:
            logger.error(f"{ctx} Failed to create order for user {request.user_id}: {e}")
            raise OrderServiceError(f"Failed to create order: {e}") from e

        logger.info(f"{ctx} Order created: {created.order_id} for user {created.user_id}")
        return created

    async def get_order(self, order_id: str, ctx: Optional[RequestContext] = None) -> Order:
        """Get order by ID, raising OrderNotFoundError if absent"""
        ctx = ctx or RequestContext()
        order = await self.repo.get_order(order_id)
        if not order:
            logger.warning(f"{ctx} Order not found: {order_id}")
            raise OrderNotFoundError(f"Order not found: {order_id}")
        return order

    async def update_order(
        self,
        order_id: str,
        request: OrderRequest,
        ctx: Optional[RequestContext] = None
    ) -> Order:
        """
        Full update of an order

        The user is re-verified only when user_id changes. A status in the
        request goes through the transition table; omitting it keeps the
        current status.

        Raises:
            OrderNotFoundError: If the order does not exist
            UserNotFoundError / UpstreamUnavailableError: If a new user_id
                cannot be verified (the order is left unchanged)
            InvalidStatusTransitionError: If the status change is illegal
        """
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Update order requested: {order_id}")

        self._validate_order_request(request)
        existing = await self.get_order(order_id, ctx)

        if existing.user_id != request.user_id:
            await self._verify_user(request.user_id, ctx, "update_order")

        updated = existing.model_copy(update={
            "user_id": request.user_id,
            "product_name": request.product_name,
            "quantity": request.quantity,
            "price": request.price,
        })
        if request.status is not None:
            updated = lifecycle.transition(updated, request.status)

        saved = await self._save(updated, ctx, "update_order")
        logger.info(f"{ctx} Order updated: {order_id}")
        return saved

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        force: bool = False,
        ctx: Optional[RequestContext] = None
    ) -> Order:
        """
        Move an order to a new status

        Args:
            order_id: Order ID
            status: Target status
            force: Skip the transition table (operator override)
            ctx: Request context

        Raises:
            OrderNotFoundError: If the order does not exist
            InvalidStatusTransitionError: If illegal and not forced
        """
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Status change requested: order {order_id} -> {status.value} (force={force})")

        existing = await self.get_order(order_id, ctx)
        try:
            updated = lifecycle.transition(existing, status, force=force)
        except InvalidStatusTransitionError as e:
            logger.warning(f"{ctx} Rejected status change for order {order_id}: {e}")
            raise

        if force and not lifecycle.can_transition(existing.status, status):
            logger.warning(
                f"{ctx} Forced status change for order {order_id}: "
                f"{existing.status.value} -> {status.value}"
            )

        saved = await self._save(updated, ctx, "update_order_status")
        logger.info(f"{ctx} Order status changed: {order_id} -> {saved.status.value}")
        return saved

    async def delete_order(self, order_id: str, ctx: Optional[RequestContext] = None) -> Order:
        """Soft delete: cancel the order, keeping the record"""
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Delete order requested: {order_id}")

        existing = await self.get_order(order_id, ctx)
        saved = await self._save(lifecycle.soft_delete(existing), ctx, "delete_order")
        logger.info(f"{ctx} Order cancelled: {order_id}")
        return saved

    # ==================== Order Query Operations ====================

    async def list_orders(self, ctx: Optional[RequestContext] = None) -> List[Order]:
        """List all orders"""
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} List all orders requested")
        return await self.repo.list_orders()

    async def get_orders_by_user(
        self,
        user_id: str,
        status: Optional[OrderStatus] = None,
        ctx: Optional[RequestContext] = None
    ) -> List[Order]:
        """
        Orders of a user, after verifying the user exists

        Raises:
            UserNotFoundError / UpstreamUnavailableError: If the user
                cannot be verified
        """
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} List orders for user {user_id} requested")

        await self._verify_user(user_id, ctx, "get_orders_by_user")
        return await self.repo.get_user_orders(user_id, status=status)

    # ==================== Aggregates ====================

    async def count_by_status(self, status: OrderStatus, ctx: Optional[RequestContext] = None) -> int:
        """Number of orders currently in a status"""
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Count orders by status {status.value} requested")
        return await self.repo.count_by_status(status)

    async def count_by_user(self, user_id: str, ctx: Optional[RequestContext] = None) -> int:
        """Number of orders of a user, cancelled ones included"""
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Count orders for user {user_id} requested")
        return await self.repo.count_by_user(user_id)

    async def total_amount_by_user(self, user_id: str, ctx: Optional[RequestContext] = None) -> Decimal:
        """Sum of price x quantity over a user's non-cancelled orders; 0 if none"""
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Total amount for user {user_id} requested")
        total = await self.repo.total_amount_by_user(user_id)
        return total if total is not None else Decimal("0")

    async def health_check(self) -> bool:
        """Database connectivity check"""
        try:
            return await self.repo.health_check()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    async def user_service_health_check(self) -> bool:
        """Whether user_service, needed for every order write, is reachable"""
        healthy = await self.user_client.health_check()
        if not healthy:
            logger.warning("user_service health check failed")
        return healthy

    # ==================== Private Helper Methods ====================

    async def _verify_user(self, user_id: str, ctx: RequestContext, operation: str) -> UserSummary:
        try:
            user = await self.user_client.verify_user(user_id, ctx)
        except (UserNotFoundError, UpstreamUnavailableError) as e:
            logger.error(f"{ctx} {operation}: user verification failed for {user_id}: {e}")
            raise
        logger.info(f"{ctx} {operation}: user verified - {user.user_id} ({user.name})")
        return user

    async def _save(self, order: Order, ctx: RequestContext, operation: str) -> Order:
        try:
            saved = await self.repo.save_order(order)
        except Exception as e:
            logger.error(f"{ctx} {operation}: failed to save order {order.order_id}: {e}")
            raise OrderServiceError(f"Failed to save order: {e}") from e
        if not saved:
            # Row vanished between read and write
            raise OrderNotFoundError(f"Order not found: {order.order_id}")
        return saved

    def _validate_order_request(self, request: OrderRequest) -> None:
        """Validate order request beyond the model constraints"""
        if not request.user_id or not request.user_id.strip():
            raise OrderValidationError("user_id is required")
        if not request.product_name or not request.product_name.strip():
            raise OrderValidationError("product_name is required")
        if request.quantity < 1:
            raise OrderValidationError("quantity must be at least 1")
        if request.price <= 0:
            raise OrderValidationError("price must be positive")
