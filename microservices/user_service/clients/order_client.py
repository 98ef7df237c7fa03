"""
Order Service Client for User Service

HTTP client for synchronous communication with order_service.
Used to assemble the "user with orders" view.
"""

import httpx
import logging
from typing import Any, Dict, List, Optional

from core.request_context import RequestContext
from core.service_client_base import BaseServiceClient, path_segment

from ..protocols import OrderDataUnavailableError

logger = logging.getLogger(__name__)


class OrderServiceClient(BaseServiceClient):
    """Client for order_service"""

    service_name = "order_service"
    default_port = 8082

    async def get_user_orders(
        self,
        user_id: str,
        ctx: Optional[RequestContext] = None
    ) -> List[Dict[str, Any]]:
        """
        Get all orders of a user from order_service.

        The collection is returned exactly as order_service sent it, in the
        same order, without pagination or reshaping.

        Args:
            user_id: User ID
            ctx: Request context (request id is forwarded upstream)

        Returns:
            Orders as JSON objects

        Raises:
            OrderDataUnavailableError: On any transport error, non-200
                status or a body that is not a JSON array
        """
        ctx = ctx or RequestContext()
        try:
            segment = path_segment(user_id)
        except ValueError as e:
            raise OrderDataUnavailableError(f"Invalid user id: {user_id!r}") from e

        try:
            response = await self.get(f"/api/v1/orders/user/{segment}", ctx=ctx)
        except httpx.HTTPError as e:
            logger.error(f"{ctx} order_service unreachable while fetching orders of user {user_id}: {e}")
            raise OrderDataUnavailableError(f"Order service unavailable: {e}") from e

        if response.status_code != 200:
            logger.error(
                f"{ctx} order_service returned {response.status_code} for orders of user {user_id}"
            )
            raise OrderDataUnavailableError(
                f"Order service returned status {response.status_code}"
            )

        try:
            orders = response.json()
        except ValueError as e:
            logger.error(f"{ctx} Undecodable order_service response for user {user_id}: {e}")
            raise OrderDataUnavailableError(f"Invalid response from order service: {e}") from e

        if not isinstance(orders, list):
            logger.error(f"{ctx} order_service returned {type(orders).__name__} instead of a list")
            raise OrderDataUnavailableError("Invalid response from order service: expected a list")

        return orders

    async def get_order(
        self,
        order_id: str,
        ctx: Optional[RequestContext] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Get a single order from order_service.

        Returns:
            Order as a JSON object, or None if order_service answered 404
            or the id cannot name a single path segment

        Raises:
            OrderDataUnavailableError: On any other failure
        """
        ctx = ctx or RequestContext()
        try:
            segment = path_segment(order_id)
        except ValueError:
            return None

        try:
            response = await self.get(f"/api/v1/orders/{segment}", ctx=ctx)
        except httpx.HTTPError as e:
            logger.error(f"{ctx} order_service unreachable while fetching order {order_id}: {e}")
            raise OrderDataUnavailableError(f"Order service unavailable: {e}") from e

        if response.status_code == 404:
            logger.info(f"{ctx} Order {order_id} not found in order_service")
            return None
        if response.status_code != 200:
            logger.error(f"{ctx} order_service returned {response.status_code} for order {order_id}")
            raise OrderDataUnavailableError(
                f"Order service returned status {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise OrderDataUnavailableError(f"Invalid response from order service: {e}") from e
