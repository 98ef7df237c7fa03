"""
User Service Client for Order Service

HTTP client for synchronous communication with user_service.
Used to verify that a referenced user exists before an order is written.
"""

import httpx
import logging
from typing import Optional

from pydantic import ValidationError

from core.request_context import RequestContext
from core.service_client_base import BaseServiceClient, path_segment

from ..models import UserSummary
from ..protocols import OrderValidationError, UpstreamUnavailableError, UserNotFoundError

logger = logging.getLogger(__name__)


class UserServiceClient(BaseServiceClient):
    """Client for user_service"""

    service_name = "user_service"
    default_port = 8081

    async def verify_user(
        self,
        user_id: str,
        ctx: Optional[RequestContext] = None
    ) -> UserSummary:
        """
        Look the user up in user_service.

        One GET, no retry, no caching. A 404 means the user does not exist;
        anything else that goes wrong means user_service could not give an
        answer, and the two are reported separately.

        Args:
            user_id: User ID
            ctx: Request context (request id is forwarded upstream)

        Returns:
            Minimal user projection

        Raises:
            OrderValidationError: If user_id is empty or a dot segment
            UserNotFoundError: If user_service answered 404
            UpstreamUnavailableError: On transport errors, other non-2xx
                statuses or an undecodable body
        """
        ctx = ctx or RequestContext()
        if not user_id or not user_id.strip():
            raise OrderValidationError("user_id is required")
        try:
            segment = path_segment(user_id)
        except ValueError as e:
            raise OrderValidationError(f"Invalid user_id: {user_id!r}") from e

        try:
            response = await self.get(f"/api/v1/users/{segment}", ctx=ctx)
        except httpx.HTTPError as e:
            logger.error(f"{ctx} user_service unreachable while verifying user {user_id}: {e}")
            raise UpstreamUnavailableError(f"User service unavailable: {e}") from e

        if response.status_code == 404:
            logger.warning(f"{ctx} User {user_id} not found in user_service")
            raise UserNotFoundError(f"User not found: {user_id}")

        if response.status_code != 200:
            logger.error(
                f"{ctx} user_service returned {response.status_code} while verifying user {user_id}"
            )
            raise UpstreamUnavailableError(
                f"User service returned status {response.status_code}"
            )

        try:
            return UserSummary.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"{ctx} Undecodable user_service response for user {user_id}: {e}")
            raise UpstreamUnavailableError(f"Invalid response from user service: {e}") from e
