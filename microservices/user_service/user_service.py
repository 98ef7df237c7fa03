"""
User Service Business Logic

User management business logic layer for the microservice.
Handles validation, email uniqueness and the user-with-orders view.

Uses dependency injection for testability:
- Repository is injected, not created at import time
- Order service client is injected
"""

from typing import Any, Dict, List, Optional
import logging
import uuid

from core.request_context import RequestContext

# Import protocols (no I/O dependencies) - NOT the concrete repository!
from .protocols import (
    UserRepositoryProtocol,
    OrderClientProtocol,
    UserServiceError,
    UserNotFoundError,
    UserValidationError,
    DuplicateEmailError,
    OrderDataUnavailableError,
)
from .models import User, UserRequest, UserStatus, EMAIL_PATTERN

logger = logging.getLogger(__name__)


class UserService:
    """
    User management business logic service

    Handles all user-related business operations while delegating data
    access to the repository layer and order lookups to order_service.
    """

    def __init__(
        self,
        repository: Optional[UserRepositoryProtocol] = None,
        order_client: Optional[OrderClientProtocol] = None,
    ):
        """
        Initialize service with injected dependencies.

        Args:
            repository: Repository (inject mock for testing)
            order_client: Order service client (inject fake for testing)
        """
        self.repo = repository  # Will be set by factory if None
        self.order_client = order_client

    # ==================== User Lifecycle Operations ====================

    async def create_user(self, request: UserRequest, ctx: Optional[RequestContext] = None) -> User:
        """
        Create a new user

        Args:
            request: User creation request
            ctx: Request context

        Returns:
            Created user

        Raises:
            UserValidationError: If request data is invalid
            DuplicateEmailError: If the email is already taken
        """
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Create user requested: {request.email}")

        self._validate_user_request(request)
        if await self.repo.exists_by_email(request.email):
            logger.warning(f"{ctx} create_user: email already exists: {request.email}")
            raise DuplicateEmailError(f"Email already exists: {request.email}")

        user = User(
            user_id=f"user_{uuid.uuid4().hex[:12]}",
            name=request.name,
            email=request.email,
            status=request.status or UserStatus.ACTIVE,
        )

        try:
            created = await self.repo.create_user(user)
        except DuplicateEmailError:
            # Lost a race against a concurrent create with the same email
            logger.warning(f"{ctx} create_user: email taken concurrently: {request.email}")
            raise
        except Exception as e:
            logger.error(f"{ctx} Failed to create user {request.email}: {e}")
            raise UserServiceError(f"Failed to create user: {e}") from e

        logger.info(f"{ctx} User created: {created.user_id}")
        return created

    async def get_user(self, user_id: str, ctx: Optional[RequestContext] = None) -> User:
        """
        Get user by ID (active or inactive)

        Raises:
            UserNotFoundError: If user not found
        """
        ctx = ctx or RequestContext()
        user = await self.repo.get_user_by_id(user_id)
        if not user:
            logger.warning(f"{ctx} User not found: {user_id}")
            raise UserNotFoundError(f"User not found: {user_id}")
        return user

    async def get_user_by_email(self, email: str, ctx: Optional[RequestContext] = None) -> User:
        """
        Get user by exact email

        Raises:
            UserNotFoundError: If no user has this email
        """
        ctx = ctx or RequestContext()
        user = await self.repo.get_user_by_email(email)
        if not user:
            logger.warning(f"{ctx} User not found by email: {email}")
            raise UserNotFoundError(f"User not found: {email}")
        return user

    async def update_user(
        self,
        user_id: str,
        request: UserRequest,
        ctx: Optional[RequestContext] = None
    ) -> User:
        """
        Update name, email and (if given) status

        Email uniqueness is only checked when the email actually changes.

        Raises:
            UserNotFoundError: If user not found
            DuplicateEmailError: If the new email is taken
        """
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Update user requested: {user_id}")

        self._validate_user_request(request)
        existing = await self.get_user(user_id, ctx)

        if existing.email != request.email and await self.repo.exists_by_email(request.email):
            logger.warning(f"{ctx} update_user: email already exists: {request.email}")
            raise DuplicateEmailError(f"Email already exists: {request.email}")

        updated = existing.model_copy(update={
            "name": request.name,
            "email": request.email,
            "status": request.status or existing.status,
        })
        saved = await self._save(updated, ctx, "update_user")
        logger.info(f"{ctx} User updated: {user_id}")
        return saved

    async def delete_user(self, user_id: str, ctx: Optional[RequestContext] = None) -> User:
        """
        Delete user (soft delete to INACTIVE)

        Orders referencing the user are left untouched.
        """
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Delete user requested: {user_id}")

        existing = await self.get_user(user_id, ctx)
        saved = await self._save(
            existing.model_copy(update={"status": UserStatus.INACTIVE}), ctx, "delete_user"
        )
        logger.info(f"{ctx} User deactivated: {user_id}")
        return saved

    # ==================== User Query Operations ====================

    async def list_users(self, ctx: Optional[RequestContext] = None) -> List[User]:
        """List all users"""
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} List all users requested")
        return await self.repo.list_users()

    async def count_active_users(self, ctx: Optional[RequestContext] = None) -> int:
        """Number of ACTIVE users"""
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} Count active users requested")
        return await self.repo.count_by_status(UserStatus.ACTIVE)

    async def get_user_orders(
        self,
        user_id: str,
        ctx: Optional[RequestContext] = None
    ) -> List[Dict[str, Any]]:
        """
        Orders of a user, fetched from order_service

        Local existence is checked first; an unknown user never causes an
        outbound call.

        Raises:
            UserNotFoundError: If the user does not exist locally
            OrderDataUnavailableError: If order_service could not answer
        """
        ctx = ctx or RequestContext()
        logger.info(f"{ctx} User orders requested: {user_id}")

        if not await self.repo.exists_by_id(user_id):
            logger.warning(f"{ctx} get_user_orders: user not found: {user_id}")
            raise UserNotFoundError(f"User not found: {user_id}")

        try:
            orders = await self.order_client.get_user_orders(user_id, ctx)
        except OrderDataUnavailableError as e:
            logger.error(f"{ctx} get_user_orders: order data unavailable for {user_id}: {e}")
            raise

        logger.info(f"{ctx} Fetched {len(orders)} orders for user {user_id}")
        return orders

    async def health_check(self) -> bool:
        """Database connectivity check"""
        try:
            return await self.repo.health_check()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    async def order_service_health_check(self) -> bool:
        """Whether order_service, needed for the user orders view, is reachable"""
        healthy = await self.order_client.health_check()
        if not healthy:
            logger.warning("order_service health check failed")
        return healthy

    # ==================== Private Helper Methods ====================

    async def _save(self, user: User, ctx: RequestContext, operation: str) -> User:
        try:
            saved = await self.repo.save_user(user)
        except DuplicateEmailError:
            logger.warning(f"{ctx} {operation}: email taken concurrently: {user.email}")
            raise
        except Exception as e:
            logger.error(f"{ctx} {operation}: failed to save user {user.user_id}: {e}")
            raise UserServiceError(f"Failed to save user: {e}") from e
        if not saved:
            raise UserNotFoundError(f"User not found: {user.user_id}")
        return saved

    def _validate_user_request(self, request: UserRequest) -> None:
        """Validate user request beyond the model constraints"""
        if not request.name or not request.name.strip():
            raise UserValidationError("name is required")
        if not request.email or not request.email.strip():
            raise UserValidationError("email is required")
        if not EMAIL_PATTERN.match(request.email):
            raise UserValidationError("Invalid email format")
