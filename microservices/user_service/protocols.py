"""
User Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

# Import only models (no I/O dependencies)
from core.request_context import RequestContext
from .models import User, UserStatus


# Custom exceptions - defined here to avoid importing repository
class UserServiceError(Exception):
    """Base exception for user service errors"""
    pass


class UserNotFoundError(UserServiceError):
    """User not found error"""
    pass


class UserValidationError(UserServiceError):
    """User validation error"""
    pass


class DuplicateEmailError(UserServiceError):
    """Another user already has this email"""
    pass


class UpstreamUnavailableError(UserServiceError):
    """A remote service call failed"""
    pass


class OrderDataUnavailableError(UpstreamUnavailableError):
    """The user exists but order_service could not provide their orders"""
    pass


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """
    Interface for User Repository.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.
    """

    async def create_user(self, user: User) -> User:
        """Insert a new user; raises DuplicateEmailError on email clash"""
        ...

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID (any status)"""
        ...

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by exact email"""
        ...

    async def save_user(self, user: User) -> Optional[User]:
        """Overwrite name, email and status of an existing user"""
        ...

    async def list_users(self) -> List[User]:
        """List all users"""
        ...

    async def exists_by_id(self, user_id: str) -> bool:
        """Whether a user with this ID exists"""
        ...

    async def exists_by_email(self, email: str) -> bool:
        """Whether a user with this exact email exists"""
        ...

    async def count_by_status(self, status: UserStatus) -> int:
        """Count users in a status"""
        ...

    async def health_check(self) -> bool:
        """Database connectivity check"""
        ...


@runtime_checkable
class OrderClientProtocol(Protocol):
    """Interface for Order Service Client"""

    async def get_user_orders(
        self,
        user_id: str,
        ctx: Optional[RequestContext] = None
    ) -> List[Dict[str, Any]]:
        """Orders of a user as returned by order_service"""
        ...

    async def health_check(self) -> bool:
        """True if order_service answers /health"""
        ...
