"""
User Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_user_service
    service = create_user_service(config)
"""
from typing import Optional

import httpx

from core.config_manager import ConfigManager

from .user_service import UserService


def create_user_service(
    config: Optional[ConfigManager] = None,
    order_client=None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UserService:
    """
    Create UserService with real dependencies.

    Args:
        config: Configuration manager
        order_client: Order service client (built from config if None)
        transport: Optional httpx transport for the default order client

    Returns:
        Configured UserService instance
    """
    # Import real repository and client here (not at module level)
    from .user_repository import UserRepository
    from .clients import OrderServiceClient

    config = config or ConfigManager("user_service")
    settings = config.get_service_config()

    repository = UserRepository(config=config)
    if order_client is None:
        order_client = OrderServiceClient(
            base_url=settings.order_service_url,
            timeout=settings.http_timeout,
            transport=transport,
        )

    return UserService(
        repository=repository,
        order_client=order_client,
    )
