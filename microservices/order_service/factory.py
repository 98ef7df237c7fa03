"""
Order Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_order_service
    service = create_order_service(config)
"""
from typing import Optional

import httpx

from core.config_manager import ConfigManager

from .order_service import OrderService


def create_order_service(
    config: Optional[ConfigManager] = None,
    user_client=None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> OrderService:
    """
    Create OrderService with real dependencies.

    This function imports the real repository (which has I/O dependencies).
    Use this in production, NOT in tests.

    Args:
        config: Configuration manager
        user_client: User service client (built from config if None)
        transport: Optional httpx transport for the default user client

    Returns:
        Configured OrderService instance
    """
    # Import real repository and client here (not at module level)
    from .order_repository import OrderRepository
    from .clients import UserServiceClient

    config = config or ConfigManager("order_service")
    settings = config.get_service_config()

    repository = OrderRepository(config=config)
    if user_client is None:
        user_client = UserServiceClient(
            base_url=settings.user_service_url,
            timeout=settings.http_timeout,
            transport=transport,
        )

    return OrderService(
        repository=repository,
        user_client=user_client,
    )
