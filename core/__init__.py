#!/usr/bin/env python3
"""
Core Module for Microservices Architecture

Shared infrastructure for user_service and order_service.

COMPONENTS:
    - config/: Environment-backed configuration dataclasses
    - config_manager.py: Per-service settings resolution
    - logger.py: Service logger setup
    - postgres_client.py: asyncpg pool wrapper
    - request_context.py: Per-request correlation context
    - service_client_base.py: Base class for inter-service HTTP clients

USAGE:
    from core.config_manager import ConfigManager

    config = ConfigManager("order_service").get_service_config()
"""

from .config_manager import ConfigManager, ServiceSettings
from .request_context import RequestContext

__all__ = [
    "ConfigManager",
    "ServiceSettings",
    "RequestContext",
]

__version__ = "1.0.0"
