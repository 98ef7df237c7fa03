"""
User Service Clients Module

HTTP clients for synchronous communication with other microservices.
"""

from .order_client import OrderServiceClient

__all__ = [
    "OrderServiceClient",
]
