"""
Order Service Clients Module

HTTP clients for synchronous communication with other microservices.
"""

from .user_client import UserServiceClient

__all__ = [
    "UserServiceClient",
]
