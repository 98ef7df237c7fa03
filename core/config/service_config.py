#!/usr/bin/env python3
"""Peer service configuration

Base URLs of the two services. They call each other's public API, so each
deployment needs to know where the other one lives. Addresses are fixed
per deployment; there is no runtime discovery.
"""
import os
from dataclasses import dataclass


def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class ServiceConfig:
    """Peer service endpoints"""

    user_service_url: str = "http://localhost:8081"
    order_service_url: str = "http://localhost:8082"

    # Transport timeout for outbound calls (seconds)
    http_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load service configuration from environment variables"""
        return cls(
            user_service_url=os.getenv("USER_SERVICE_URL", "http://localhost:8081").rstrip('/'),
            order_service_url=os.getenv("ORDER_SERVICE_URL", "http://localhost:8082").rstrip('/'),
            http_timeout=_float(os.getenv("HTTP_CLIENT_TIMEOUT", "10"), 10.0),
        )
