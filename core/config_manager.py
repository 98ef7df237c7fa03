"""
Centralized Configuration Manager

Resolves per-service settings (identity, listen address, peer URLs,
database) from the environment-backed config dataclasses.

Usage:
    from core.config_manager import ConfigManager

    config_manager = ConfigManager("order_service")
    config = config_manager.get_service_config()
    print(config.service_port, config.user_service_url)
"""

import os
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .config import InfraConfig, LoggingConfig, ServiceConfig

logger = logging.getLogger(__name__)


# Default listen ports, matching the peer URLs in ServiceConfig
DEFAULT_PORTS: Dict[str, int] = {
    "user_service": 8081,
    "order_service": 8082,
}

# Each service owns exactly one schema
DEFAULT_SCHEMAS: Dict[str, str] = {
    "user_service": "users",
    "order_service": "orders",
}


@dataclass
class ServiceSettings:
    """Resolved settings for one running service"""
    service_name: str
    service_host: str
    service_port: int
    user_service_url: str
    order_service_url: str
    http_timeout: float
    db_schema: str
    debug: bool = False


class ConfigManager:
    """Per-service configuration resolver"""

    def __init__(self, service_name: str):
        if service_name not in DEFAULT_PORTS:
            raise ValueError(f"Unknown service: {service_name}")
        self.service_name = service_name
        self.infra = InfraConfig.from_env()
        self.services = ServiceConfig.from_env()
        self.logging = LoggingConfig.from_env(service_name)
        self._settings: Optional[ServiceSettings] = None

    def get_service_config(self) -> ServiceSettings:
        """Get settings for this service (cached after first call)"""
        if self._settings is None:
            env_prefix = self.service_name.upper()
            port_env = os.getenv(f"{env_prefix}_PORT")
            try:
                port = int(port_env) if port_env else DEFAULT_PORTS[self.service_name]
            except ValueError:
                logger.warning(f"Invalid {env_prefix}_PORT={port_env!r}, using default")
                port = DEFAULT_PORTS[self.service_name]

            self._settings = ServiceSettings(
                service_name=self.service_name,
                service_host=os.getenv("SERVICE_HOST", "0.0.0.0"),
                service_port=port,
                user_service_url=self.services.user_service_url,
                order_service_url=self.services.order_service_url,
                http_timeout=self.services.http_timeout,
                db_schema=os.getenv(f"{env_prefix}_DB_SCHEMA", DEFAULT_SCHEMAS[self.service_name]),
                debug=os.getenv("DEBUG", "false").lower() == "true",
            )
        return self._settings

    def get_infra_config(self) -> InfraConfig:
        """Get database settings"""
        return self.infra

    def get_logging_config(self) -> LoggingConfig:
        """Get logging settings for this service"""
        return self.logging


__all__ = ["ConfigManager", "ServiceSettings", "DEFAULT_PORTS", "DEFAULT_SCHEMAS"]
