"""
Service Logger Setup

Configures stdlib logging for a service from LoggingConfig.

Usage:
    from core.logger import setup_service_logger
    logger = setup_service_logger("order_service")
"""

import logging
import sys
from typing import Optional

from .config import LoggingConfig

_configured = set()


def setup_service_logger(
    service_name: str,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure and return the logger for a service.

    Handlers are attached to the service's root-level logger once; calling
    this again for the same service returns the already configured logger.

    Args:
        service_name: Service name, used as the logger name
        config: Logging config (defaults to LoggingConfig.from_env())

    Returns:
        Configured logger
    """
    logger = logging.getLogger(service_name)
    if service_name in _configured:
        return logger

    config = config or LoggingConfig.from_env(service_name)
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    formatter = logging.Formatter(config.log_format)

    # Route both the service logger and the microservices package loggers
    # (module-level getLogger(__name__)) to the same handlers
    targets = [logger, logging.getLogger("microservices"), logging.getLogger("core")]

    handlers = []
    if config.enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        handlers.append(console)
    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for target in targets:
        # Package loggers are shared when both apps load in one process
        if target is not logger and target.handlers:
            continue
        target.setLevel(level)
        for handler in handlers:
            target.addHandler(handler)
        target.propagate = False

    _configured.add(service_name)
    logger.debug(
        f"Logger configured for {config.service_name} "
        f"(environment={config.environment}, level={config.log_level})"
    )
    return logger


__all__ = ["setup_service_logger"]
