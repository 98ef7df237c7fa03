"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    ├── core/                  Config, logger, request context, client helpers
    └── golden/
        ├── order_service/     Lifecycle table, models
        └── user_service/      Models

Usage:
    pytest tests/unit -v
    pytest tests/unit -m unit -v
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the config layer reads"""
    for name in (
        "USER_SERVICE_URL", "ORDER_SERVICE_URL", "USER_SERVICE_PORT", "ORDER_SERVICE_PORT",
        "USER_SERVICE_DB_SCHEMA", "ORDER_SERVICE_DB_SCHEMA", "SERVICE_HOST",
        "HTTP_CLIENT_TIMEOUT", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB",
        "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_POOL_MIN", "POSTGRES_POOL_MAX",
        "LOG_LEVEL", "LOG_FORMAT", "LOG_FILE", "DEBUG", "SERVICE_NAME", "ENV", "ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
