"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── golden/      Service behavior with mocked repositories and clients
    └── mocks/       Shared mock implementations

Usage:
    pytest tests/component -v
    pytest tests/component/golden/order_service -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tests.component.mocks import MockHttpService, MockPostgresClient


@pytest.fixture
def http_service() -> MockHttpService:
    """Scripted remote service behind an httpx.MockTransport"""
    return MockHttpService()


@pytest.fixture
def mock_db() -> MockPostgresClient:
    """Mock PostgreSQL client"""
    return MockPostgresClient()
