"""
API Test Layer Configuration

HTTP contract tests for the FastAPI apps, run in-process through
httpx.ASGITransport. The service dependency is overridden with a service
built on the component-layer mocks, so no database or peer is needed.

Usage:
    pytest tests/api -v
    pytest tests/api -v -k "order"
"""

import os
import sys
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"

# Add project root
sys.path.insert(
    0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
)

from microservices.order_service import main as order_main
from microservices.order_service.order_service import OrderService
from microservices.user_service import main as user_main
from microservices.user_service.user_service import UserService
from tests.component.golden.order_service.mocks import MockOrderRepository, MockUserClient
from tests.component.golden.user_service.mocks import MockUserRepository, MockOrderClient


class APITestConfig:
    """API test configuration"""

    BASE_URL = "http://testserver"
    HTTP_TIMEOUT = 5.0


# =============================================================================
# Order service app
# =============================================================================

@pytest.fixture
def order_repo() -> MockOrderRepository:
    return MockOrderRepository()


@pytest.fixture
def user_client() -> MockUserClient:
    client = MockUserClient()
    client.set_user("user_alice", name="Alice")
    return client


@pytest_asyncio.fixture
async def order_api(order_repo, user_client) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the order_service app"""
    service = OrderService(repository=order_repo, user_client=user_client)
    order_main.app.dependency_overrides[order_main.get_order_service] = lambda: service
    transport = httpx.ASGITransport(app=order_main.app)
    async with httpx.AsyncClient(
        transport=transport, base_url=APITestConfig.BASE_URL, timeout=APITestConfig.HTTP_TIMEOUT
    ) as client:
        yield client
    order_main.app.dependency_overrides.clear()


# =============================================================================
# User service app
# =============================================================================

@pytest.fixture
def user_repo() -> MockUserRepository:
    return MockUserRepository()


@pytest.fixture
def order_client() -> MockOrderClient:
    return MockOrderClient()


@pytest_asyncio.fixture
async def user_api(user_repo, order_client) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the user_service app"""
    service = UserService(repository=user_repo, order_client=order_client)
    user_main.app.dependency_overrides[user_main.get_user_service] = lambda: service
    transport = httpx.ASGITransport(app=user_main.app)
    async with httpx.AsyncClient(
        transport=transport, base_url=APITestConfig.BASE_URL, timeout=APITestConfig.HTTP_TIMEOUT
    ) as client:
        yield client
    user_main.app.dependency_overrides.clear()
