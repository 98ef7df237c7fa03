"""
Order Service Factory Component Golden Tests

The factory wires the real repository and client without touching the
network or the database.
"""
import pytest

from core.config_manager import ConfigManager
from core.postgres_client import PostgresClientWrapper
from microservices.order_service.factory import create_order_service
from microservices.order_service.order_repository import OrderRepository
from microservices.order_service.clients import UserServiceClient
from microservices.order_service.order_service import OrderService
from microservices.order_service.protocols import OrderRepositoryProtocol, UserClientProtocol

from .mocks import MockUserClient

pytestmark = [pytest.mark.component, pytest.mark.golden, pytest.mark.asyncio]


class TestOrderFactoryGolden:

    async def test_builds_real_dependencies(self, monkeypatch, http_service):
        monkeypatch.setenv("USER_SERVICE_URL", "http://users.test:8081")

        service = create_order_service(
            config=ConfigManager("order_service"), transport=http_service.transport
        )

        assert isinstance(service, OrderService)
        assert isinstance(service.repo, OrderRepository)
        assert isinstance(service.repo.db, PostgresClientWrapper)
        assert isinstance(service.user_client, UserServiceClient)
        assert service.user_client.base_url == "http://users.test:8081"
        assert isinstance(service.repo, OrderRepositoryProtocol)
        assert isinstance(service.user_client, UserClientProtocol)
        await service.user_client.close()

    async def test_injected_client_is_kept(self):
        client = MockUserClient()

        service = create_order_service(config=ConfigManager("order_service"), user_client=client)

        assert service.user_client is client
