"""
User Repository Component Golden Tests

UserRepository against a mocked PostgresClientWrapper.

Usage:
    pytest tests/component/golden/user_service/test_user_repository_golden.py -v
"""
import asyncpg
import pytest
from datetime import datetime, timezone

from core.config_manager import ConfigManager
from microservices.user_service.user_repository import UserRepository
from microservices.user_service.models import User, UserStatus
from microservices.user_service.protocols import DuplicateEmailError
from tests.fixtures import make_user

pytestmark = [pytest.mark.component, pytest.mark.golden, pytest.mark.asyncio]

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def user_row(**overrides):
    row = {
        "user_id": "user_alice",
        "name": "Alice",
        "email": "alice@example.com",
        "status": "ACTIVE",
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


@pytest.fixture
def repo(mock_db):
    return UserRepository(config=ConfigManager("user_service"), db=mock_db)


class TestUserRepositoryGolden:

    async def test_ensure_schema(self, repo, mock_db):
        await repo.ensure_schema()

        statements = [q[1] for q in mock_db.get_queries("execute")]
        assert "CREATE SCHEMA IF NOT EXISTS users" in statements[0]
        assert "CREATE TABLE IF NOT EXISTS users.users" in statements[1]
        assert "UNIQUE" in statements[1]

    async def test_create_user_maps_row(self, repo, mock_db):
        mock_db.set_row_response(user_row())

        created = await repo.create_user(make_user(user_id="user_alice", email="alice@example.com"))

        assert isinstance(created, User)
        assert created.status == UserStatus.ACTIVE
        assert created.created_at == NOW

    async def test_create_user_unique_violation(self, repo, mock_db):
        mock_db.set_error(asyncpg.UniqueViolationError("duplicate key value violates unique constraint"))

        with pytest.raises(DuplicateEmailError):
            await repo.create_user(make_user(email="alice@example.com"))

    async def test_save_user_unique_violation(self, repo, mock_db):
        mock_db.set_error(asyncpg.UniqueViolationError("duplicate key value violates unique constraint"))

        with pytest.raises(DuplicateEmailError):
            await repo.save_user(make_user(email="alice@example.com"))

    async def test_save_missing_user(self, repo):
        assert await repo.save_user(make_user()) is None

    async def test_get_user_by_email(self, repo, mock_db):
        mock_db.set_row_response(user_row())

        user = await repo.get_user_by_email("alice@example.com")

        assert user.user_id == "user_alice"
        assert mock_db.last_query[2] == ["alice@example.com"]

    async def test_exists_by_email(self, repo, mock_db):
        mock_db.set_value_response(True)

        assert await repo.exists_by_email("alice@example.com") is True

    async def test_exists_by_id_false(self, repo, mock_db):
        mock_db.set_value_response(False)

        assert await repo.exists_by_id("user_missing") is False

    async def test_count_by_status(self, repo, mock_db):
        mock_db.set_value_response(2)

        assert await repo.count_by_status(UserStatus.ACTIVE) == 2
        assert mock_db.last_query[2] == ["ACTIVE"]

    async def test_list_users(self, repo, mock_db):
        mock_db.set_rows_response([user_row(), user_row(user_id="user_bob", email="bob@example.com")])

        users = await repo.list_users()

        assert [u.user_id for u in users] == ["user_alice", "user_bob"]

    async def test_health_check_uses_client(self, repo, mock_db):
        assert await repo.health_check() is True
        assert mock_db.last_query[0] == "health_check"

    async def test_health_check_db_down(self, repo, mock_db):
        mock_db.set_healthy(False)

        assert await repo.health_check() is False
