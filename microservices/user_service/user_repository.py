"""
User Repository

Data access layer for users using the asyncpg-backed PostgresClientWrapper.
Email uniqueness is enforced by a UNIQUE constraint as well as by the service.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import logging

import asyncpg

from core.config_manager import ConfigManager
from core.postgres_client import PostgresClientWrapper, get_postgres_client
from .models import User, UserStatus
from .protocols import DuplicateEmailError

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Repository for user data operations

    Implements UserRepositoryProtocol against PostgreSQL.
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        db: Optional[PostgresClientWrapper] = None
    ):
        """Initialize User Repository with PostgresClientWrapper"""
        if config is None:
            config = ConfigManager("user_service")

        self.db = db or get_postgres_client("user_service", config.get_infra_config())
        self.schema = config.get_service_config().db_schema
        self.users_table = "users"
        self.table = f"{self.schema}.{self.users_table}"

        logger.info(f"UserRepository initialized with table {self.table}")

    async def ensure_schema(self) -> None:
        """Create schema and table if missing"""
        await self.db.execute(f"CREATE SCHEMA IF NOT EXISTS {self.schema}")
        await self.db.execute(f'''
            CREATE TABLE IF NOT EXISTS {self.table} (
                user_id VARCHAR(64) PRIMARY KEY,
                name VARCHAR(100) NOT NULL,
                email VARCHAR(255) NOT NULL UNIQUE,
                status VARCHAR(20) NOT NULL,
                created_at TIMESTAMPTZ NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL
            )
        ''')
        await self.db.execute(
            f"CREATE INDEX IF NOT EXISTS idx_users_status ON {self.table} (status)"
        )
        logger.info(f"Schema ready: {self.table}")

    async def create_user(self, user: User) -> User:
        """Create a new user"""
        now = datetime.now(timezone.utc)
        query = f'''
            INSERT INTO {self.table}
                (user_id, name, email, status, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $5)
            RETURNING *
        '''
        try:
            row = await self.db.query_row(query, [
                user.user_id,
                user.name,
                user.email,
                user.status.value,
                now,
            ])
        except asyncpg.UniqueViolationError as e:
            raise DuplicateEmailError(f"Email already exists: {user.email}") from e
        except Exception as e:
            logger.error(f"Failed to create user {user.user_id}: {e}")
            raise

        if not row:
            raise RuntimeError(f"Insert returned no row for user {user.user_id}")
        return self._row_to_user(row)

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        row = await self.db.query_row(
            f"SELECT * FROM {self.table} WHERE user_id = $1", [user_id]
        )
        return self._row_to_user(row) if row else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by exact email"""
        row = await self.db.query_row(
            f"SELECT * FROM {self.table} WHERE email = $1", [email]
        )
        return self._row_to_user(row) if row else None

    async def save_user(self, user: User) -> Optional[User]:
        """Overwrite name, email and status; updated_at is set here"""
        query = f'''
            UPDATE {self.table}
            SET name = $1, email = $2, status = $3, updated_at = $4
            WHERE user_id = $5
            RETURNING *
        '''
        try:
            row = await self.db.query_row(query, [
                user.name,
                user.email,
                user.status.value,
                datetime.now(timezone.utc),
                user.user_id,
            ])
        except asyncpg.UniqueViolationError as e:
            raise DuplicateEmailError(f"Email already exists: {user.email}") from e
        except Exception as e:
            logger.error(f"Failed to save user {user.user_id}: {e}")
            raise
        return self._row_to_user(row) if row else None

    async def list_users(self) -> List[User]:
        """List all users"""
        rows = await self.db.query(f"SELECT * FROM {self.table} ORDER BY created_at, user_id")
        return [self._row_to_user(row) for row in rows]

    async def exists_by_id(self, user_id: str) -> bool:
        """Whether a user with this ID exists"""
        return bool(await self.db.query_value(
            f"SELECT EXISTS(SELECT 1 FROM {self.table} WHERE user_id = $1)", [user_id]
        ))

    async def exists_by_email(self, email: str) -> bool:
        """Whether a user with this exact email exists"""
        return bool(await self.db.query_value(
            f"SELECT EXISTS(SELECT 1 FROM {self.table} WHERE email = $1)", [email]
        ))

    async def count_by_status(self, status: UserStatus) -> int:
        """Count users in a status"""
        count = await self.db.query_value(
            f"SELECT COUNT(*) FROM {self.table} WHERE status = $1", [status.value]
        )
        return int(count or 0)

    async def health_check(self) -> bool:
        """Database connectivity check"""
        return await self.db.health_check()

    def _row_to_user(self, row: Dict[str, Any]) -> User:
        """Convert database row to User model"""
        return User(
            user_id=row["user_id"],
            name=row["name"],
            email=row["email"],
            status=UserStatus(row["status"]),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
