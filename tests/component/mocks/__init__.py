"""Shared mocks for component tests"""
from .db_mock import MockPostgresClient
from .http_mock import MockHttpService

__all__ = ["MockPostgresClient", "MockHttpService"]
