"""Pytest configuration and shared fixtures for pg_crud tests"""

import os
import sys
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import pytest
from dotenv import load_dotenv

from pg_crud.core import DatabaseConnection, QueryExecutor
from pg_crud.crud import create_table
from pg_crud.models.config import DatabaseConfig
from pg_crud.models.query import Query

# Load environment variables
load_dotenv()

# Fix for Windows: asyncpg requires SelectorEventLoop on Windows
if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())  # type: ignore[attr-defined]


# ==================== Scripted fake pool ====================


class FakeResult:
    """Stands in for a SQLAlchemy CursorResult."""

    def __init__(self, rows: Optional[list[dict[str, Any]]] = None, rowcount: int = -1):
        self._rows = rows
        self.returns_rows = rows is not None
        self.rowcount = rowcount

    def keys(self) -> list[str]:
        return list(self._rows[0].keys()) if self._rows else []

    def mappings(self) -> "FakeResult":
        return self

    def all(self) -> list[dict[str, Any]]:
        return list(self._rows or [])


class FakeConnection:
    """Records every statement and replays scripted results."""

    def __init__(self, pool: "FakePool"):
        self.pool = pool

    async def exec_driver_sql(self, statement: str, parameters=None):
        self.pool.executed.append((statement, tuple(parameters or ())))
        if not self.pool.responses:
            return FakeResult(rows=None, rowcount=0)
        response = self.pool.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def commit(self) -> None:
        self.pool.commits += 1


class FakePool:
    """In-memory replacement for DatabaseConnection used by unit tests."""

    def __init__(self):
        self.executed: list[tuple[str, tuple]] = []
        self.responses: list[Any] = []
        self.commits = 0
        self.checkouts = 0
        self.disposed = False

    def returns(self, rows: Optional[list[dict[str, Any]]] = None, rowcount: int = -1):
        """Queue the result of the next statement."""
        self.responses.append(FakeResult(rows=rows, rowcount=rowcount))
        return self

    def fails(self, error: BaseException):
        """Make the next statement raise ``error``."""
        self.responses.append(error)
        return self

    @property
    def last_query(self) -> tuple[str, tuple]:
        return self.executed[-1]

    @asynccontextmanager
    async def get_connection(self):
        self.checkouts += 1
        yield FakeConnection(self)

    async def dispose(self) -> None:
        self.disposed = True

    async def __aenter__(self) -> "FakePool":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.dispose()


@pytest.fixture
def fake_pool() -> FakePool:
    """A pool that records statements instead of talking to PostgreSQL"""
    return FakePool()


# ==================== Environment ====================

ENV_VARS = ["DATABASE_URL", "db_username", "db_password", "db_host", "db_port", "db_name"]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Empty database environment and an empty working directory for dotenv"""
    for name in ENV_VARS:
        # setenv first so whatever dotenv loads is rolled back on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


# ==================== PostgreSQL Fixtures ====================


@pytest.fixture(scope="session")
def pg_database_url() -> Optional[str]:
    """PostgreSQL test database URL from environment"""
    return os.getenv("PG_TEST_DATABASE_URL")


@pytest.fixture
async def pg_config(pg_database_url: Optional[str]) -> DatabaseConfig:
    """PostgreSQL database configuration"""
    if not pg_database_url:
        pytest.skip("PG_TEST_DATABASE_URL not set in environment")
    return DatabaseConfig(url=pg_database_url)


@pytest.fixture
async def pg_connection(
    pg_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnection, None]:
    """PostgreSQL database connection with proper cleanup"""
    connection = DatabaseConnection(pg_config)
    await connection.initialize()
    try:
        yield connection
    finally:
        await connection.dispose()


@pytest.fixture
async def users_table(pg_connection: DatabaseConnection) -> AsyncGenerator[str, None]:
    """An empty ``users`` style table, dropped after the test"""
    table_name = f"users_{uuid.uuid4().hex[:8]}"
    await create_table(
        table_name, pg_connection, "id SERIAL PRIMARY KEY, name TEXT NOT NULL"
    )
    try:
        yield table_name
    finally:
        await QueryExecutor(pg_connection).execute(
            Query(text=f"DROP TABLE IF EXISTS {table_name}")
        )


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "postgresql: PostgreSQL-specific tests")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )
