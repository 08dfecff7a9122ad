"""Database connection management with SQLAlchemy."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from pg_crud.models.config import DatabaseConfig

logger = logging.getLogger(__name__)


def ssl_connect_args(url: str) -> tuple[str, dict[str, Any]]:
    """
    Move libpq style SSL query options into asyncpg connect arguments.

    asyncpg rejects an ``sslmode`` keyword, so ``sslmode`` (or the shorter
    ``ssl``) is stripped from the URL and translated into the ``ssl``
    argument asyncpg understands.

    Args:
        url: Database URL, possibly carrying ``sslmode`` or ``ssl``

    Returns:
        The URL without the SSL option and the connect arguments to pass on
    """
    connect_args: dict[str, Any] = {}
    url_obj = make_url(url)
    if not url_obj.query:
        return url, connect_args

    if "sslmode" in url_obj.query:
        sslmode = url_obj.query["sslmode"]
        if sslmode in ["require", "prefer", "allow", "verify-ca", "verify-full"]:
            connect_args["ssl"] = sslmode
        elif sslmode == "disable":
            connect_args["ssl"] = False
        url_obj = url_obj.difference_update_query(["sslmode"])
    elif "ssl" in url_obj.query:
        ssl_value = url_obj.query["ssl"]
        if ssl_value in ["require", "true", "1"]:
            connect_args["ssl"] = "require"
        elif ssl_value in ["false", "0", "disable"]:
            connect_args["ssl"] = False
        url_obj = url_obj.difference_update_query(["ssl"])
    else:
        return url, connect_args

    return url_obj.render_as_string(hide_password=False), connect_args


class DatabaseConnection:
    """Manages the SQLAlchemy async engine and its connection pool.

    This is the pool handle every operation receives. It is shared by all
    callers for the life of the process; create it once, call
    :meth:`initialize`, and :meth:`dispose` it on shutdown (or use it as an
    async context manager).
    """

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database connection.

        Args:
            config: Database configuration with connection URL and pool settings
        """
        self.config = config
        self.engine: Optional[AsyncEngine] = None

    async def initialize(self) -> None:
        """Create the async engine. Safe to call more than once."""
        if self.engine is not None:
            return  # Already initialized

        engine_args: dict[str, Any] = {
            "pool_size": self.config.pool_size,
            "max_overflow": self.config.max_overflow,
            "pool_timeout": self.config.pool_timeout,
            "pool_pre_ping": True,  # Verify connections before using
            "echo": self.config.echo_sql,
        }
        if self.config.autocommit:
            engine_args["isolation_level"] = "AUTOCOMMIT"

        url, connect_args = ssl_connect_args(self.config.url)
        if connect_args:
            engine_args["connect_args"] = connect_args

        self.engine = create_async_engine(url, **engine_args)
        logger.debug(f"Created engine for database {self.config.database!r}")

    async def dispose(self) -> None:
        """Dispose of the connection pool and cleanup resources."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            logger.debug(f"Disposed engine for database {self.config.database!r}")

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[AsyncConnection, None]:
        """
        Check a connection out of the pool as an async context manager.

        The connection goes back to the pool when the block exits; anything
        not committed by then is rolled back.

        Yields:
            AsyncConnection for executing queries

        Raises:
            RuntimeError: If engine not initialized
        """
        if self.engine is None:
            raise RuntimeError(
                "DatabaseConnection not initialized. Call initialize() first."
            )

        async with self.engine.connect() as conn:
            if self.config.statement_timeout:
                await self._set_timeout(conn, self.config.statement_timeout)
            yield conn

    async def _set_timeout(self, conn: AsyncConnection, timeout: int) -> None:
        """Set the session statement timeout."""
        timeout_ms = timeout * 1000
        await conn.execute(text(f"SET statement_timeout = {timeout_ms}"))

    @property
    def database(self) -> Optional[str]:
        """Name of the database this pool connects to."""
        return self.config.database

    async def __aenter__(self) -> "DatabaseConnection":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.dispose()
