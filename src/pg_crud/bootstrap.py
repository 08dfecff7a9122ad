"""Pool lifecycle helpers for applications using pg_crud."""

import logging
from typing import Optional

from pg_crud.core.connection import DatabaseConnection
from pg_crud.core.inspector import check_connection, database_exists
from pg_crud.exceptions import ConnectionFailure
from pg_crud.models.config import DatabaseConfig

logger = logging.getLogger(__name__)


async def init_pool(config: Optional[DatabaseConfig] = None) -> DatabaseConnection:
    """
    Create the shared pool and verify it can reach its database.

    Args:
        config: Database configuration; read from the environment when omitted

    Returns:
        An initialized DatabaseConnection owned by the caller

    Raises:
        ConnectionFailure: If the server is unreachable or the database is missing
    """
    if config is None:
        config = DatabaseConfig.from_env()

    pool = DatabaseConnection(config)
    await pool.initialize()

    if not await check_connection(pool, verbose=True):
        await pool.dispose()
        raise ConnectionFailure("Database connection failed")

    if not await database_exists(config.database, pool, verbose=True):
        await pool.dispose()
        raise ConnectionFailure(f"Database {config.database} doesn't exist")

    logger.info("Database connection successful")
    return pool


async def close_pool(pool: DatabaseConnection) -> None:
    """Dispose of a pool created by :func:`init_pool`."""
    await pool.dispose()
    logger.info("Database connection pool closed")
