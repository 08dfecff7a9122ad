"""Liveness probing and catalog existence checks.

The error policy differs per check and callers rely on it:

- :func:`check_connection`, :func:`database_exists` and
  :func:`create_database` never raise; any failure becomes ``False``.
- :func:`table_exists` lets query failures propagate.
"""

import logging

from pg_crud.core.builder import create_database_query
from pg_crud.core.connection import DatabaseConnection
from pg_crud.core.executor import QueryExecutor
from pg_crud.models.config import ADMIN_DATABASE, ConnectionInfo, DatabaseConfig
from pg_crud.models.query import Query

logger = logging.getLogger(__name__)

LIVENESS_QUERY = "SELECT NOW()"
DATABASE_EXISTS_QUERY = "SELECT 1 FROM pg_database WHERE datname = $1"
TABLE_EXISTS_QUERY = (
    "SELECT 1 FROM information_schema.tables "
    "WHERE table_schema = $1 AND table_name = $2"
)


def _log_swallowed(message: str, error: BaseException, verbose: bool) -> None:
    if verbose:
        logger.error(f"{message}: {error}")
    else:
        logger.debug(f"{message}: {error}")


async def check_connection(pool: DatabaseConnection, verbose: bool = False) -> bool:
    """
    Test database connectivity.

    Args:
        pool: Shared database connection
        verbose: Log the failure at ERROR instead of DEBUG

    Returns:
        True if connection successful, False otherwise
    """
    try:
        await QueryExecutor(pool).execute(Query(text=LIVENESS_QUERY))
        return True
    except Exception as e:
        _log_swallowed("Database connection failed", e, verbose)
        return False


async def database_exists(
    database_name: str, pool: DatabaseConnection, verbose: bool = False
) -> bool:
    """
    Check whether a database exists on the server.

    Args:
        database_name: Name to look up in pg_database
        pool: Shared database connection
        verbose: Log the failure at ERROR instead of DEBUG

    Returns:
        True if the database exists; False if it does not or the check failed
    """
    try:
        result = await QueryExecutor(pool).execute(
            Query(text=DATABASE_EXISTS_QUERY, params=(database_name,))
        )
        return result.row_count > 0
    except Exception as e:
        _log_swallowed("Error checking if database exists", e, verbose)
        return False


async def table_exists(
    table_name: str,
    pool: DatabaseConnection,
    schema: str = "public",
    verbose: bool = False,
) -> bool:
    """
    Check whether a table exists in the current database.

    Args:
        table_name: Table to look up
        pool: Shared database connection
        schema: Schema the table lives in
        verbose: Log the failure at ERROR before re-raising

    Returns:
        True if the table exists, False otherwise

    Raises:
        Exception: Whatever the driver raised if the catalog query failed
    """
    try:
        result = await QueryExecutor(pool).execute(
            Query(text=TABLE_EXISTS_QUERY, params=(schema, table_name))
        )
        return result.row_count > 0
    except Exception as e:
        if verbose:
            logger.error(f"Error checking if table exists: {e}")
        raise


async def create_database(
    info: ConnectionInfo, database_name: str, verbose: bool = False
) -> bool:
    """
    Create a database by connecting to the server's ``postgres`` database.

    A dedicated engine is opened for this call and disposed on every path.

    Args:
        info: Server host, port and credentials
        database_name: Name of the database to create
        verbose: Log the failure at ERROR instead of DEBUG

    Returns:
        True if the database was created, False otherwise
    """
    try:
        query = create_database_query(database_name)
        config = DatabaseConfig(
            url=info.admin_url(ADMIN_DATABASE),
            pool_size=1,
            max_overflow=0,
            autocommit=True,
        )
    except Exception as e:
        _log_swallowed("Database creation failed", e, verbose)
        return False

    try:
        async with DatabaseConnection(config) as admin:
            await QueryExecutor(admin).execute(query)
    except Exception as e:
        _log_swallowed(
            f"Database creation failed (connected to {ADMIN_DATABASE!r} "
            f"on {info.host}:{info.port})",
            e,
            verbose,
        )
        return False

    logger.info(f"Created database {database_name!r}")
    return True
