"""
pg_crud - async CRUD helpers for PostgreSQL

Builds single-table SELECT/INSERT/UPDATE/DELETE statements from condition
maps, binds every value as a positional parameter and runs them on a shared
SQLAlchemy (asyncpg) connection pool.
"""

__version__ = "1.0.0"

from pg_crud.bootstrap import close_pool, init_pool
from pg_crud.core import (
    DatabaseConnection,
    QueryBuilder,
    QueryExecutor,
    check_connection,
    create_database,
    database_exists,
    table_exists,
)
from pg_crud.crud import (
    add_row,
    create_table,
    delete_entry,
    get_all_from_table,
    get_entry,
    get_table_as_json,
    update_records,
)
from pg_crud.exceptions import (
    ConnectionFailure,
    PgCrudError,
    QueryFailure,
    ValidationFailure,
)
from pg_crud.models import ConnectionInfo, DatabaseConfig, Query, QueryOptions, QueryResult

__all__ = [
    "ConnectionFailure",
    "ConnectionInfo",
    "DatabaseConfig",
    "DatabaseConnection",
    "PgCrudError",
    "Query",
    "QueryBuilder",
    "QueryExecutor",
    "QueryFailure",
    "QueryOptions",
    "QueryResult",
    "ValidationFailure",
    "add_row",
    "check_connection",
    "close_pool",
    "create_database",
    "create_table",
    "database_exists",
    "delete_entry",
    "get_all_from_table",
    "get_entry",
    "get_table_as_json",
    "init_pool",
    "table_exists",
    "update_records",
]
