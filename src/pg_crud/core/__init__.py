"""Core query building, execution and inspection."""

from .builder import QueryBuilder
from .connection import DatabaseConnection
from .executor import QueryExecutor
from .inspector import check_connection, create_database, database_exists, table_exists

__all__ = [
    "DatabaseConnection",
    "QueryBuilder",
    "QueryExecutor",
    "check_connection",
    "create_database",
    "database_exists",
    "table_exists",
]
