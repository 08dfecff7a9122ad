"""Pydantic models for configuration, queries and results."""

from .config import ConnectionInfo, DatabaseConfig
from .query import Query, QueryOptions, QueryResult

__all__ = [
    "ConnectionInfo",
    "DatabaseConfig",
    "Query",
    "QueryOptions",
    "QueryResult",
]
