"""Row-level operations on a single table.

Every function takes the shared :class:`DatabaseConnection` explicitly and
runs exactly one statement. ``get_entry``, ``delete_entry`` and
``update_records`` wrap driver errors in :class:`QueryFailure`; the other
operations let them propagate unchanged.
"""

import logging
from typing import Any, Mapping, Optional, Union

from pg_crud.core.builder import QueryBuilder
from pg_crud.core.connection import DatabaseConnection
from pg_crud.core.executor import QueryExecutor
from pg_crud.exceptions import QueryFailure
from pg_crud.models.query import QueryOptions
from pg_crud.utils import convert_rows_to_json_safe

logger = logging.getLogger(__name__)

Row = dict[str, Any]
Options = Union[QueryOptions, Mapping[str, Any]]


async def create_table(
    table_name: str, pool: DatabaseConnection, columns_definition: str
) -> None:
    """
    Create a table if it does not exist yet.

    Args:
        table_name: Name of the table to create
        pool: Shared database connection
        columns_definition: SQL column definitions, e.g.
            ``"id SERIAL PRIMARY KEY, name TEXT NOT NULL"``
    """
    query = QueryBuilder(table_name).create_table(columns_definition)
    try:
        await QueryExecutor(pool).execute(query)
    except Exception as e:
        logger.error(f"Error creating table {table_name}: {e}")
        raise


async def add_row(table_name: str, data: Mapping[str, Any], pool: DatabaseConnection) -> Row:
    """
    Insert a row and return it as stored, generated columns included.

    Args:
        table_name: Name of the table
        data: Column names and values
        pool: Shared database connection

    Returns:
        The inserted row
    """
    query = QueryBuilder(table_name).insert(data)
    try:
        result = await QueryExecutor(pool).execute(query)
    except Exception as e:
        logger.error(f"Error adding row to table {table_name}: {e}")
        raise
    return result.first


async def get_all_from_table(table_name: str, pool: DatabaseConnection) -> list[Row]:
    """
    Fetch every row of a table.

    Raises:
        Exception: Whatever the driver raised
    """
    query = QueryBuilder(table_name).select_all()
    try:
        result = await QueryExecutor(pool).execute(query)
    except Exception as e:
        logger.error(f"Error fetching data from {table_name}: {e}")
        raise
    return result.rows


async def get_table_as_json(table_name: str, pool: DatabaseConnection) -> list[Row]:
    """Fetch every row of a table with values converted to JSON-safe types."""
    rows = await get_all_from_table(table_name, pool)
    return convert_rows_to_json_safe(rows)


async def get_entry(
    table_name: str,
    conditions: Mapping[str, Any],
    pool: DatabaseConnection,
    options: Optional[Options] = None,
) -> Union[Row, list[Row], None]:
    """
    Retrieve entries matching every condition.

    Args:
        table_name: The name of the table to query
        conditions: Column/value pairs, all of which must match
        pool: Shared database connection
        options: ``fields`` (a column name or list of names), ``sort``
            (``{column: 'asc'|'desc'}``) and ``max_entries`` (default 1)

    Returns:
        With ``max_entries`` above 1, the list of matching rows; otherwise
        the first matching row. ``None`` when nothing matched.

    Raises:
        QueryFailure: If the database query fails
    """
    options = QueryOptions.coerce(options)
    query = QueryBuilder(table_name).select(conditions, options)

    try:
        result = await QueryExecutor(pool).execute(query)
    except Exception as e:
        raise QueryFailure(
            f"Failed to retrieve entry from {table_name}: {e}", original=e
        ) from e

    if result.is_empty:
        return None
    if options.wants_many:
        return result.rows
    return result.first


async def delete_entry(
    table_name: str,
    conditions: Mapping[str, Any],
    pool: DatabaseConnection,
    options: Optional[Options] = None,
) -> Union[Row, int, None]:
    """
    Delete the rows matching every condition.

    Args:
        table_name: The name of the table to delete from
        conditions: Column/value pairs; at least one is required
        pool: Shared database connection
        options: ``returning=True`` to get the deleted row back

    Returns:
        The deleted row (or None) when ``returning`` is set, otherwise the
        number of rows deleted

    Raises:
        ValidationFailure: If ``conditions`` is empty; nothing is executed
        QueryFailure: If the database operation fails
    """
    options = QueryOptions.coerce(options)
    query = QueryBuilder(table_name).delete(conditions, returning=options.returning)

    try:
        result = await QueryExecutor(pool).execute(query)
    except Exception as e:
        raise QueryFailure(
            f"Failed to delete entry from {table_name}: {e}", original=e
        ) from e

    if options.returning:
        return result.first
    return result.row_count


async def update_records(
    table_name: str,
    pool: DatabaseConnection,
    conditions: Mapping[str, Any],
    updates: Mapping[str, Any],
) -> list[Row]:
    """
    Update the rows matching every condition.

    An empty ``conditions`` map updates every row in the table.

    Args:
        table_name: Name of the table to update records in
        pool: Shared database connection
        conditions: Column/value pairs for the WHERE clause
        updates: Column/value pairs to set

    Returns:
        The updated rows

    Raises:
        ValidationFailure: If ``updates`` is empty
        QueryFailure: If the database operation fails
    """
    query = QueryBuilder(table_name).update(conditions, updates)
    if not conditions:
        logger.warning(f"Updating every row of {table_name}: no conditions given")

    try:
        result = await QueryExecutor(pool).execute(query)
    except Exception as e:
        raise QueryFailure(f"Failed to update records: {e}", original=e) from e
    return result.rows
