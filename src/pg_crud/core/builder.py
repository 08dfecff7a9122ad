"""SQL statement assembly from condition maps and query options.

Identifiers (table and column names, sort directions) are checked against an
allow-list before they are written into SQL text. Values never are: they are
collected into the parameter tuple and referenced as ``$1``, ``$2``...
"""

import re
from typing import Any, Mapping, Optional, Sequence, Union

from pg_crud.exceptions import ValidationFailure
from pg_crud.models.query import Query, QueryOptions
from pg_crud.utils.serialization import prepare_param

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")
SORT_DIRECTIONS = {"ASC", "DESC"}


def validate_identifier(name: str, kind: str = "column") -> str:
    """
    Check that a column name is a plain SQL identifier.

    Args:
        name: Identifier to check
        kind: What the identifier names, used in the error message

    Returns:
        The identifier unchanged

    Raises:
        ValidationFailure: If the name is not a plain identifier
    """
    if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
        raise ValidationFailure(f"Invalid {kind} name: {name!r}")
    return name


def validate_table_name(name: str) -> str:
    """Check a table name, allowing a single ``schema.`` prefix."""
    if not isinstance(name, str):
        raise ValidationFailure(f"Invalid table name: {name!r}")
    parts = name.split(".")
    if len(parts) > 2:
        raise ValidationFailure(f"Invalid table name: {name!r}")
    for part in parts:
        if not IDENTIFIER_RE.match(part):
            raise ValidationFailure(f"Invalid table name: {name!r}")
    return name


def quote_identifier(name: str) -> str:
    """Double-quote an identifier, doubling any embedded quotes."""
    if not name:
        raise ValidationFailure("Identifier must not be empty")
    return '"' + name.replace('"', '""') + '"'


def where_clause(
    conditions: Mapping[str, Any], start: int = 1
) -> tuple[str, list[Any]]:
    """
    Translate a condition map into an equality conjunction.

    Args:
        conditions: Column/value pairs, matched with ``=``
        start: Number of the first placeholder

    Returns:
        ``("WHERE a = $1 AND b = $2", [va, vb])``, or ``("", [])`` for an
        empty map
    """
    clauses = []
    params = []
    for offset, (column, value) in enumerate(conditions.items()):
        clauses.append(f"{validate_identifier(column)} = ${start + offset}")
        params.append(prepare_param(value))

    if not clauses:
        return "", []
    return "WHERE " + " AND ".join(clauses), params


def order_by_clause(sort: Optional[Mapping[str, str]]) -> str:
    """Translate ``{column: 'asc'|'desc'}`` into an ORDER BY clause."""
    if not sort:
        return ""

    items = []
    for column, direction in sort.items():
        normalized = str(direction).strip().upper()
        if normalized not in SORT_DIRECTIONS:
            raise ValidationFailure(
                f"Invalid sort direction for {column!r}: {direction!r}"
            )
        items.append(f"{validate_identifier(column)} {normalized}")
    return "ORDER BY " + ", ".join(items)


def projection(fields: Optional[Union[str, Sequence[str]]]) -> str:
    """Comma-joined column list, or ``*`` when no fields were requested."""
    if not fields:
        return "*"
    if isinstance(fields, str):
        fields = [field.strip() for field in fields.split(",")]
    return ", ".join(validate_identifier(field) for field in fields)


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


class QueryBuilder:
    """Builds one statement per call for a single table."""

    def __init__(self, table_name: str):
        self.table_name = validate_table_name(table_name)

    def select(
        self,
        conditions: Mapping[str, Any],
        options: Optional[QueryOptions] = None,
    ) -> Query:
        """``SELECT <fields> FROM <table> [WHERE] [ORDER BY] LIMIT <n>``."""
        options = options or QueryOptions()
        where, params = where_clause(conditions)
        text = _join(
            f"SELECT {projection(options.fields)} FROM {self.table_name}",
            where,
            order_by_clause(options.sort),
            f"LIMIT {options.limit}",
        )
        return Query(text=text, params=tuple(params))

    def select_all(self) -> Query:
        """Every row, no limit."""
        return Query(text=f"SELECT * FROM {self.table_name}")

    def insert(self, data: Mapping[str, Any]) -> Query:
        """Insert one row and return it with its generated defaults."""
        if not data:
            return Query(
                text=f"INSERT INTO {self.table_name} DEFAULT VALUES RETURNING *"
            )

        columns = ", ".join(validate_identifier(column) for column in data)
        placeholders = ", ".join(f"${index}" for index in range(1, len(data) + 1))
        return Query(
            text=(
                f"INSERT INTO {self.table_name} ({columns}) "
                f"VALUES ({placeholders}) RETURNING *"
            ),
            params=tuple(prepare_param(value) for value in data.values()),
        )

    def update(
        self, conditions: Mapping[str, Any], updates: Mapping[str, Any]
    ) -> Query:
        """
        ``UPDATE <table> SET ... [WHERE ...] RETURNING *``.

        WHERE placeholders are numbered after the SET placeholders. An empty
        condition map leaves out the WHERE clause, so every row is updated.

        Raises:
            ValidationFailure: If there is nothing to update
        """
        if not updates:
            raise ValidationFailure("At least one column to update is required")

        assignments = ", ".join(
            f"{validate_identifier(column)} = ${index}"
            for index, column in enumerate(updates, start=1)
        )
        params = [prepare_param(value) for value in updates.values()]
        where, where_params = where_clause(conditions, start=len(params) + 1)

        text = _join(
            f"UPDATE {self.table_name} SET {assignments}", where, "RETURNING *"
        )
        return Query(text=text, params=tuple(params + where_params))

    def delete(self, conditions: Mapping[str, Any], returning: bool = False) -> Query:
        """
        ``DELETE FROM <table> WHERE ... [RETURNING *]``.

        Raises:
            ValidationFailure: If no condition was given
        """
        if not conditions:
            raise ValidationFailure("At least one condition is required for safety")

        where, params = where_clause(conditions)
        text = _join(
            f"DELETE FROM {self.table_name}",
            where,
            "RETURNING *" if returning else "",
        )
        return Query(text=text, params=tuple(params))

    def create_table(self, columns_definition: str) -> Query:
        """Idempotent CREATE TABLE; the column definition is raw DDL."""
        return Query(
            text=f"CREATE TABLE IF NOT EXISTS {self.table_name} ({columns_definition})"
        )


def create_database_query(database_name: str) -> Query:
    """``CREATE DATABASE "<name>"``."""
    return Query(text=f"CREATE DATABASE {quote_identifier(database_name)}")
