"""Query artifact, option and result models."""

from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pg_crud.exceptions import ValidationFailure


class Query(BaseModel):
    """A single SQL statement and its positional parameters.

    Placeholders are written as ``$1``, ``$2``... and match ``params`` by
    position. Built fresh for every call and never reused.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="SQL text with $n placeholders")
    params: tuple[Any, ...] = Field(
        default=(), description="Values bound to the placeholders, in order"
    )

    def __str__(self) -> str:
        return self.text


class QueryOptions(BaseModel):
    """Options accepted by select and delete operations."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    fields: Optional[Union[str, Sequence[str]]] = Field(
        default=None, description="Columns to project (defaults to all columns)"
    )
    sort: Optional[Mapping[str, str]] = Field(
        default=None, description="Sort criteria as {column: 'asc'|'desc'}"
    )
    max_entries: Optional[int] = Field(
        default=None,
        alias="maxEntries",
        description="Maximum number of rows to return (defaults to 1)",
    )
    returning: bool = Field(
        default=False, description="Return the affected row from a delete"
    )

    @property
    def limit(self) -> int:
        """Row cap for the LIMIT clause."""
        if self.max_entries is not None and self.max_entries > 0:
            return self.max_entries
        return 1

    @property
    def wants_many(self) -> bool:
        """Whether the caller asked for a list of rows instead of one row."""
        return self.max_entries is not None and self.max_entries > 1

    @classmethod
    def coerce(
        cls, options: Optional[Union["QueryOptions", Mapping[str, Any]]]
    ) -> "QueryOptions":
        """Accept an options instance, a plain mapping, or None."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise ValidationFailure(f"Invalid query options: {e}") from e


class QueryResult(BaseModel):
    """Result of a query execution."""

    query: str = Field(..., description="Executed SQL query")
    rows: list[dict[str, Any]] = Field(
        default_factory=list, description="Result rows as dictionaries"
    )
    row_count: int = Field(
        ..., description="Rows returned, or rows affected for statements without RETURNING"
    )
    columns: list[str] = Field(default_factory=list, description="Column names in order")
    execution_time_ms: Optional[float] = Field(
        None, description="Execution time in milliseconds"
    )

    @property
    def is_empty(self) -> bool:
        """Check if result set is empty."""
        return not self.rows

    @property
    def first(self) -> Optional[dict[str, Any]]:
        """First row, or None when nothing came back."""
        return self.rows[0] if self.rows else None
