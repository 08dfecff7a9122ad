"""Single-statement query execution against the shared pool."""

import logging
import time

from pg_crud.core.connection import DatabaseConnection
from pg_crud.models.query import Query, QueryResult

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Runs one :class:`Query` per call on a pooled connection."""

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize query executor.

        Args:
            connection: Database connection manager (the shared pool)
        """
        self.connection = connection

    async def execute(self, query: Query) -> QueryResult:
        """
        Execute a statement and commit it.

        A connection is checked out for this statement only and returned to
        the pool afterwards, whether the statement succeeded or not.

        Args:
            query: Statement text with $n placeholders and its parameters

        Returns:
            Rows (when the statement returns any) and the row count. For
            statements without a result set the count is the number of rows
            affected.
        """
        start_time = time.time()
        logger.debug(f"Executing: {query.text} {list(query.params)}")

        async with self.connection.get_connection() as conn:
            result = await conn.exec_driver_sql(query.text, query.params)

            if result.returns_rows:
                columns = list(result.keys())
                rows = [dict(row) for row in result.mappings().all()]
                row_count = len(rows)
            else:
                columns = []
                rows = []
                row_count = result.rowcount

            await conn.commit()

        execution_time = (time.time() - start_time) * 1000  # Convert to ms

        return QueryResult(
            query=query.text,
            rows=rows,
            row_count=row_count,
            columns=columns,
            execution_time_ms=execution_time,
        )
