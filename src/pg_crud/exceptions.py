"""Exceptions raised by pg_crud operations."""

from typing import Optional


class PgCrudError(Exception):
    """Base class for errors raised by this package."""


class ValidationFailure(PgCrudError, ValueError):
    """Caller input was rejected before any query was issued."""


class QueryFailure(PgCrudError, RuntimeError):
    """A statement failed at the database.

    Wraps the driver error so callers get a stable message of the form
    ``Failed to <verb> <noun>: <underlying message>``.
    """

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class ConnectionFailure(PgCrudError, ConnectionError):
    """The database could not be reached or is missing."""
