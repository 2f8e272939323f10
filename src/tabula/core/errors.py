# src/tabula/core/errors.py
"""Exception taxonomy for schema lookups and statement execution."""

from typing import Optional


class TabulaError(Exception):
    """Base class for all tabula errors."""


class SchemaError(TabulaError):
    """The catalog is unreachable or the table does not exist."""

    def __init__(self, table: str, cause: Optional[BaseException] = None):
        self.table = table
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot read schema of table '{table}'{detail}")


class QueryError(TabulaError):
    """A statement failed to execute. Never retried."""

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")
