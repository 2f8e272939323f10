"""Core utilities: configuration, logging, errors and the query engine."""

from tabula.core.config import Settings, TableConfig
from tabula.core.errors import QueryError, SchemaError, TabulaError
from tabula.core.logging import Logger, color_palette, log

__all__ = [
    "Settings",
    "TableConfig",
    "TabulaError",
    "SchemaError",
    "QueryError",
    "Logger",
    "log",
    "color_palette",
]
