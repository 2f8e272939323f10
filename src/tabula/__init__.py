"""
tabula: request-driven CRUD, pagination and sort links for a single table.
"""

from tabula.app import TabulaApp
from tabula.core import QueryError, SchemaError, Settings, TableConfig, TabulaError, log
from tabula.db import DbClient, DbConfig
from tabula.model import TableModel

__version__ = "0.1.0"

__all__ = [
    "TabulaApp",
    "TableModel",
    "TableConfig",
    "Settings",
    "DbClient",
    "DbConfig",
    "TabulaError",
    "SchemaError",
    "QueryError",
    "log",
]
