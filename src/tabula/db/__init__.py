"""Database connectivity for tabula."""

from tabula.db.client import DbClient, DbConfig, ExecResult, bind_positional

__all__ = ["DbClient", "DbConfig", "ExecResult", "bind_positional"]
