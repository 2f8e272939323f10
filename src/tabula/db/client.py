# src/tabula/db/client.py
"""Statement execution on top of a SQLAlchemy engine."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine, Inspector

from tabula.core.config import Settings
from tabula.core.logging import color_palette, escape, log

QUOTES = ("'", '"', "`")


class DbConfig(BaseModel):
    """Connection settings for the engine."""

    url: str
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None
    pool_pre_ping: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "DbConfig":
        return cls(url=settings.database_url, echo=settings.debug)


@dataclass
class ExecResult:
    """Outcome of one statement."""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    last_insert_id: Optional[Any] = None
    rows_affected: int = 0


def bind_positional(sql: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Turn `?` markers into named binds understood by `sqlalchemy.text`.

    Markers inside quoted literals are left alone. Every other colon is
    escaped so fragment text can never introduce a bind of its own.
    """
    out: List[str] = []
    binds: Dict[str, Any] = {}
    quote = None
    for ch in sql:
        if ch == ":":
            out.append("\\:")
        elif quote is not None:
            if ch == quote:
                quote = None
            out.append(ch)
        elif ch in QUOTES:
            quote = ch
            out.append(ch)
        elif ch == "?":
            index = len(binds)
            if index >= len(params):
                raise ValueError(f"Statement has more markers than the {len(params)} value(s) given")
            name = f"p{index}"
            binds[name] = params[index]
            out.append(f":{name}")
        else:
            out.append(ch)

    if len(binds) != len(params):
        raise ValueError(f"Statement has {len(binds)} marker(s) but {len(params)} value(s) were given")
    return "".join(out), binds


class DbClient:
    """Owns the engine and executes prepared statements."""

    def __init__(self, config: Optional[DbConfig] = None, engine: Optional[Engine] = None):
        if engine is None and config is None:
            raise ValueError("DbClient needs a DbConfig or an Engine")
        self.config = config
        self.engine = engine if engine is not None else self._create_engine(config)

    @staticmethod
    def _create_engine(config: DbConfig) -> Engine:
        options: Dict[str, Any] = {"echo": config.echo, "pool_pre_ping": config.pool_pre_ping}
        if config.pool_size is not None:
            options["pool_size"] = config.pool_size
        if config.max_overflow is not None:
            options["max_overflow"] = config.max_overflow
        return create_engine(config.url, **options)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        """Run one statement with positionally bound values."""
        statement, binds = bind_positional(sql, list(params))
        log.debug(f"{color_palette['sql'](' '.join(sql.split()))} {escape(str(list(params)))}")

        with self.engine.begin() as conn:
            result = conn.execute(text(statement), binds)
            if result.returns_rows:
                rows = [dict(row) for row in result.mappings()]
                return ExecResult(rows=rows, rows_affected=len(rows))
            return ExecResult(
                last_insert_id=getattr(result, "lastrowid", None),
                rows_affected=result.rowcount,
            )

    def inspector(self) -> Inspector:
        return inspect(self.engine)

    def test_connection(self) -> None:
        """Raise if the database cannot be reached."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        log.success(f"Connected to {color_palette['schema'](self.engine.url.render_as_string(hide_password=True))}")
