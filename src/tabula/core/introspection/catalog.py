# src/tabula/core/introspection/catalog.py
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..errors import SchemaError
from ..logging import color_palette, log


class ColumnDescriptor(BaseModel):
    """A column name and the human-readable label shown for it."""

    name: str
    label: str


class SchemaIntrospector:
    """Reads column metadata of a single table from the database catalog."""

    def __init__(self, engine: Engine, schema: Optional[str] = None):
        self.engine = engine
        self.schema = schema

    def columns(self, table: str, with_label: bool = True) -> List[ColumnDescriptor]:
        """
        Columns of `table` in physical order.

        The label is the column comment, or the column name when the catalog
        has no comment. Raises SchemaError when the table cannot be read.
        """
        try:
            inspector = inspect(self.engine)
            if not inspector.has_table(table, schema=self.schema):
                raise SchemaError(table)
            column_data = inspector.get_columns(table, schema=self.schema)
        except SQLAlchemyError as e:
            raise SchemaError(table, e) from e

        log.debug(
            f"Read {len(column_data)} columns of "
            f"{color_palette['schema'](self.schema or 'default')}.{color_palette['table'](table)}"
        )

        columns = []
        for col in column_data:
            label = (col.get("comment") or col["name"]) if with_label else col["name"]
            columns.append(ColumnDescriptor(name=col["name"], label=label))
        return columns

    def column_names(self, table: str) -> List[str]:
        return [col.name for col in self.columns(table, with_label=False)]
