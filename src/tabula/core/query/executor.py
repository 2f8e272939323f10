# src/tabula/core/query/executor.py
from typing import Any, Callable, Collection, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy.exc import SQLAlchemyError

from tabula.db.client import DbClient, ExecResult

from ..errors import QueryError
from ..logging import color_palette, escape, log
from .builder import Statement, StatementBuilder
from .state import QueryState

Row = Dict[str, Any]


class QueryExecutor:
    """Runs the statements of a QueryState through a DbClient."""

    def __init__(self, db: DbClient):
        self.db = db

    def _run(self, operation: str, build: Callable[[], Statement]) -> ExecResult:
        # Statements are never retried: an insert may already have landed
        try:
            statement = build()
            return self.db.execute(statement.sql, statement.params)
        except (SQLAlchemyError, ValueError, OverflowError, TypeError) as e:
            log.error(f"{color_palette['operation'](operation)} failed: {escape(str(e))}")
            raise QueryError(operation, e) from e

    def count(self, state: QueryState, count_expr: str = "COUNT(*)") -> int:
        """
        Count the rows matching the state's predicate and search clause.

        Args:
            state: Query fragments; its cached row count is refreshed
            count_expr: Aggregate expression to select

        Returns:
            The row count
        """
        result = self._run("count", lambda: StatementBuilder(state).count(count_expr))
        row = result.rows[0] if result.rows else {}
        count = int(next(iter(row.values()), 0) or 0)
        state.cached_row_count = count
        return count

    def list(self, state: QueryState) -> List[Row]:
        """Rows of the current page, as column-to-value mappings."""
        return self._run("list", lambda: StatementBuilder(state).list()).rows

    def get_by_key(self, state: QueryState, key: str, value: Any, select: str = "*") -> Optional[Row]:
        """
        Fetch one row by a key column.

        Args:
            state: Query fragments naming the table
            key: Column compared against `value`
            value: Bound key value
            select: Select list

        Returns:
            The first matching row, or None
        """
        rows = self._run("get", lambda: StatementBuilder(state).get_by_key(key, value, select)).rows
        return rows[0] if rows else None

    def insert(self, state: QueryState, fields: Mapping[str, Any], attributes: Collection[str]) -> ExecResult:
        """
        Insert one row from the allowed fields.

        Returns:
            ExecResult carrying the generated key in `last_insert_id`

        Raises:
            QueryError: No writable field remains, or the database rejects the row
        """
        return self._run("insert", lambda: StatementBuilder(state).insert(fields, attributes))

    def update(
        self,
        state: QueryState,
        fields: Mapping[str, Any],
        attributes: Collection[str],
        where: str,
        where_param: Optional[Any] = None,
    ) -> ExecResult:
        """
        Update the allowed fields of the rows matched by `where`.

        Args:
            state: Query fragments naming the table
            fields: Candidate column values; keys outside `attributes` are dropped
            attributes: Writable column allow-list
            where: Trailing clause, e.g. `WHERE id = ?`
            where_param: Value bound to the marker in `where`

        Returns:
            ExecResult with the affected row count
        """
        return self._run(
            "update", lambda: StatementBuilder(state).update(fields, attributes, where, where_param)
        )

    def delete(
        self,
        state: QueryState,
        where: str,
        where_param: Union[None, Any, Sequence[Any]] = None,
    ) -> ExecResult:
        """Delete the rows matched by `where`; a sequence `where_param` binds one value per marker."""
        return self._run("delete", lambda: StatementBuilder(state).delete(where, where_param))
