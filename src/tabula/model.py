# src/tabula/model.py
"""
Request-scoped CRUD model for a single table.

A TableModel is built for one unit of work (usually one HTTP request) from
a shared, read-only TableConfig and the raw request parameters. Subclass it
per table, or use it directly with `TableConfig(table=...)`.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from tabula.core.config import TableConfig
from tabula.core.introspection import ColumnDescriptor, SchemaIntrospector
from tabula.core.navigation import paginator, sorting
from tabula.core.navigation.paginator import PaginationLabels
from tabula.core.query import (
    FilterKind,
    FilterRule,
    QueryExecutor,
    QueryState,
    SortDirection,
    empty_check,
    in_clause,
    normalize,
    serialize_hidden_fields,
    serialize_query_string,
    validate,
)
from tabula.core.query.params import STRING, RawParams
from tabula.db.client import DbClient, ExecResult
from tabula.render import PayloadPresenter, Presenter

Row = Dict[str, Any]

LIST_ACTION_RULES = {
    "req": STRING,
    "ids": FilterRule(kind=FilterKind.INTEGER, force_array=True, min_value=1),
}


class TableModel:
    labels = PaginationLabels()

    def __init__(
        self,
        config: TableConfig,
        db: DbClient,
        raw_params: Optional[RawParams] = None,
        presenter: Optional[Presenter] = None,
    ):
        self.config = config
        self.db = db
        self.raw_params: RawParams = raw_params or {}
        self.presenter = presenter or PayloadPresenter()

        self.table = self.table_name(config)
        self.namespace = self.namespace_for(config)
        qualified = f"{config.db_schema}.{self.table}" if config.db_schema else self.table

        self.state = QueryState(table=qualified)
        self.executor = QueryExecutor(db)
        self.introspector = SchemaIntrospector(db.engine, config.db_schema)
        self.query_params = normalize(self.raw_params, config.rows_per_page)
        self._columns: Dict[bool, List[ColumnDescriptor]] = {}

    @classmethod
    def table_name(cls, config: TableConfig) -> str:
        """Explicit table, or the lowercased class name."""
        return config.table or cls.__name__.lower()

    @classmethod
    def namespace_for(cls, config: TableConfig) -> str:
        return config.namespace or cls.table_name(config)

    # ===== Query string =====

    @property
    def list_path(self) -> str:
        return f"{self.config.base_path}/{self.namespace}"

    def query_string(self) -> str:
        return serialize_query_string(self.query_params)

    def hidden_fields(self) -> str:
        return serialize_hidden_fields(self.query_params)

    def redirect_target(self, path: str) -> str:
        return f"{path}?{self.query_string().lstrip('&')}"

    # ===== Schema and request variables =====

    def schema_columns(self, with_label: bool = True) -> List[ColumnDescriptor]:
        if with_label not in self._columns:
            self._columns[with_label] = self.introspector.columns(self.table, with_label)
        return self._columns[with_label]

    def schema_column(self, column: Optional[str]) -> Optional[str]:
        """
        Resolve a request-supplied column reference against the table schema.

        Args:
            column: Bare column name, or one qualified with this table's name

        Returns:
            The column name as read from the catalog, or None when the
            reference does not name a column of this table exactly
        """
        if not column:
            return None
        prefixes = {f"{self.table}.", f"{self.state.table}."}
        for col in self.schema_columns(with_label=False):
            if column == col.name or any(column == prefix + col.name for prefix in prefixes):
                return col.name
        return None

    def empty_vars(self, required: Sequence[str], raw: Optional[RawParams] = None) -> Union[str, bool]:
        return empty_check(self.raw_params if raw is None else raw, required)

    def validate_vars(
        self,
        rules: Optional[Mapping[str, FilterRule]] = None,
        raw: Optional[RawParams] = None,
    ) -> Dict[str, Any]:
        """Sanitize request variables; every table column is a string rule by default."""
        if rules is None:
            rules = {col.name: STRING for col in self.schema_columns(with_label=False)}
        return validate(self.raw_params if raw is None else raw, rules)

    # ===== Reading =====

    def _apply_search(self) -> None:
        params = self.query_params
        column = self.schema_column(params.sfl) if params.stx else None
        if column is not None:
            self.state.search_clause = f"{column} LIKE ?"
            self.state.search_params = [f"%{params.stx}%"]
        else:
            self.state.search_clause = ""
            self.state.search_params = []

    def total_count(self, count_expr: str = "COUNT(*)") -> int:
        """
        Count the rows of the list view and cache the result on the state.

        Args:
            count_expr: Aggregate expression, e.g. `COUNT(DISTINCT email)`

        Returns:
            Rows matching the base predicate and the current search
        """
        self._apply_search()
        return self.executor.count(self.state, count_expr)

    def total_pages(self) -> int:
        if not self.state.is_counted:
            self.total_count()
        return paginator.total_pages(self.state.cached_row_count, self.query_params.rows)

    def get_list(self, order: Optional[str] = None, limit: Optional[str] = None) -> List[Row]:
        """
        Fetch the rows of the current page.

        Args:
            order: Full ORDER BY clause overriding the requested sort
            limit: Full LIMIT clause overriding the page window

        Returns:
            List of rows as column-to-value mappings
        """
        params = self.query_params
        self._apply_search()

        if order is not None:
            self.state.order_clause = order
        elif not self.state.order_clause:
            column = self.schema_column(params.sst)
            if column is not None:
                direction = (params.sod or SortDirection.ASC).value
                self.state.order_clause = f"ORDER BY {column} {direction}"

        if limit is None:
            self.state.limit_clause = "LIMIT ? OFFSET ?"
            self.state.limit_params = [params.rows, params.offset]
        else:
            self.state.limit_clause = limit
            self.state.limit_params = []

        return self.executor.list(self.state)

    def get_row(self, key: str, value: Any, select: str = "*") -> Optional[Row]:
        """
        Fetch one row.

        Args:
            key: Column to match, usually the key column
            value: Value bound against `key`
            select: Select list; replaces the state's select list when given

        Returns:
            The row, or None when nothing matches
        """
        if select != "*":
            self.state.select_list = select
        return self.executor.get_by_key(self.state, key, value, self.state.select_list)

    # ===== Navigation =====

    def paging(self) -> str:
        return paginator.render(
            self.query_params.page,
            self.total_pages(),
            self.list_path,
            self.query_params,
            self.config.page_window,
            self.labels,
        )

    def order_by(
        self,
        label: str,
        column: str,
        direction: Union[SortDirection, str] = SortDirection.ASC,
        css_class: Optional[str] = None,
    ) -> str:
        """
        Render a sort anchor for `column`.

        Args:
            label: Visible link text
            column: Column the link sorts by
            direction: Direction used when `column` is not the current sort
            css_class: Optional class attribute of the anchor

        Returns:
            Anchor markup toggling the direction when `column` is already sorted
        """
        return sorting.render(label, column, direction, self.query_params, self.list_path, css_class)

    def column_sort_links(self) -> Dict[str, str]:
        return {col.name: self.order_by(col.label, col.name) for col in self.schema_columns()}

    def heading(self) -> str:
        if self.config.heading:
            return self.config.heading
        return self.namespace[:1].upper() + self.namespace[1:]

    # ===== Writing =====

    def insert(self, fields: Mapping[str, Any]) -> ExecResult:
        """
        Insert one row.

        Args:
            fields: Column values; only configured attributes are written

        Returns:
            ExecResult with the generated key in `last_insert_id`
        """
        return self.executor.insert(self.state, fields, self.config.attributes)

    def update(self, fields: Mapping[str, Any], where: str, where_param: Optional[Any] = None) -> ExecResult:
        """
        Update rows.

        Args:
            fields: Column values; only configured attributes are written
            where: Trailing clause with one `?` marker, e.g. `WHERE id = ?`
            where_param: Value bound to the marker

        Returns:
            ExecResult with the affected row count
        """
        return self.executor.update(self.state, fields, self.config.attributes, where, where_param)

    def delete(self, where: str, where_param: Union[None, Any, Sequence[Any]] = None) -> ExecResult:
        """
        Delete rows.

        Args:
            where: Trailing clause, e.g. `WHERE id IN (?, ?)`
            where_param: One value, or a sequence with one value per marker

        Returns:
            ExecResult with the affected row count
        """
        return self.executor.delete(self.state, where, where_param)

    # ===== Views =====

    def rows(self) -> Any:
        """List page: heading, count, pagination, current page rows and sort links."""
        heading = self.heading()
        count = self.total_count()
        paging = self.paging()
        rows = self.get_list()
        cols = self.column_sort_links()
        return self.presenter.present_list(heading, count, paging, rows, cols, self.hidden_fields())

    def rows_update(self) -> str:
        """Apply a list action and return the list page to redirect to."""
        values = validate(self.raw_params, LIST_ACTION_RULES)
        ids = values.get("ids") or []
        if values.get("req") == "list-delete" and ids:
            self.delete(in_clause(self.config.key_column, ids), ids)
        return self.redirect_target(self.list_path)

    def row(self, key_value: Optional[Any] = None) -> Any:
        row = None
        if key_value is not None:
            row = self.get_row(self.config.key_column, key_value)
        return self.presenter.present_row(self.heading(), row, self.hidden_fields(), self.schema_columns())

    def row_update(self) -> str:
        """Insert or update one row from the request and return its detail page."""
        key = self.config.key_column
        values = self.validate_vars()
        key_value = values.pop(key, None)

        if key_value:
            self.update(values, f"WHERE {key} = ?", key_value)
        else:
            key_value = self.insert(values).last_insert_id

        return self.redirect_target(f"{self.list_path}/row/{key_value}")
