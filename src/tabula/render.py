# src/tabula/render.py
"""Payloads handed to the view layer."""

from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel

from tabula.core.introspection import ColumnDescriptor


class ListPayload(BaseModel):
    heading: str
    count: int
    paging: str
    rows: List[Dict[str, Any]]
    cols: Dict[str, str]
    inputs: str


class RowPayload(BaseModel):
    heading: str
    row: Optional[Dict[str, Any]]
    inputs: str
    cols: List[ColumnDescriptor]


class Presenter(Protocol):
    def present_list(
        self,
        heading: str,
        total_count: int,
        pagination: str,
        rows: List[Dict[str, Any]],
        column_sort_links: Dict[str, str],
        hidden_fields: str,
    ) -> Any: ...

    def present_row(
        self,
        heading: str,
        row: Optional[Dict[str, Any]],
        hidden_fields: str,
        columns: List[ColumnDescriptor],
    ) -> Any: ...


class PayloadPresenter:
    """Returns the payloads as pydantic models, leaving templating to the caller."""

    def present_list(self, heading, total_count, pagination, rows, column_sort_links, hidden_fields) -> ListPayload:
        return ListPayload(
            heading=heading,
            count=total_count,
            paging=pagination,
            rows=rows,
            cols=column_sort_links,
            inputs=hidden_fields,
        )

    def present_row(self, heading, row, hidden_fields, columns) -> RowPayload:
        return RowPayload(heading=heading, row=row, inputs=hidden_fields, cols=columns)
