# src/tabula/core/navigation/sorting.py
import html
from typing import Optional, Union

from ..query.params import QueryParams, SortDirection, serialize_query_string

Direction = Union[SortDirection, str, None]


def toggle(
    current_column: Optional[str],
    current_direction: Direction,
    target_column: str,
    requested: Direction = SortDirection.ASC,
) -> SortDirection:
    """
    Direction a sort control should request next.

    Re-selecting the control that is already active flips its direction;
    any other column or the opposite control resets to the requested one.
    """
    requested = SortDirection.parse(requested) or SortDirection.DESC
    current = SortDirection.parse(current_direction)
    if current_column == target_column and current is requested:
        return SortDirection.DESC if requested is SortDirection.ASC else SortDirection.ASC
    return requested


def sort_params(params: QueryParams, target_column: str, requested: Direction = SortDirection.ASC) -> QueryParams:
    return params.with_sort(target_column, toggle(params.sst, params.sod, target_column, requested))


def render(
    label: str,
    target_column: str,
    requested: Direction,
    params: QueryParams,
    base_url: str,
    css_class: Optional[str] = None,
) -> str:
    """Anchor that sorts by `target_column`, keeping search, size and page."""
    query = serialize_query_string(sort_params(params, target_column, requested)).lstrip("&")
    href = html.escape(f"{base_url}?{query}")
    class_attr = f'class="{html.escape(css_class)}" ' if css_class is not None else ""
    return f'<a {class_attr}href="{href}">{html.escape(label)}</a>'
