# src/tabula/core/navigation/paginator.py
"""Sliding-window pagination links."""

import html
from typing import List, NamedTuple

from pydantic import BaseModel

from ..config import PAGE_WINDOW
from ..query.params import QueryParams, serialize_query_string


class PageWindow(NamedTuple):
    start: int
    end: int


class PaginationLabels(BaseModel):
    first: str = "First"
    previous: str = "Previous"
    next: str = "Next"
    last: str = "Last"


def total_pages(row_count: int, rows_per_page: int) -> int:
    return -(-row_count // rows_per_page)


def compute_window(current_page: int, total: int, window_size: int = PAGE_WINDOW) -> PageWindow:
    """
    Range of page links centred on the current page.

    Near either boundary the window slides so it stays as wide as possible
    without leaving [1, total].
    """
    start = max(1, current_page - window_size // 2)
    end = min(total, start + window_size - 1)
    if end - start + 1 < window_size:
        start = max(1, end - window_size + 1)
    return PageWindow(start, end)


def page_url(base_url: str, params: QueryParams, page: int) -> str:
    query = serialize_query_string(params.with_page(page)).lstrip("&")
    return html.escape(f"{base_url}?{query}")


def _item(href: str, text: str, active: bool = False) -> str:
    css = "page-item active" if active else "page-item"
    return f'<li class="{css}"><a class="page-link" href="{href}">{text}</a></li>\n'


def _edge_item(href: str, text: str) -> str:
    text = html.escape(text)
    return _item(href, f'<span aria-hidden="true">{text}</span><span class="sr-only">{text}</span>')


def render(
    current_page: int,
    total: int,
    base_url: str,
    params: QueryParams,
    window_size: int = PAGE_WINDOW,
    labels: PaginationLabels = PaginationLabels(),
) -> str:
    """Render the pagination list for `params` with `page` substituted per link."""
    start, end = compute_window(current_page, total, window_size)

    items: List[str] = [_edge_item(page_url(base_url, params, 1), labels.first)]
    if start > 1:
        items.append(_item(page_url(base_url, params, start - 1), html.escape(labels.previous)))

    for page in range(start, end + 1):
        if page == current_page:
            items.append(_item("#", str(page), active=True))
        else:
            items.append(_item(page_url(base_url, params, page), str(page)))

    if total > end:
        items.append(_item(page_url(base_url, params, end + 1), html.escape(labels.next)))
    items.append(_edge_item(page_url(base_url, params, total), labels.last))

    return f'<ul class="pagination">{"".join(items)}</ul>'
