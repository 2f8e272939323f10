"""Pagination and sort links derived from the normalized query parameters."""

from . import paginator, sorting
from .paginator import PageWindow, PaginationLabels, compute_window, total_pages
from .sorting import toggle

__all__ = [
    "paginator",
    "sorting",
    "PageWindow",
    "PaginationLabels",
    "compute_window",
    "total_pages",
    "toggle",
]
