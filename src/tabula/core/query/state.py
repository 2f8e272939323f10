# src/tabula/core/query/state.py
from dataclasses import dataclass, field
from typing import Any, List

# Row count not computed yet
UNCOUNTED = -1


@dataclass
class QueryState:
    """
    Mutable query fragments of one table-bound unit of work.

    Fragments are SQL text and are interpolated as-is; values go in the
    `*_params` lists and are bound to `?` markers in order.
    `cached_row_count` is not tracked against the predicate: whoever changes
    `base_predicate` or `where_params` calls `invalidate_count()`.
    """

    table: str
    select_list: str = "*"
    base_predicate: str = "(1)"
    where_params: List[Any] = field(default_factory=list)
    # Extra AND-ed condition derived from the free-text search parameters
    search_clause: str = ""
    search_params: List[Any] = field(default_factory=list)
    group_clause: str = ""
    order_clause: str = ""
    limit_clause: str = ""
    limit_params: List[Any] = field(default_factory=list)
    cached_row_count: int = UNCOUNTED

    @property
    def predicate(self) -> str:
        if self.search_clause:
            return f"{self.base_predicate} AND {self.search_clause}"
        return self.base_predicate

    @property
    def predicate_params(self) -> List[Any]:
        return [*self.where_params, *self.search_params]

    @property
    def is_counted(self) -> bool:
        return self.cached_row_count != UNCOUNTED

    def invalidate_count(self) -> None:
        self.cached_row_count = UNCOUNTED
