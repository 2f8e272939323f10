# src/tabula/core/query/builder.py
from dataclasses import dataclass, field
from typing import Any, Collection, List, Mapping, Optional, Sequence, Tuple, Union

from .state import QueryState


@dataclass(frozen=True)
class Statement:
    """SQL text with `?` markers and the values bound to them, in order."""

    sql: str
    params: List[Any] = field(default_factory=list)


def writable_fields(fields: Mapping[str, Any], attributes: Collection[str]) -> List[Tuple[str, Any]]:
    """Keep only the fields declared as entity attributes, in input order."""
    return [(key, value) for key, value in fields.items() if key in attributes]


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


class StatementBuilder:
    """
    Builds parameterized statements from a QueryState.

    Only fragment text is interpolated. Values always travel as bound
    parameters.
    """

    def __init__(self, state: QueryState):
        self.state = state

    def count(self, count_expr: str = "COUNT(*)") -> Statement:
        state = self.state
        return Statement(
            _join(f"SELECT {count_expr}", f"FROM {state.table}", f"WHERE {state.predicate}"),
            state.predicate_params,
        )

    def list(self) -> Statement:
        state = self.state
        sql = _join(
            f"SELECT {state.select_list}",
            f"FROM {state.table}",
            f"WHERE {state.predicate}",
            state.group_clause,
            state.order_clause,
            state.limit_clause,
        )
        return Statement(sql, [*state.predicate_params, *state.limit_params])

    def get_by_key(self, key: str, value: Any, select: str = "*") -> Statement:
        return Statement(f"SELECT {select} FROM {self.state.table} WHERE {key} = ?", [value])

    def insert(self, fields: Mapping[str, Any], attributes: Collection[str]) -> Statement:
        pairs = writable_fields(fields, attributes)
        if not pairs:
            raise ValueError(f"No writable fields for {self.state.table}")
        columns = ", ".join(key for key, _ in pairs)
        markers = ", ".join("?" for _ in pairs)
        return Statement(
            f"INSERT INTO {self.state.table} ({columns}) VALUES ({markers})",
            [value for _, value in pairs],
        )

    def update(
        self,
        fields: Mapping[str, Any],
        attributes: Collection[str],
        where: str,
        where_param: Optional[Any] = None,
    ) -> Statement:
        pairs = writable_fields(fields, attributes)
        if not pairs:
            raise ValueError(f"No writable fields for {self.state.table}")
        assignments = ", ".join(f"{key} = ?" for key, _ in pairs)
        params = [value for _, value in pairs]
        if where_param is not None:
            params.append(where_param)
        return Statement(_join(f"UPDATE {self.state.table} SET {assignments}", where), params)

    def delete(self, where: str, where_param: Union[None, Any, Sequence[Any]] = None) -> Statement:
        if where_param is None:
            params: List[Any] = []
        elif isinstance(where_param, (list, tuple)):
            params = list(where_param)
        else:
            params = [where_param]
        return Statement(_join(f"DELETE FROM {self.state.table}", where), params)


def in_clause(column: str, values: Sequence[Any]) -> str:
    """`WHERE column IN (?, ?, ...)` with one marker per value."""
    markers = ", ".join("?" for _ in values)
    return f"WHERE {column} IN ({markers})"
