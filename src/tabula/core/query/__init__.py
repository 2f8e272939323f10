from .builder import Statement, StatementBuilder, in_clause
from .executor import QueryExecutor
from .params import (
    QUERY_STRING_RULES,
    FilterKind,
    FilterRule,
    OnInvalid,
    QueryParams,
    SortDirection,
    empty_check,
    normalize,
    parse_query_string,
    serialize_hidden_fields,
    serialize_query_string,
    validate,
)
from .state import QueryState

__all__ = [
    "Statement",
    "StatementBuilder",
    "in_clause",
    "QueryExecutor",
    "QUERY_STRING_RULES",
    "FilterKind",
    "FilterRule",
    "OnInvalid",
    "QueryParams",
    "SortDirection",
    "empty_check",
    "normalize",
    "parse_query_string",
    "serialize_hidden_fields",
    "serialize_query_string",
    "validate",
    "QueryState",
]
