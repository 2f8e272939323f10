# src/tabula/core/query/params.py
"""
Sanitizing of untrusted request parameters.

Values that fail their rule are never reported as errors: they are replaced
by the rule's default (or dropped), so navigation keeps working with
malformed input.
"""

import html
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl, quote

from pydantic import BaseModel, ConfigDict, Field

from ..config import ROWS_PER_PAGE

RawValue = Union[str, Sequence[str]]
RawParams = Mapping[str, RawValue]

# Fixed order of the navigation keys on the wire
QUERY_KEYS = ("sfl", "stx", "sst", "sod", "rows", "page")

TAG_RE = re.compile(r"<[^>]*>")
INT_RE = re.compile(r"^[+-]?\d+$")

# Integers must fit a signed 64-bit database column
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1
INT_DIGITS = len(str(INT_MAX))


class FilterKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    REGEXP = "regexp"


class OnInvalid(str, Enum):
    USE_DEFAULT = "use_default"
    DROP = "drop"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SortDirection"]:
        if value is None:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class FilterRule:
    """How one request key is sanitized."""

    kind: FilterKind = FilterKind.STRING
    default: Any = None
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    pattern: Optional[str] = None
    force_array: bool = False
    on_invalid: OnInvalid = OnInvalid.USE_DEFAULT


STRING = FilterRule()


def query_string_rules(rows_per_page: int = ROWS_PER_PAGE) -> Dict[str, FilterRule]:
    """Rules for the list navigation keys."""
    return {
        "sfl": STRING,
        "stx": STRING,
        "sst": STRING,
        "sod": FilterRule(kind=FilterKind.REGEXP, pattern=r"^(asc|desc|ASC|DESC)$"),
        "rows": FilterRule(kind=FilterKind.INTEGER, default=rows_per_page, min_value=1),
        "page": FilterRule(kind=FilterKind.INTEGER, default=1, min_value=1),
    }


QUERY_STRING_RULES = query_string_rules()


def sanitize_string(value: str) -> str:
    """Strip markup tags and NUL bytes."""
    return TAG_RE.sub("", value).replace("\x00", "")


def _apply_scalar(rule: FilterRule, value: Any) -> Tuple[bool, Any]:
    if not isinstance(value, str):
        return False, None

    if rule.kind is FilterKind.STRING:
        return True, sanitize_string(value)

    if rule.kind is FilterKind.INTEGER:
        value = value.strip()
        if not INT_RE.match(value) or len(value.lstrip("+-")) > INT_DIGITS:
            return False, None
        number = int(value)
        if not INT_MIN <= number <= INT_MAX:
            return False, None
        if rule.min_value is not None and number < rule.min_value:
            return False, None
        if rule.max_value is not None and number > rule.max_value:
            return False, None
        return True, number

    if rule.pattern is None or not re.search(rule.pattern, value):
        return False, None
    return True, value


def apply_rule(rule: FilterRule, value: RawValue) -> Tuple[bool, Any]:
    """Returns (valid, cleaned value) for a single raw value."""
    if rule.force_array:
        values = [value] if isinstance(value, str) else list(value)
        cleaned = []
        for item in values:
            ok, result = _apply_scalar(rule, item)
            if ok:
                cleaned.append(result)
        if values and not cleaned:
            return False, None
        return True, cleaned

    # A repeated key keeps its last value
    if not isinstance(value, str):
        value = list(value)
        if not value:
            return False, None
        value = value[-1]
    return _apply_scalar(rule, value)


def validate(raw: RawParams, spec: Mapping[str, FilterRule]) -> Dict[str, Any]:
    """
    Apply `spec` to the declared keys of `raw`.

    Undeclared keys are ignored. A declared key that is absent or invalid
    receives its default when it has one, otherwise it is left out.
    """
    result: Dict[str, Any] = {}
    for key, rule in spec.items():
        if key in raw:
            ok, value = apply_rule(rule, raw[key])
            if ok:
                result[key] = value
                continue
            if rule.on_invalid is OnInvalid.DROP:
                continue
        if rule.default is not None:
            result[key] = rule.default
    return result


def is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple)) and not value)


def empty_check(raw: RawParams, required: Iterable[str]) -> Union[str, bool]:
    """Return the first required key with an empty value, or True."""
    for key in required:
        if is_empty(raw.get(key)):
            return key
    return True


class QueryParams(BaseModel):
    """Validated list navigation parameters of one request."""

    sfl: Optional[str] = None
    stx: Optional[str] = None
    sst: Optional[str] = None
    sod: Optional[SortDirection] = None
    rows: int = Field(default=ROWS_PER_PAGE, ge=1)
    page: int = Field(default=1, ge=1)

    model_config = ConfigDict(frozen=True)

    def with_page(self, page: int) -> "QueryParams":
        return self.model_copy(update={"page": page})

    def with_sort(self, column: str, direction: SortDirection) -> "QueryParams":
        return self.model_copy(update={"sst": column, "sod": direction})

    @property
    def offset(self) -> int:
        return min((self.page - 1) * self.rows, INT_MAX)

    def pairs(self) -> List[Tuple[str, str]]:
        """Non-empty entries in wire order."""
        pairs = []
        for key in QUERY_KEYS:
            value = getattr(self, key)
            if is_empty(value):
                continue
            if isinstance(value, SortDirection):
                value = value.value
            pairs.append((key, str(value)))
        return pairs


def normalize(raw: RawParams, rows_per_page: int = ROWS_PER_PAGE) -> QueryParams:
    values = validate(raw, query_string_rules(rows_per_page))
    return QueryParams(
        sfl=values.get("sfl") or None,
        stx=values.get("stx") or None,
        sst=values.get("sst") or None,
        sod=SortDirection.parse(values.get("sod")),
        rows=values["rows"],
        page=values["page"],
    )


def serialize_query_string(params: QueryParams) -> str:
    return "".join(f"&{key}={quote(value, safe='')}" for key, value in params.pairs())


def serialize_hidden_fields(params: QueryParams) -> str:
    return "".join(
        f'<input type="hidden" name="{key}" value="{html.escape(value)}">\n'
        for key, value in params.pairs()
    )


def parse_query_string(query_string: str, rows_per_page: int = ROWS_PER_PAGE) -> QueryParams:
    """Inverse of serialize_query_string; accepts `&amp;` separators too."""
    query_string = query_string.replace("&amp;", "&").lstrip("?&")
    raw: Dict[str, str] = dict(parse_qsl(query_string, keep_blank_values=True))
    return normalize(raw, rows_per_page)
