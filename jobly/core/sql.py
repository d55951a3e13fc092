"""
Builders for parameterized SQL fragments.

Two fragment kinds are produced here:

- ``SET`` clauses for partial updates (``sql_for_partial_update``)
- ``WHERE`` clauses for filtered listings (``sql_for_filters``)

Both number their placeholders PostgreSQL-style (``$1``, ``$2``, ...) through
the same ``Placeholders`` allocator: the Nth bound value is always ``$N``,
whatever subset of fields or filters actually ended up in the statement.
Client data only ever travels in ``values``; the clause text is assembled from
column names the caller controls.
"""

import enum
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from jobly.core.exceptions import AppError


@dataclass
class SqlFragment:
    """A clause with its positionally-bound parameter values."""
    clause: str
    values: List[Any] = field(default_factory=list)

    @property
    def next_placeholder(self) -> str:
        """Placeholder for the first parameter a caller appends after ``values``."""
        return f"${len(self.values) + 1}"

    def __bool__(self) -> bool:
        return bool(self.clause)


class Placeholders:
    """
    Positional placeholder allocator.

    Every call to ``bind`` appends the value and returns the placeholder for
    it, so indices follow the order values were bound in and nothing else.
    """

    def __init__(self):
        self.values: List[Any] = []

    def bind(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


def sql_for_partial_update(data: Mapping[str, Any], field_name_map: Mapping[str, str]) -> SqlFragment:
    """
    Build the ``SET`` part of an UPDATE from the fields present in ``data``.

    ``field_name_map`` translates field names whose column is spelled
    differently (``{"numEmployees": "num_employees"}``); other fields are used
    as column names unchanged. Columns are double-quoted.

        >>> sql_for_partial_update({"firstName": "Aliya", "age": 32}, {"firstName": "first_name"})
        SqlFragment(clause='"first_name"=$1, "age"=$2', values=['Aliya', 32])

    Callers number any further parameter from ``fragment.next_placeholder``.

    Raises:
        AppError: BAD_REQUEST if ``data`` is empty
    """
    if not data:
        raise AppError.bad_request("No data")

    params = Placeholders()
    cols = [
        f'"{field_name_map.get(name, name)}"={params.bind(value)}'
        for name, value in data.items()
    ]

    return SqlFragment(clause=", ".join(cols), values=params.values)


def reject_nulls(data: Mapping[str, Any], required: Sequence[str]) -> None:
    """
    Refuse an update that would set a NOT NULL column to null.

    Raises:
        AppError: BAD_REQUEST naming the first such field in ``required``
    """
    for name in required:
        if name in data and data[name] is None:
            raise AppError.bad_request(f"'{name}' cannot be null")


class FilterKind(str, enum.Enum):
    """How a filter value turns into a comparison."""
    CONTAINS = "contains"  # case-insensitive substring
    MIN = "min"            # column >= value
    MAX = "max"            # column <= value
    FLAG = "flag"          # column > 0 when value is "true"


@dataclass(frozen=True)
class FilterRule:
    key: str
    column: str
    kind: FilterKind


@dataclass(frozen=True)
class FilterSpec:
    """
    The filters a listing accepts, in the order their clauses are emitted.

    ``ranges`` pairs a MIN key with the MAX key it must not exceed.
    """
    rules: Tuple[FilterRule, ...]
    ranges: Tuple[Tuple[str, str], ...] = ()

    @property
    def allowed(self) -> Tuple[str, ...]:
        return tuple(rule.key for rule in self.rules)


COMPANY_FILTERS = FilterSpec(
    rules=(
        FilterRule("name", "name", FilterKind.CONTAINS),
        FilterRule("minEmployees", "num_employees", FilterKind.MIN),
        FilterRule("maxEmployees", "num_employees", FilterKind.MAX),
    ),
    ranges=(("minEmployees", "maxEmployees"),),
)

JOB_FILTERS = FilterSpec(
    rules=(
        FilterRule("title", "title", FilterKind.CONTAINS),
        FilterRule("minSalary", "salary", FilterKind.MIN),
        FilterRule("hasEquity", "equity", FilterKind.FLAG),
    ),
)


def _enumerate_keys(keys: Sequence[str]) -> str:
    quoted = [f"'{key}'" for key in keys]
    if len(quoted) == 1:
        return quoted[0]
    if len(quoted) == 2:
        return f"{quoted[0]} and {quoted[1]}"
    return ", ".join(quoted[:-1]) + f", and {quoted[-1]}"


_DECIMAL = re.compile(r"[+-]?\d+(?:\.\d*)?")


def _as_int(value: Any) -> Optional[int]:
    """
    Integer part of a numeric query value, or None if it has none.

    Only plain decimal notation counts: "12.7" gives 12, while "1e3", "inf"
    and "0x10" give None.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not _DECIMAL.fullmatch(text):
        return None
    return int(text.split(".")[0])


def _qualifying_value(rule: FilterRule, raw: Any) -> Tuple[bool, Any]:
    """
    Decide whether ``raw`` switches ``rule`` on, and the value to bind if so.
    """
    if rule.kind is FilterKind.CONTAINS:
        if isinstance(raw, str) and raw:
            # Wildcards go in the bound value; "ILIKE '%$1%'" is not a placeholder
            return True, f"%{raw}%"
        return False, None

    if rule.kind is FilterKind.FLAG:
        return str(raw).lower() == "true", 0

    # MIN and MAX
    number = _as_int(raw)
    return number is not None, number


_OPERATORS = {
    FilterKind.CONTAINS: "ILIKE",
    FilterKind.MIN: ">=",
    FilterKind.MAX: "<=",
    FilterKind.FLAG: ">",
}


def sql_for_filters(
    query: Mapping[str, Any],
    filters: FilterSpec,
    allowed: Optional[Sequence[str]] = None,
) -> SqlFragment:
    """
    Build the ``WHERE`` part of a listing from client-supplied filters.

    Validation runs to completion before anything is built:

    1. every key must be in ``allowed`` (defaults to the keys of ``filters``)
    2. no key may carry a list, i.e. be supplied more than once
    3. for each range in ``filters``, min may not exceed max

    Filters whose value does not qualify (empty name, non-numeric bound,
    ``hasEquity`` other than "true") are skipped and take no placeholder.
    An empty fragment means no filter applied.

        >>> sql_for_filters({"minSalary": "125000"}, JOB_FILTERS)
        SqlFragment(clause='salary >= $1', values=[125000])

    Raises:
        AppError: BAD_REQUEST on any validation failure
    """
    allowed = tuple(allowed) if allowed is not None else filters.allowed

    for key in query:
        if key not in allowed:
            raise AppError.bad_request(
                f"'{key}' is not a valid filter.  Only valid filters are {_enumerate_keys(allowed)}."
            )

    for key, raw in query.items():
        if isinstance(raw, (list, tuple)):
            raise AppError.bad_request(f"Can't include '{key}' more than once.")

    qualified: Dict[str, Any] = {}
    for rule in filters.rules:
        if rule.key not in query:
            continue
        applies, value = _qualifying_value(rule, query[rule.key])
        if applies:
            qualified[rule.key] = value

    for min_key, max_key in filters.ranges:
        if min_key in qualified and max_key in qualified and qualified[min_key] > qualified[max_key]:
            raise AppError.bad_request(f"'{min_key}' cannot be greater than '{max_key}'")

    params = Placeholders()
    clauses = [
        f"{rule.column} {_OPERATORS[rule.kind]} {params.bind(qualified[rule.key])}"
        for rule in filters.rules
        if rule.key in qualified
    ]

    return SqlFragment(clause=" AND ".join(clauses), values=params.values)


def filter_bag(query_params) -> Dict[str, Any]:
    """
    Collapse a multi-dict of query parameters into a filter bag.

    Keys given once map to their value; repeated keys map to the list of all
    their values, which ``sql_for_filters`` rejects.
    """
    bag: Dict[str, Any] = {}
    for key, value in query_params.multi_items():
        if key not in bag:
            bag[key] = value
        elif isinstance(bag[key], list):
            bag[key].append(value)
        else:
            bag[key] = [bag[key], value]
    return bag
