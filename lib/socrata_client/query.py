"""SoQL query builder.

A ``Query`` is a frozen value: every operation returns a new ``Query`` with
one parameter set, the receiver is left untouched. Keys are the reserved SoQL
names (``$select``, ``$where``, ...) or plain field names for equality
filters. Setting a key twice keeps the last value.

    >>> q = Query().select(["name", "location"]).where("height >= 1000").limit(5)
    >>> q.params()
    {'$select': 'name, location', '$where': 'height >= 1000', '$limit': 5}

Expressions are sent verbatim; nothing here parses SoQL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .errors import InvalidArgument

SELECT = "$select"
WHERE = "$where"
ORDER = "$order"
GROUP = "$group"
HAVING = "$having"
LIMIT = "$limit"
OFFSET = "$offset"
Q = "$q"
QUERY = "$query"
BOM = "$$bom"


def _freeze(state: Mapping[str, Any] | None) -> Mapping[str, Any]:
    data = dict(state or {})
    for key in data:
        if not isinstance(key, str):
            raise InvalidArgument(f"query keys must be strings, got {type(key).__name__}")
    return MappingProxyType(data)


def _column_name(column: Any) -> str:
    if isinstance(column, Enum):
        return str(column.value)
    return str(column)


def _require_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Query:
    state: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "state", _freeze(self.state))

    def __hash__(self) -> int:
        return hash(frozenset(self.state.items()))

    def params(self) -> dict[str, Any]:
        """Plain dict copy of the accumulated parameters."""
        return dict(self.state)

    def filter(self, key: str, value: Any) -> Query:
        """Set ``key`` to ``value``; used for simple field equality filters."""
        if not isinstance(key, str):
            raise InvalidArgument(f"filter key must be a string, got {type(key).__name__}")
        return Query({**self.state, key: value})

    def select(self, columns: Iterable[Any] | str) -> Query:
        if isinstance(columns, str):
            columns = [columns]
        return self.filter(SELECT, ", ".join(_column_name(c) for c in columns))

    def where(self, expression: str) -> Query:
        return self.filter(WHERE, expression)

    def order(self, expression: str) -> Query:
        return self.filter(ORDER, expression)

    def group(self, expression: str) -> Query:
        return self.filter(GROUP, expression)

    def having(self, expression: str) -> Query:
        return self.filter(HAVING, expression)

    def limit(self, cap: int) -> Query:
        # no range check: zero and negatives go to the server as-is
        return self.filter(LIMIT, _require_int("limit", cap))

    def offset(self, skip: int) -> Query:
        return self.filter(OFFSET, _require_int("offset", skip))

    def q(self, expression: str) -> Query:
        """Full text search across the dataset."""
        return self.filter(Q, expression)

    def query(self, expression: str) -> Query:
        """Complete SoQL statement; overrides the individual clauses server side."""
        return self.filter(QUERY, expression)

    def ensure_bom(self) -> Query:
        """Ask for a byte order mark on CSV/TSV output."""
        return self.filter(BOM, True)
