"""
Ranking Engine - deterministic multi-key ordering of scored entities.

Comparison rules
----------------
- Numbers: a missing (None/NaN) metric is the least informative value and
  sorts LAST in both directions, so it never looks best or worst by accident.
- Strings: accent-insensitive, case-insensitive (collation_key).
- Dates: by instant; a missing date counts as epoch zero (oldest).

Sorting is stable: equal items keep their tie-break order, or their input
order when no tie-break is given, so ranking twice yields the same result.
"""
import math
import unicodedata
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Union

from analytics.errors import invalid_argument, require_count

ASC = 'asc'
DESC = 'desc'
DIRECTIONS = (ASC, DESC)

KIND_NUMBER = 'number'
KIND_STRING = 'string'
KIND_DATE = 'date'

KeySpec = Union[str, Callable[[Any], Any]]


@dataclass(frozen=True)
class SortKey:
    """A sortable column and the direction it starts in when first selected."""
    name: str
    kind: str
    default_direction: str


# Names ascending, dates newest first, metrics highest (worst fail rate) first
SORT_KEYS = {
    key.name: key for key in (
        SortKey('name', KIND_STRING, ASC),
        SortKey('position', KIND_STRING, ASC),
        SortKey('area_name', KIND_STRING, ASC),
        SortKey('template_name', KIND_STRING, ASC),
        SortKey('audits_count', KIND_NUMBER, DESC),
        SortKey('answered', KIND_NUMBER, DESC),
        SortKey('fails', KIND_NUMBER, DESC),
        SortKey('fail_rate_pct', KIND_NUMBER, DESC),
        SortKey('avg', KIND_NUMBER, DESC),
        SortKey('count', KIND_NUMBER, DESC),
        SortKey('last_audit_at', KIND_DATE, DESC),
        SortKey('executed_at', KIND_DATE, DESC),
    )
}

_EPOCH = 0.0


def collation_key(text: Optional[str]) -> str:
    """Locale-neutral, accent- and case-insensitive string sort key."""
    if text is None:
        return ''
    decomposed = unicodedata.normalize('NFKD', str(text))
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def normalize_direction(direction: Any) -> str:
    value = direction.strip().lower() if isinstance(direction, str) else None
    if value not in DIRECTIONS:
        raise invalid_argument('direction', direction, "must be 'asc' or 'desc'")
    return value


def _getter(key: KeySpec) -> Callable[[Any], Any]:
    if callable(key):
        return key
    if isinstance(key, str):
        return lambda item: item.get(key) if isinstance(item, dict) else getattr(item, key, None)
    raise invalid_argument('key', key, "must be a field name or a callable")


def _infer_kind(values: List[Any]) -> str:
    for value in values:
        if isinstance(value, str):
            return KIND_STRING
        if isinstance(value, datetime):
            return KIND_DATE
        if value is not None:
            return KIND_NUMBER
    return KIND_NUMBER


def _missing_number(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


def _comparable(value: Any, kind: str) -> Any:
    if kind == KIND_STRING:
        return collation_key(value)
    if kind == KIND_DATE:
        return value.timestamp() if isinstance(value, datetime) else _EPOCH
    return value


def rank(
    items: Iterable[Any],
    key: KeySpec,
    direction: Optional[str] = None,
    tie_break: Optional[KeySpec] = None,
    kind: Optional[str] = None,
) -> List[Any]:
    """
    Sort items by one metric.

    Args:
        items: Rows (dataclasses, objects or dicts)
        key: Field name or callable returning the metric
        direction: 'asc' or 'desc'; defaults to the key's documented
                   default (SORT_KEYS), else 'desc'
        tie_break: Field name or callable ordering equal metrics (ascending)
        kind: 'number', 'string' or 'date'; inferred when omitted

    Returns:
        New sorted list; the input is never mutated

    Example:
        rank(rows, 'fail_rate_pct', 'desc', tie_break='name')
    """
    registered = SORT_KEYS.get(key) if isinstance(key, str) else None
    if direction is None:
        direction = registered.default_direction if registered else DESC
    direction = normalize_direction(direction)

    getter = _getter(key)
    ordered = list(items)

    if tie_break is not None:
        tie_getter = _getter(tie_break)
        tie_kind = _infer_kind([tie_getter(item) for item in ordered])
        ordered.sort(key=lambda item: (tie_getter(item) is None, _comparable(tie_getter(item), tie_kind)))

    values = [getter(item) for item in ordered]
    if kind is None:
        kind = registered.kind if registered else _infer_kind(values)

    if kind == KIND_NUMBER:
        present = [item for item, value in zip(ordered, values) if not _missing_number(value)]
        missing = [item for item, value in zip(ordered, values) if _missing_number(value)]
    else:
        present, missing = ordered, []

    present.sort(key=lambda item: _comparable(getter(item), kind), reverse=direction == DESC)
    return present + missing


def top_n(items: Iterable[Any], n: int, key: Optional[KeySpec] = None,
          direction: Optional[str] = None, tie_break: Optional[KeySpec] = None) -> List[Any]:
    """
    First n items after ranking by key (or in the given order without a key).

    Raises:
        InvalidArgumentError: If n is negative or not an integer
    """
    n = require_count('n', n)
    ordered = rank(items, key, direction, tie_break) if key is not None else list(items)
    return ordered[:n]


def bottom_n(items: Iterable[Any], n: int, key: Optional[KeySpec] = None,
             tie_break: Optional[KeySpec] = None) -> List[Any]:
    """
    The n lowest items by key, lowest first. Items with no metric are never
    part of the bottom.

    Without a key, items are taken as already ranked best first and the last
    n are returned, worst first.

    Raises:
        InvalidArgumentError: If n is negative or not an integer
    """
    n = require_count('n', n)
    if key is None:
        return list(reversed(list(items)))[:n]
    getter = _getter(key)
    ranked = rank(items, key, ASC, tie_break)
    return [item for item in ranked if not _missing_number(getter(item))][:n]


@dataclass(frozen=True)
class SortState:
    """
    Current sort column and direction of a ranking table.

    Selecting the active key again reverses the direction; selecting a new
    key starts in that key's default direction.
    """
    key: str = 'fail_rate_pct'
    direction: str = DESC

    def toggle(self, key: str) -> 'SortState':
        if key not in SORT_KEYS:
            raise invalid_argument('sort_key', key, f"must be one of {', '.join(SORT_KEYS)}")
        if key == self.key:
            return SortState(key, ASC if self.direction == DESC else DESC)
        return SortState(key, SORT_KEYS[key].default_direction)

    def apply(self, items: Iterable[Any], tie_break: Optional[KeySpec] = 'name') -> List[Any]:
        return rank(items, self.key, self.direction, tie_break)
