"""Operator search over stored records.

A criterion is ``{"field": ..., "operator": ..., "value": ...}`` and a record
matches when every criterion matches. Text operators ignore case. Ordering
operators never match values that cannot be compared (e.g. a missing field).

    eq, ne, gt, gte, lt, lte       plain comparison
    contains, startsWith, endsWith text match
    in                             value is a list of accepted values
    between                        value is [low, high], inclusive
    dateRange                      value is {"start": ..., "end": ...}, inclusive
"""

from __future__ import annotations

import operator
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Sequence

from ..core.exceptions import ValidationError
from .datetime_utils import parse_timestamp

Predicate = Callable[[Mapping[str, Any]], bool]


def _ordered(compare: Callable[[Any, Any], bool]):
    def build(field: str, value: Any) -> Predicate:
        def match(item: Mapping[str, Any]) -> bool:
            try:
                return bool(compare(item.get(field), value))
            except TypeError:
                return False

        return match

    return build


def _text(compare: Callable[[str, str], bool]):
    def build(field: str, value: Any) -> Predicate:
        needle = str(value).lower()

        def match(item: Mapping[str, Any]) -> bool:
            found = item.get(field)
            return found is not None and compare(str(found).lower(), needle)

        return match

    return build


def _in(field: str, value: Any) -> Predicate:
    if not isinstance(value, (list, tuple)):
        raise ValidationError("'in' expects a list of values")
    accepted = list(value)
    return lambda item: item.get(field) in accepted


def _between(field: str, value: Any) -> Predicate:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValidationError("'between' expects [low, high]")
    low, high = value
    return _ordered(lambda found, _: low <= found <= high)(field, None)


def _as_bound(value: Any, name: str) -> datetime:
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'dateRange' {name} must be an ISO date or timestamp") from None


def _date_range(field: str, value: Any) -> Predicate:
    if not isinstance(value, Mapping):
        raise ValidationError("'dateRange' expects {start, end}")
    start = _as_bound(value.get("start"), "start")
    end = _as_bound(value.get("end"), "end")

    def match(item: Mapping[str, Any]) -> bool:
        try:
            at = parse_timestamp(item.get(field))
        except (TypeError, ValueError):
            return False
        return start <= at <= end

    return match


OPERATORS: dict[str, Callable[[str, Any], Predicate]] = {
    "eq": _ordered(operator.eq),
    "ne": _ordered(operator.ne),
    "gt": _ordered(operator.gt),
    "gte": _ordered(operator.ge),
    "lt": _ordered(operator.lt),
    "lte": _ordered(operator.le),
    "contains": _text(lambda found, needle: needle in found),
    "startsWith": _text(str.startswith),
    "endsWith": _text(str.endswith),
    "in": _in,
    "between": _between,
    "dateRange": _date_range,
}


def compile_criteria(criteria: Sequence[Mapping[str, Any]]) -> Predicate:
    """Validate ``criteria`` once and return a predicate matching all of them."""
    if not isinstance(criteria, (list, tuple)):
        raise ValidationError("criteria must be a list")

    predicates = []
    for criterion in criteria:
        if not isinstance(criterion, Mapping):
            raise ValidationError("Each criterion must be an object")
        field = criterion.get("field")
        if not isinstance(field, str) or not field:
            raise ValidationError("Each criterion needs a field")
        build = OPERATORS.get(criterion.get("operator"))
        if build is None:
            allowed = ", ".join(OPERATORS)
            raise ValidationError(f"Unknown search operator {criterion.get('operator')!r}; expected one of: {allowed}")
        predicates.append(build(field, criterion.get("value")))

    return lambda item: all(p(item) for p in predicates)


def search(records: Iterable[Any], criteria: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    matches = compile_criteria(criteria)
    return [r for r in records if isinstance(r, Mapping) and matches(r)]
