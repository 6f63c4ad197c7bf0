"""Predicate library for rule conditions.

Each operator is a named binary predicate ``(fact_value, rule_value) -> bool``.
All operators are total: a missing value, a non-array where an array is
expected, or a malformed rule value yields False instead of an exception.
The only documented exception is ``daysSince``, which treats an absent date
as infinitely long ago (True).

Usage in a rule file:
    {"fact": "history", "path": "$.recentRpes", "operator": "averageGreaterThan", "value": 7}
"""

from __future__ import annotations

import functools
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from adaptive_coach.core.clock import Clock, local_now, parse_timestamp
from adaptive_coach.metrics.calculations import MS_PER_DAY, average, get_age_category, trend_direction
from adaptive_coach.state.enums import TrendDirection

Predicate = Callable[[Any, Any], bool]


@dataclass(frozen=True)
class Operator:
    name: str
    callback: Predicate


def _total(predicate: Predicate) -> Predicate:
    """Map type/shape errors raised by a comparison to a definite False."""

    @functools.wraps(predicate)
    def wrapper(fact_value: Any, rule_value: Any) -> bool:
        try:
            return bool(predicate(fact_value, rule_value))
        except (TypeError, ValueError, KeyError, AttributeError):
            return False

    return wrapper


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _as_list(value: Any) -> list[Any]:
    return list(value) if _is_array(value) else [value]


def _numbers(value: Any) -> list[float] | None:
    """Numeric array or None when value is not a non-empty array."""
    if not _is_array(value) or not value:
        return None
    return [float(v) for v in value]


# -----------------------------
# Standard comparisons
# -----------------------------
@_total
def equal(fact_value: Any, rule_value: Any) -> bool:
    return fact_value == rule_value


@_total
def not_equal(fact_value: Any, rule_value: Any) -> bool:
    return fact_value != rule_value


@_total
def less_than(fact_value: Any, rule_value: Any) -> bool:
    return fact_value < rule_value


@_total
def less_than_inclusive(fact_value: Any, rule_value: Any) -> bool:
    return fact_value <= rule_value


@_total
def greater_than(fact_value: Any, rule_value: Any) -> bool:
    return fact_value > rule_value


@_total
def greater_than_inclusive(fact_value: Any, rule_value: Any) -> bool:
    return fact_value >= rule_value


@_total
def is_in(fact_value: Any, rule_value: Any) -> bool:
    return _is_array(rule_value) and fact_value in rule_value


@_total
def not_in(fact_value: Any, rule_value: Any) -> bool:
    return _is_array(rule_value) and fact_value not in rule_value


@_total
def contains(fact_value: Any, rule_value: Any) -> bool:
    return _is_array(fact_value) and rule_value in fact_value


@_total
def does_not_contain(fact_value: Any, rule_value: Any) -> bool:
    return _is_array(fact_value) and rule_value not in fact_value


# -----------------------------
# Array membership
# -----------------------------
@_total
def contains_any(fact_value: Any, rule_value: Any) -> bool:
    if not _is_array(fact_value):
        return False
    return any(item in fact_value for item in _as_list(rule_value))


@_total
def contains_all(fact_value: Any, rule_value: Any) -> bool:
    if not _is_array(fact_value):
        return False
    return all(item in fact_value for item in _as_list(rule_value))


@_total
def not_contains(fact_value: Any, rule_value: Any) -> bool:
    if not _is_array(fact_value):
        return False
    return not any(item in fact_value for item in _as_list(rule_value))


# -----------------------------
# Aggregates
# -----------------------------
@_total
def average_less_than(fact_value: Any, rule_value: Any) -> bool:
    values = _numbers(fact_value)
    return values is not None and average(values) < rule_value


@_total
def average_greater_than(fact_value: Any, rule_value: Any) -> bool:
    values = _numbers(fact_value)
    return values is not None and average(values) > rule_value


@_total
def average_between(fact_value: Any, rule_value: Any) -> bool:
    values = _numbers(fact_value)
    if values is None:
        return False
    avg = average(values)
    return rule_value["min"] <= avg <= rule_value["max"]


@_total
def trend_direction_is(fact_value: Any, rule_value: Any) -> bool:
    if not _is_array(fact_value):
        return False
    direction = trend_direction([float(v) for v in fact_value])
    return direction == TrendDirection(rule_value)


@_total
def count_greater_than(fact_value: Any, rule_value: Any) -> bool:
    if not _is_array(fact_value):
        return False
    count = sum(1 for v in fact_value if v > rule_value["threshold"])
    return count >= rule_value["count"]


@_total
def percentage_greater_than(fact_value: Any, rule_value: Any) -> bool:
    if not _is_array(fact_value) or not fact_value:
        return False
    count = sum(1 for v in fact_value if v > rule_value["threshold"])
    return (count / len(fact_value)) * 100 >= rule_value["percentage"]


@_total
def consecutive_count(fact_value: Any, rule_value: Any) -> bool:
    if not _is_array(fact_value):
        return False
    longest = current = 0
    for value in fact_value:
        if value:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest >= rule_value


# -----------------------------
# Scalars
# -----------------------------
def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@_total
def in_range(fact_value: Any, rule_value: Any) -> bool:
    if not _is_number(fact_value):
        return False
    return rule_value["min"] <= fact_value <= rule_value["max"]


@_total
def age_in_category(fact_value: Any, rule_value: Any) -> bool:
    if not _is_number(fact_value):
        return False
    category = get_age_category(int(fact_value))
    return category is not None and category.key == rule_value


# -----------------------------
# Dates
# -----------------------------
def date_operators(clock: Clock = local_now) -> list[Operator]:
    """daysSince / daysSinceLessThan bound to a clock."""

    def elapsed_days(fact_value: Any) -> int | None:
        now = clock()
        then = parse_timestamp(fact_value, now.tzinfo)
        if then is None or (then.tzinfo is None) != (now.tzinfo is None):
            return None
        return math.floor((now - then).total_seconds() * 1000 / MS_PER_DAY)

    @_total
    def days_since(fact_value: Any, rule_value: Any) -> bool:
        if fact_value is None or fact_value == "":
            return True
        days = elapsed_days(fact_value)
        return days is not None and days >= rule_value

    @_total
    def days_since_less_than(fact_value: Any, rule_value: Any) -> bool:
        if fact_value is None or fact_value == "":
            return False
        days = elapsed_days(fact_value)
        return days is not None and days < rule_value

    return [
        Operator("daysSince", days_since),
        Operator("daysSinceLessThan", days_since_less_than),
    ]


STANDARD_OPERATORS: tuple[Operator, ...] = (
    Operator("equal", equal),
    Operator("notEqual", not_equal),
    Operator("lessThan", less_than),
    Operator("lessThanInclusive", less_than_inclusive),
    Operator("greaterThan", greater_than),
    Operator("greaterThanInclusive", greater_than_inclusive),
    Operator("in", is_in),
    Operator("notIn", not_in),
    Operator("contains", contains),
    Operator("doesNotContain", does_not_contain),
)

CUSTOM_OPERATORS: tuple[Operator, ...] = (
    Operator("containsAny", contains_any),
    Operator("containsAll", contains_all),
    Operator("notContains", not_contains),
    Operator("averageLessThan", average_less_than),
    Operator("averageGreaterThan", average_greater_than),
    Operator("averageBetween", average_between),
    Operator("trendDirection", trend_direction_is),
    Operator("countGreaterThan", count_greater_than),
    Operator("percentageGreaterThan", percentage_greater_than),
    Operator("inRange", in_range),
    Operator("ageInCategory", age_in_category),
    Operator("consecutiveCount", consecutive_count),
)


def default_operators(clock: Clock = local_now) -> list[Operator]:
    """Every operator the packaged rule sets rely on."""
    return [*STANDARD_OPERATORS, *date_operators(clock), *CUSTOM_OPERATORS]

