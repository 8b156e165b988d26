"""
Reducers
========

A reducer is three plain functions:

- initialize() -> fresh accumulator
- add(acc, record) -> acc
- remove(acc, record) -> acc

`remove` must exactly undo `add` for any record previously added; the
cross-filter index relies on this to update groups by deltas instead of
rescanning. Accumulators may be immutable (ints), so callers always keep the
returned value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from wine_browser.core.exceptions import InvariantViolation
from wine_browser.core.records import WineRecord

Initialize = Callable[[], Any]
ReduceFn = Callable[[Any, WineRecord], Any]


@dataclass(frozen=True)
class Reducer:
    initialize: Initialize
    add: ReduceFn
    remove: ReduceFn
    name: str = "custom"


def _check_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise InvariantViolation(f"{name} went negative ({value}); add/remove out of step")


# -----------------------------------------------------------------------------
# Count
# -----------------------------------------------------------------------------
def count_reducer() -> Reducer:
    def add(acc: int, record: WineRecord) -> int:
        return acc + 1

    def remove(acc: int, record: WineRecord) -> int:
        acc -= 1
        _check_non_negative("count", acc)
        return acc

    return Reducer(initialize=lambda: 0, add=add, remove=remove, name="count")


# -----------------------------------------------------------------------------
# Sum
# -----------------------------------------------------------------------------
def sum_reducer(field: str) -> Reducer:
    """Running total of a numeric field; None contributes 0."""

    def value(record: WineRecord) -> float:
        v = getattr(record, field)
        return 0 if v is None else v

    def add(acc: float, record: WineRecord) -> float:
        return acc + value(record)

    def remove(acc: float, record: WineRecord) -> float:
        return acc - value(record)

    return Reducer(initialize=lambda: 0, add=add, remove=remove, name=f"sum:{field}")


# -----------------------------------------------------------------------------
# Running average
# -----------------------------------------------------------------------------
@dataclass
class AverageAccumulator:
    count: int = 0
    total: float = 0
    average: float = 0


def average_reducer(field: str = "points") -> Reducer:
    """
    Running average of a numeric field.

    When the count drops back to zero, total and average are reset to 0
    rather than dividing by zero.
    """

    def add(acc: AverageAccumulator, record: WineRecord) -> AverageAccumulator:
        acc.count += 1
        acc.total += getattr(record, field)
        acc.average = acc.total / acc.count
        return acc

    def remove(acc: AverageAccumulator, record: WineRecord) -> AverageAccumulator:
        acc.count -= 1
        _check_non_negative("average count", acc.count)
        if acc.count == 0:
            acc.total = 0
            acc.average = 0
        else:
            acc.total -= getattr(record, field)
            acc.average = acc.total / acc.count
        return acc

    return Reducer(initialize=AverageAccumulator, add=add, remove=remove, name=f"average:{field}")


# -----------------------------------------------------------------------------
# Match ratio
# -----------------------------------------------------------------------------
@dataclass
class MatchRatio:
    total: int = 0
    match: int = 0

    @property
    def ratio(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.match / self.total


def match_ratio_reducer(target: str, field: str = "variety") -> Reducer:
    """
    Count all records and those whose `field` equals `target`.

    One reducer (and one group) per target; several may share a dimension.
    """

    def add(acc: MatchRatio, record: WineRecord) -> MatchRatio:
        acc.total += 1
        if getattr(record, field) == target:
            acc.match += 1
        return acc

    def remove(acc: MatchRatio, record: WineRecord) -> MatchRatio:
        acc.total -= 1
        if getattr(record, field) == target:
            acc.match -= 1
        _check_non_negative("match-ratio total", acc.total)
        _check_non_negative("match-ratio match", acc.match)
        return acc

    return Reducer(initialize=MatchRatio, add=add, remove=remove, name=f"match:{field}={target}")
