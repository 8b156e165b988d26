import copy

import pytest

from wine_browser.core.exceptions import InvariantViolation
from wine_browser.core.reducers import (
    AverageAccumulator,
    MatchRatio,
    average_reducer,
    count_reducer,
    match_ratio_reducer,
    sum_reducer,
)
from wine_browser.core.records import WineRecord

RECORDS = [
    WineRecord("US", "Malbec", 90, 30),
    WineRecord("US", "Syrah", 85, 60),
    WineRecord("France", "Malbec", 92, None),
    WineRecord("France", "Merlot", 88, 120),
]

REDUCERS = [
    count_reducer(),
    sum_reducer("points"),
    sum_reducer("price"),
    average_reducer("points"),
    match_ratio_reducer("Malbec"),
]


@pytest.mark.parametrize("reducer", REDUCERS, ids=lambda r: r.name)
def test_remove_undoes_add(reducer):
    # from empty
    acc = reducer.initialize()
    for record in RECORDS:
        before = copy.deepcopy(acc)
        acc = reducer.remove(reducer.add(acc, record), record)
        assert acc == before

    # from a populated accumulator
    acc = reducer.initialize()
    for record in RECORDS[:2]:
        acc = reducer.add(acc, record)
    for record in RECORDS:
        before = copy.deepcopy(acc)
        acc = reducer.remove(reducer.add(acc, record), record)
        assert acc == before


def test_average_reducer_tracks_running_average():
    reducer = average_reducer()
    acc = reducer.initialize()
    acc = reducer.add(acc, RECORDS[0])
    acc = reducer.add(acc, RECORDS[1])

    assert acc == AverageAccumulator(count=2, total=175, average=87.5)

    acc = reducer.remove(acc, RECORDS[0])
    assert acc == AverageAccumulator(count=1, total=85, average=85)

    # count back to zero resets instead of dividing by zero
    acc = reducer.remove(acc, RECORDS[1])
    assert acc == AverageAccumulator(count=0, total=0, average=0)


def test_match_ratio_example():
    reducer = match_ratio_reducer("Malbec")
    us_records = [WineRecord("US", "Malbec", 90, 20) for _ in range(3)] + [
        WineRecord("US", "Pinot Noir", 88, 25) for _ in range(7)
    ]

    acc = reducer.initialize()
    for record in us_records:
        acc = reducer.add(acc, record)
    assert acc == MatchRatio(total=10, match=3)
    assert acc.ratio == pytest.approx(0.3)

    acc = reducer.remove(acc, us_records[-1])
    assert acc == MatchRatio(total=9, match=3)


def test_match_ratio_of_empty_accumulator_is_zero():
    assert MatchRatio().ratio == 0.0


@pytest.mark.parametrize(
    "reducer",
    [count_reducer(), average_reducer(), match_ratio_reducer("Malbec")],
    ids=lambda r: r.name,
)
def test_remove_from_empty_raises_invariant_violation(reducer):
    with pytest.raises(InvariantViolation):
        reducer.remove(reducer.initialize(), RECORDS[0])


def test_sum_reducer_treats_missing_as_zero():
    reducer = sum_reducer("price")
    acc = reducer.initialize()
    for record in RECORDS:
        acc = reducer.add(acc, record)
    assert acc == 210
