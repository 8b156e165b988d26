import pytest

from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.records import RecordStore, WineRecord
from wine_browser.core.selectors import build_selectors


def _make_index():
    store = RecordStore(
        [
            WineRecord("US", "Malbec", 90, 30),
            WineRecord("US", "Syrah", 85, 60),
            WineRecord("France", "Merlot", 97, 120),
            WineRecord("France", "Syrah", 80, None),
        ]
    )
    return CrossfilterIndex(store)


def test_build_selectors_creates_one_dimension_each():
    index = _make_index()
    selectors = build_selectors(index)

    assert list(selectors) == ["country", "variety", "points", "price"]
    assert len(index.dimensions) == 4
    assert len({id(s.dimension) for s in selectors.values()}) == 4


def test_bucketed_selector_lists_every_label_in_order():
    selectors = build_selectors(_make_index())

    assert selectors["price"].options() == [
        ("$1 to $25", 0),
        ("$25 to $50", 1),
        ("$50 to $75", 1),
        ("$75 to $100", 0),
        ("Above $100", 1),
        ("Unknown", 1),
    ]
    assert [label for label, _ in selectors["points"].options()][-1] == "Unknown"


def test_selecting_filters_other_selectors_but_not_itself():
    selectors = build_selectors(_make_index())

    selectors["country"].select("US")

    assert selectors["country"].selected == "US"
    assert selectors["country"].options() == [("France", 2), ("US", 2)]
    assert selectors["variety"].options() == [("Malbec", 1), ("Merlot", 0), ("Syrah", 1)]

    selectors["country"].select(None)
    assert selectors["variety"].options() == [("Malbec", 1), ("Merlot", 1), ("Syrah", 2)]


def test_selecting_unknown_label_raises():
    selectors = build_selectors(_make_index())

    with pytest.raises(ValueError):
        selectors["points"].select("Legendary")
