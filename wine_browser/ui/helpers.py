from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from wine_browser.core.base_view import BaseView
from wine_browser.core.filter_state import SELECTOR_FIELDS, FilterState
from wine_browser.core.group import GroupAll
from wine_browser.core.selectors import Selector


def selector_dropdown_options(selector: Selector) -> List[dict]:
    """
    Dropdown options with the cross-filtered count in each label.

    Options with no matching wine stay listed but disabled, except the
    currently selected one so the user can still see what is applied.
    """
    options = []
    for value, count in selector.options():
        options.append(
            {
                "label": f"{value} ({count})",
                "value": value,
                "disabled": count == 0 and value != selector.selected,
            }
        )
    return options


def sanitise_state(
        selectors: Mapping[str, Selector],
        state: FilterState,
        views: Iterable[BaseView] = (),
) -> FilterState:
    """
    Drop selections that are not valid labels (e.g. stale values from a
    browser session store), including chart selections for views that are
    unknown, not clickable or have no such key.
    """
    clean: Dict[str, Optional[Any]] = {}
    for name in SELECTOR_FIELDS:
        value = getattr(state, name)
        selector = selectors.get(name)
        clean[name] = value if selector is not None and value in selector.labels else None

    by_id = {view.id: view for view in views}
    charts = {
        view_id: key
        for view_id, key in state.charts.items()
        if view_id in by_id and key in by_id[view_id].selection_keys()
    }
    return FilterState(**clean, charts=charts)


def data_count_text(data_count: GroupAll, total: int) -> str:
    return f"{data_count.value():,} of {total:,} wines selected"
