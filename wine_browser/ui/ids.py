from __future__ import annotations

__all__ = ["IDs", "graph_id", "selector_id"]


class IDs:
    class Store:
        FILTER_STATE = "filter-state"

    class Control:
        # Selectors
        COUNTRY_SELECT = "country-select"
        VARIETY_SELECT = "variety-select"
        POINTS_SELECT = "points-select"
        PRICE_SELECT = "price-select"
        RESET_BTN = "reset-filters-btn"

        # Navbar data count
        DATA_COUNT = "data-count"

    class Pattern:
        # pattern-matching "type" strings
        VIEW_GRAPH = "view-graph"


SELECTOR_CONTROLS = {
    "country": IDs.Control.COUNTRY_SELECT,
    "variety": IDs.Control.VARIETY_SELECT,
    "points": IDs.Control.POINTS_SELECT,
    "price": IDs.Control.PRICE_SELECT,
}


def selector_id(selector_key: str) -> str:
    return SELECTOR_CONTROLS[selector_key]


def graph_id(view_id: str) -> dict:
    return {"type": IDs.Pattern.VIEW_GRAPH, "index": view_id}
