from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

import dash
from dash import ALL, Input, Output, State

from wine_browser.core.filter_state import FilterState
from wine_browser.ui.helpers import sanitise_state
from wine_browser.ui.ids import IDs

if TYPE_CHECKING:
    from wine_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

# position of the chart clickData input in the filter callback's inputs
_GRAPH_CLICKS_INPUT = 5


def state_from_controls(
    ctx: AppConfig,
    country: Optional[str],
    variety: Optional[str],
    points: Optional[str],
    price: Optional[str],
    reset: bool = False,
    charts: Optional[Mapping[str, Any]] = None,
) -> FilterState:
    if reset:
        return FilterState()
    state = FilterState(
        country=country,
        variety=variety,
        points=points,
        price=price,
        charts=dict(charts or {}),
    )
    return sanitise_state(ctx.selectors, state, ctx.views)


def state_from_chart_click(
    ctx: AppConfig,
    state: FilterState,
    view_id: str,
    click_data: Optional[Mapping[str, Any]],
) -> FilterState:
    """
    Fold one chart click into `state`.

    Clicking a key selects it; clicking the selected key again clears the
    chart's selection. Clicks on views that ignore clicks change nothing.
    """
    view = next((v for v in ctx.views if v.id == view_id), None)
    points = (click_data or {}).get("points") or []
    if view is None or not view.clickable or not points:
        return state

    key = view.on_click(points[0])
    if key is None:
        return state

    charts = dict(state.charts)
    if charts.get(view_id) == key:
        del charts[view_id]
    else:
        charts[view_id] = key

    new_state = FilterState(
        country=state.country,
        variety=state.variety,
        points=state.points,
        price=state.price,
        charts=charts,
    )
    return sanitise_state(ctx.selectors, new_state, ctx.views)


def register_filter_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Selector dropdowns / chart clicks / reset -> FilterState store
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.FILTER_STATE, "data"),
        Output(IDs.Control.COUNTRY_SELECT, "value"),
        Output(IDs.Control.VARIETY_SELECT, "value"),
        Output(IDs.Control.POINTS_SELECT, "value"),
        Output(IDs.Control.PRICE_SELECT, "value"),
        Output({"type": IDs.Pattern.VIEW_GRAPH, "index": ALL}, "clickData"),
        Input(IDs.Control.COUNTRY_SELECT, "value"),
        Input(IDs.Control.VARIETY_SELECT, "value"),
        Input(IDs.Control.POINTS_SELECT, "value"),
        Input(IDs.Control.PRICE_SELECT, "value"),
        Input(IDs.Control.RESET_BTN, "n_clicks"),
        Input({"type": IDs.Pattern.VIEW_GRAPH, "index": ALL}, "clickData"),
        State(IDs.Store.FILTER_STATE, "data"),
    )
    def update_filter_state(country, variety, points, price, _n_clicks, graph_clicks, previous: dict[str, Any] | None):
        triggered = dash.ctx.triggered_id
        reset = triggered == IDs.Control.RESET_BTN
        previous_state = FilterState.from_dict(previous)

        state = state_from_controls(
            ctx, country, variety, points, price,
            reset=reset,
            charts=previous_state.charts,
        )

        if isinstance(triggered, dict) and triggered.get("type") == IDs.Pattern.VIEW_GRAPH:
            clicks = {
                item["id"]["index"]: item.get("value")
                for item in dash.ctx.inputs_list[_GRAPH_CLICKS_INPUT]
            }
            state = state_from_chart_click(ctx, state, triggered["index"], clicks.get(triggered["index"]))

        if previous is not None and previous_state == state:
            logger.debug("Filter state unchanged", extra={"filter_state": state.to_dict()})
        else:
            logger.info("filter_state_changed", extra={"filter_state": state.to_dict(), "reset": reset})

        # clickData is cleared so a second click on the same bar fires again
        return (
            state.to_dict(),
            state.country,
            state.variety,
            state.points,
            state.price,
            [None] * len(graph_clicks),
        )
