from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import dash
import plotly.graph_objs as go
from dash import ALL, Input, Output

from wine_browser.core.filter_state import SELECTOR_FIELDS, FilterState, apply_filter_state
from wine_browser.ui.helpers import data_count_text, sanitise_state, selector_dropdown_options
from wine_browser.ui.ids import IDs, selector_id

if TYPE_CHECKING:
    from wine_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helper: Error Figures
# -----------------------------------------------------------------------------
def _message_figure(title: str, details: Optional[str] = None) -> go.Figure:
    fig = go.Figure()
    text = title if details is None else f"{title}\n\n{details}"
    fig.add_annotation(
        text=text,
        showarrow=False,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=40, r=40, t=40, b=40))
    return fig


def _error_figure(details: str) -> go.Figure:
    return _message_figure("Something went wrong while rendering this view.", details)


def render_dashboard(ctx: AppConfig, fs_data: dict[str, Any] | None) -> Tuple[List[List[dict]], Dict[str, go.Figure], str]:
    """
    Apply the stored filter state to the index and read everything back.

    Returns selector options (in SELECTOR_FIELDS order), a figure per view id
    and the data-count text. The index lock is held from applying the state
    to the last read, so concurrent requests never see each other's filters.
    """
    with ctx.index.lock:
        state = sanitise_state(ctx.selectors, FilterState.from_dict(fs_data), ctx.views)

        # idempotent: re-applying the current state produces no group deltas
        apply_filter_state(ctx.selectors, state, ctx.views)

        options = [selector_dropdown_options(ctx.selectors[name]) for name in SELECTOR_FIELDS]

        figures: Dict[str, go.Figure] = {}
        for view in ctx.views:
            try:
                figures[view.id] = view.figure()
            except Exception:
                logger.exception(
                    "Error while rendering view",
                    extra={"view_id": view.id, "filter_state": state.to_dict()},
                )
                figures[view.id] = _error_figure(
                    "The app hit an unexpected error. "
                    "If this keeps happening, grab the logs and open an issue."
                )

        count_text = data_count_text(ctx.data_count, ctx.index.size())

    return options, figures, count_text


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # FilterState -> selector options, every chart, data count
    # ---------------------------------------------------------
    @app.callback(
        *[Output(selector_id(name), "options") for name in SELECTOR_FIELDS],
        Output({"type": IDs.Pattern.VIEW_GRAPH, "index": ALL}, "figure"),
        Output(IDs.Control.DATA_COUNT, "children"),
        Input(IDs.Store.FILTER_STATE, "data"),
        prevent_initial_call=True,
    )
    def update_dashboard(fs_data: dict[str, Any] | None):
        options, figures, count_text = render_dashboard(ctx, fs_data)

        # pattern-matched outputs come back in layout order; map by view id
        graph_outputs = dash.ctx.outputs_list[len(SELECTOR_FIELDS)]
        ordered = [
            figures.get(out["id"]["index"], _error_figure(f"Unknown view '{out['id']['index']}'"))
            for out in graph_outputs
        ]

        logger.info(
            "render_done",
            extra={"n_visible": ctx.index.visible_count(), "n_views": len(ordered)},
        )
        return (*options, ordered, count_text)
