from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from wine_browser.ui.helpers import data_count_text
from wine_browser.ui.ids import IDs
from wine_browser.ui.layout.build_filter_panel import build_filter_panel
from wine_browser.ui.layout.build_navbar import build_navbar
from wine_browser.ui.layout.build_plot_panel import build_plot_panel

if TYPE_CHECKING:
    from wine_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig) -> dbc.Container:
    navbar = build_navbar(
        ctx.global_config,
        data_count_text(ctx.data_count, ctx.index.size()),
    )

    return dbc.Container(
        fluid=True,
        className="wb-root",
        children=[
            navbar,

            # App-level stores
            dcc.Store(id=IDs.Store.FILTER_STATE, storage_type="memory"),

            dbc.Row(
                [
                    dbc.Col(build_filter_panel(ctx.selectors), md=3, className="mt-3"),
                    dbc.Col(build_plot_panel(ctx.views), md=9, className="mt-3"),
                ],
                className="gx-3",
            ),
        ],
    )
