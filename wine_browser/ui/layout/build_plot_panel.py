from __future__ import annotations

from typing import List, Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from wine_browser.core.base_view import BaseView
from wine_browser.ui.ids import graph_id

# views drawn across the whole row
WIDE_VIEWS = {"national_variety", "price_to_points"}


def _view_card(view: BaseView) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(html.Strong(view.label), className="p-2"),
            dbc.CardBody(
                dcc.Loading(
                    type="default",
                    children=dcc.Graph(
                        id=graph_id(view.id),
                        figure=view.figure(),
                        config={"responsive": True},
                    ),
                ),
                className="wb-main-body",
            ),
        ],
        className="wb-maincard mb-3",
    )


def build_plot_panel(views: Sequence[BaseView]) -> html.Div:
    cols: List[dbc.Col] = []
    for view in views:
        width = 12 if view.id in WIDE_VIEWS else 6
        cols.append(dbc.Col(_view_card(view), md=width))
    return html.Div(dbc.Row(cols, className="gx-3"))
