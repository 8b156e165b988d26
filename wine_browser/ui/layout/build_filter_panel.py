from __future__ import annotations

from typing import Mapping

import dash_bootstrap_components as dbc
from dash import dcc, html

from wine_browser.core.selectors import Selector
from wine_browser.ui.helpers import selector_dropdown_options
from wine_browser.ui.ids import IDs, selector_id


def _selector_block(selector: Selector) -> html.Div:
    return html.Div(
        id=f"{selector.id}-filter-container",
        children=[
            html.Label(f"Filter {selector.label.lower()}", className="form-label"),
            dcc.Dropdown(
                id=selector_id(selector.id),
                options=selector_dropdown_options(selector),
                value=selector.selected,
                multi=False,
                placeholder=selector.label,
                className="mb-3",
            ),
        ],
    )


def build_filter_panel(selectors: Mapping[str, Selector]) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Filters", className="fw-semibold"),
            dbc.CardBody(
                [_selector_block(selector) for selector in selectors.values()]
                + [
                    html.Hr(),
                    dbc.Button(
                        "Reset all filters",
                        id=IDs.Control.RESET_BTN,
                        color="secondary",
                        size="sm",
                    ),
                ]
            ),
        ],
        className="wb-sidebar",
    )
