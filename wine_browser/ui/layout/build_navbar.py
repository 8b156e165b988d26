from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from wine_browser.config.model import GlobalConfig
from wine_browser.ui.ids import IDs


def build_navbar(global_config: GlobalConfig, data_count_text: str) -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                # Left: title
                html.Div(
                    [
                        html.H2(global_config.ui_title, className="mb-0"),
                        html.Small(
                            global_config.subtitle,
                            className="text-muted",
                            id="navbar-subtitle",
                        ),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),

                # Right: selected / total count
                html.Div(
                    [
                        html.Div("Dataset", className="navbar-dataset-title"),
                        html.Div(
                            data_count_text,
                            id=IDs.Control.DATA_COUNT,
                            className="navbar-dataset-subtitle",
                        ),
                    ],
                    className="ms-auto navbar-dataset-block",
                    style={"minWidth": "240px", "marginRight": "24px"},
                ),
            ],
        ),
        dark=False,
        className="shadow-sm wb-navbar",
    )
