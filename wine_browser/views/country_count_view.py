from __future__ import annotations

from typing import Any, Mapping, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from wine_browser.core.base_view import BaseView, WINE_COLOURS
from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.dimension import field_key


class CountryCountView(BaseView):
    """
    Bar chart: number of bottles per country.
    """

    id = "country_count"
    label = "Bottles per Country"

    def __init__(self, index: CrossfilterIndex):
        super().__init__(index)
        self.dimension = index.dimension(field_key("country"), name="country-count")
        self.group = self.dimension.group(name="country-count")

    def compute_data(self) -> pd.DataFrame:
        # keep zero-count countries so the x axis stays stable while filtering
        rows = [{"country": e.key, "count": e.value} for e in self.group.snapshot()]
        df = pd.DataFrame(rows, columns=["country", "count"])
        if df["count"].sum() == 0:
            return df.iloc[0:0]
        return df

    def on_click(self, point: Mapping[str, Any]) -> Optional[Any]:
        return point.get("x")

    def render_figure(self, data: pd.DataFrame) -> go.Figure:
        fig = px.bar(
            data,
            x="country",
            y="count",
            color_discrete_sequence=WINE_COLOURS[:2],
        )
        fig.update_layout(
            height=300,
            margin=dict(l=50, r=30, t=20, b=60),
            xaxis_title=None,
            yaxis_title="Wine Bottles",
        )
        if self.selected is not None:
            # dim the bars outside the clicked country
            fig.update_traces(marker_opacity=[1.0 if c == self.selected else 0.35 for c in data["country"]])
        return fig
