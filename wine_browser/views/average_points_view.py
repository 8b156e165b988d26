from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from wine_browser.core.base_view import BaseView, WINE_COLOURS
from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.dimension import field_key
from wine_browser.core.reducers import average_reducer


class AveragePointsView(BaseView):
    """
    Bar chart: average points per country (running-average reducer).
    """

    id = "average_points"
    label = "Average Points per Country"

    def __init__(self, index: CrossfilterIndex):
        super().__init__(index)
        self.dimension = index.dimension(field_key("country"), name="average-points")
        self.group = self.dimension.group(average_reducer("points"), name="average-points")

    def compute_data(self) -> pd.DataFrame:
        rows = [
            {
                "country": e.key,
                "count": e.value.count,
                "total": e.value.total,
                "average": round(e.value.average, 1),
            }
            for e in self.group.snapshot()
        ]
        df = pd.DataFrame(rows, columns=["country", "count", "total", "average"])
        if df["count"].sum() == 0:
            return df.iloc[0:0]
        return df

    def render_figure(self, data: pd.DataFrame) -> go.Figure:
        fig = px.bar(
            data,
            x="country",
            y="average",
            hover_data={"count": True},
            color_discrete_sequence=WINE_COLOURS[:2],
        )
        fig.update_layout(
            height=300,
            margin=dict(l=50, r=10, t=30, b=60),
            xaxis_title=None,
            yaxis_title="Average Points",
        )
        return fig
