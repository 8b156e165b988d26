from __future__ import annotations

from typing import Any, Mapping, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from wine_browser.core.base_view import BaseView, WINE_COLOURS
from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.dimension import field_key


class CountryDistributionView(BaseView):
    """
    Pie chart: share of bottles per country.
    """

    id = "country_distribution"
    label = "Country Distribution"

    def __init__(self, index: CrossfilterIndex):
        super().__init__(index)
        self.dimension = index.dimension(field_key("country"), name="country-distribution")
        self.group = self.dimension.group(name="country-distribution")

    def compute_data(self) -> pd.DataFrame:
        rows = [{"country": e.key, "count": e.value} for e in self.group.snapshot() if e.value > 0]
        return pd.DataFrame(rows, columns=["country", "count"])

    def on_click(self, point: Mapping[str, Any]) -> Optional[Any]:
        return point.get("label")

    def render_figure(self, data: pd.DataFrame) -> go.Figure:
        fig = px.pie(
            data,
            names="country",
            values="count",
            color_discrete_sequence=WINE_COLOURS,
        )
        fig.update_layout(height=350, legend_title="Country")
        if self.selected is not None:
            fig.update_traces(pull=[0.08 if c == self.selected else 0 for c in data["country"]])
        return fig
