from __future__ import annotations

from typing import Any, Mapping, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from wine_browser.core.base_view import BaseView, WINE_COLOURS
from wine_browser.core.buckets import POINTS_BUCKETS
from wine_browser.core.crossfilter import CrossfilterIndex


class PointsDistributionView(BaseView):
    """
    Pie chart: bottles per points bucket, in bucket order.
    """

    id = "points_distribution"
    label = "Points Distribution"

    def __init__(self, index: CrossfilterIndex):
        super().__init__(index)
        self.dimension = index.dimension(lambda r: POINTS_BUCKETS(r.points), name="points-distribution")
        self.group = self.dimension.group(name="points-distribution")

    def compute_data(self) -> pd.DataFrame:
        entries = self.group.snapshot(order=lambda e: POINTS_BUCKETS.order(e.key))
        rows = [{"bucket": e.key, "count": e.value} for e in entries if e.value > 0]
        return pd.DataFrame(rows, columns=["bucket", "count"])

    def on_click(self, point: Mapping[str, Any]) -> Optional[Any]:
        return point.get("label")

    def render_figure(self, data: pd.DataFrame) -> go.Figure:
        fig = px.pie(
            data,
            names="bucket",
            values="count",
            category_orders={"bucket": list(POINTS_BUCKETS.labels)},
            color_discrete_sequence=WINE_COLOURS,
        )
        fig.update_traces(sort=False)
        fig.update_layout(height=350, legend_title="Points")
        if self.selected is not None:
            fig.update_traces(pull=[0.08 if b == self.selected else 0 for b in data["bucket"]])
        return fig
