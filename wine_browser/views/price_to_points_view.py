from __future__ import annotations

from typing import Optional, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from wine_browser.core.base_view import BaseView, WINE_COLOURS
from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.dimension import field_key
from wine_browser.core.records import WineRecord


def price_points_key(record: WineRecord) -> Optional[Tuple[int, int]]:
    # no price, no x coordinate
    if record.price is None:
        return None
    return (record.price, record.points)


class PriceToPointsView(BaseView):
    """
    Scatter plot: price against points.

    Keyed by the (price, points) pair, so identical pairs collapse into one
    point whose count is shown on hover. Wines without a price are left out
    of this chart only.
    """

    id = "price_to_points"
    label = "Price vs Points"

    def __init__(self, index: CrossfilterIndex):
        super().__init__(index)
        self.price_dimension = index.dimension(field_key("price"), name="price-to-points:price")
        self.dimension = index.dimension(price_points_key, name="price-to-points")
        self.group = self.dimension.group(name="price-to-points")

    def price_range(self) -> Optional[Tuple[int, int]]:
        """(min, max) price among the wines passing every filter."""
        lowest = self.price_dimension.bottom(1)
        highest = self.price_dimension.top(1)
        if not lowest or not highest:
            return None
        return lowest[0].price, highest[0].price

    def compute_data(self) -> pd.DataFrame:
        rows = [
            {"price": e.key[0], "points": e.key[1], "count": e.value}
            for e in self.group.snapshot()
            if e.key is not None and e.value > 0
        ]
        return pd.DataFrame(rows, columns=["price", "points", "count"])

    def render_figure(self, data: pd.DataFrame) -> go.Figure:
        fig = px.scatter(
            data,
            x="price",
            y="points",
            hover_data={"count": True},
            color_discrete_sequence=WINE_COLOURS[:1],
        )
        fig.update_traces(marker={"size": 8})

        price_range = self.price_range()
        if price_range is not None:
            fig.update_xaxes(range=list(price_range))

        fig.update_layout(
            height=320,
            margin=dict(l=50, r=70, t=10, b=70),
            xaxis_title="Price in $",
            yaxis_title="Points",
        )
        return fig
