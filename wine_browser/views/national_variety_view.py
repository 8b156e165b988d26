from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from wine_browser.core.base_view import BaseView, WINE_COLOURS
from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.dimension import field_key
from wine_browser.core.group import Group
from wine_browser.core.reducers import match_ratio_reducer

logger = logging.getLogger(__name__)

DEFAULT_VARIETIES = (
    "Cabernet Sauvignon",
    "Malbec",
    "Bordeaux-style Red Blend",
    "Pinot Noir",
    "Syrah",
    "Grenache",
    "Merlot",
    "Tempranillo",
    "Red Blend",
)


class NationalVarietyView(BaseView):
    """
    Stacked bar chart: for each country, the percentage of its bottles that
    are each of a fixed list of varieties.

    One match-ratio group per variety, all sharing one country dimension.
    """

    id = "national_variety"
    label = "Variety % per Country"

    def __init__(self, index: CrossfilterIndex, varieties: Optional[Sequence[str]] = None):
        super().__init__(index)
        self.varieties = tuple(varieties) if varieties else DEFAULT_VARIETIES
        self.dimension = index.dimension(field_key("country"), name="national-variety")
        self.groups: Dict[str, Group] = {
            variety: self.dimension.group(match_ratio_reducer(variety), name=f"national-variety:{variety}")
            for variety in self.varieties
        }

    def compute_data(self) -> pd.DataFrame:
        rows = []
        for variety, group in self.groups.items():
            for e in group.snapshot():
                rows.append(
                    {
                        "country": e.key,
                        "variety": variety,
                        "total": e.value.total,
                        "match": e.value.match,
                        "percentage": round(e.value.ratio * 100, 1),
                    }
                )
        df = pd.DataFrame(rows, columns=["country", "variety", "total", "match", "percentage"])
        if df["match"].sum() == 0:
            return df.iloc[0:0]
        return df

    def render_figure(self, data: pd.DataFrame) -> go.Figure:
        fig = px.bar(
            data,
            x="country",
            y="percentage",
            color="variety",
            barmode="stack",
            category_orders={"variety": list(self.varieties)},
            hover_data={"match": True, "total": True},
            color_discrete_sequence=WINE_COLOURS,
        )
        fig.update_layout(
            height=320,
            margin=dict(l=50, r=100, t=50, b=70),
            xaxis_title=None,
            yaxis_title="Variety %",
            legend_title="Variety",
        )
        return fig
