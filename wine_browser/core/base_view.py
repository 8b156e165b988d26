from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

import pandas as pd
import plotly.graph_objs as go

from .crossfilter import CrossfilterIndex

if TYPE_CHECKING:
    from .dimension import Dimension

logger = logging.getLogger(__name__)

WINE_COLOURS = [
    "#9a3339", "#E64C55", "#AB6C6F", "#E69196", "#672226", "#B33B42", "#805154",
    "#B37175", "#341113", "#C0797D", "#332022", "#802A2F", "#8D4327", "#D97752", "#401A0B",
]


class BaseView(ABC):
    """
    Abstract base class for all chart views.

    Defines the contract that every view in the app must follow
    - expose an 'id' - used internally
    - expose a 'label' - used for UI/human-readable applications
    - create its dimension and group(s) on the shared index in the constructor
    - implement 'compute_data' - turn the current group snapshot into a dataframe
    - implement 'render_figure' - used to render the figure using Plotly

    Views read snapshots of their own group(s). A view whose chart can be
    clicked overrides 'on_click' to map a Plotly click point to a key of
    its dimension; 'select' then filters that dimension, so every other
    view follows the click while the clicked chart keeps all its bars.
    """

    id: str = None
    label: str = None
    # set by views that own a single filterable dimension
    dimension: Optional[Dimension] = None

    def __init__(self, index: CrossfilterIndex):
        self.index = index
        self.selected: Any = None

    @abstractmethod
    def compute_data(self) -> pd.DataFrame:
        """
        Compute the data for the current filters
        :return: data: a dataframe built from the view's group snapshot
        """
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: pd.DataFrame) -> go.Figure:
        """
        Render the figure given the computed data
        :param data: the data provided by {@link compute_data()}
        :return: the Plotly figure
        """
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Common helpers for all views
    # ------------------------------------------------------------------
    def timed_compute(self) -> Any:
        start = time.perf_counter()
        data = self.compute_data()
        logger.debug(
            "compute_data finished",
            extra={"view_id": self.id, "elapsed_ms": round((time.perf_counter() - start) * 1000, 2)},
        )
        return data

    # ------------------------------------------------------------------
    # Click-to-filter
    # ------------------------------------------------------------------
    def on_click(self, point: Mapping[str, Any]) -> Optional[Any]:
        """
        Map one Plotly click point (an entry of `clickData["points"]`) to a
        key of this view's dimension. None means the view ignores clicks.
        """
        return None

    @property
    def clickable(self) -> bool:
        return self.dimension is not None and type(self).on_click is not BaseView.on_click

    def selection_keys(self) -> List[Any]:
        if not self.clickable:
            return []
        return self.dimension.distinct_keys()

    def select(self, key: Optional[Any]) -> None:
        """Filter this view's dimension on `key`; None clears it."""
        if not self.clickable:
            return
        if key is None:
            self.dimension.clear_filter()
        else:
            self.dimension.filter_exact(key)
        self.selected = key

    def toggle(self, key: Optional[Any]) -> Optional[Any]:
        """The selection a click on `key` leads to: clicking the selected key again clears it."""
        if key is None or key == self.selected:
            return None
        return key

    def handle_click(self, point: Mapping[str, Any]) -> Optional[Any]:
        """Apply a click and return the new selection."""
        key = self.on_click(point)
        if key is None:
            return self.selected
        self.select(self.toggle(key))
        return self.selected

    def figure(self) -> go.Figure:
        data = self.timed_compute()
        if data is None or data.empty:
            return self.empty_figure("No wines match the current filters")
        return self.render_figure(data)

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
