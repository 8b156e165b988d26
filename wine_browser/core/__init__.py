"""
Core domain layer: record store, the cross-filter engine (dimensions, groups,
reducers), selectors and filter state, view base class and view registry
"""

from .records import RecordStore, WineRecord
from .crossfilter import CrossfilterIndex
from .dimension import Dimension
from .group import Group, GroupAll, GroupEntry
from .filter_state import FilterState
from .base_view import BaseView
from .view_registry import ViewRegistry

__all__ = [
    "RecordStore",
    "WineRecord",
    "CrossfilterIndex",
    "Dimension",
    "Group",
    "GroupAll",
    "GroupEntry",
    "FilterState",
    "BaseView",
    "ViewRegistry",
]
