from dataclasses import dataclass, field
from typing import Dict, List, Optional

from wine_browser.config.model import GlobalConfig
from wine_browser.core.base_view import BaseView
from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.group import GroupAll
from wine_browser.core.selectors import Selector
from wine_browser.core.view_registry import ViewRegistry


@dataclass
class AppConfig:
    """
    Everything the layout and callbacks need, passed by reference.
    """
    global_config: GlobalConfig
    index: CrossfilterIndex
    selectors: Dict[str, Selector] = field(default_factory=dict)
    registry: Optional[ViewRegistry] = None
    views: List[BaseView] = field(default_factory=list)
    data_count: Optional[GroupAll] = None

    def validate(self) -> None:
        """Ensure all required pieces are attached before the app starts."""
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
        if self.data_count is None:
            raise RuntimeError("AppConfig.data_count must be initialized.")
        if not self.selectors:
            raise RuntimeError("AppConfig.selectors must be initialized.")
