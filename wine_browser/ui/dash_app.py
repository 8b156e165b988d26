from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from wine_browser.config.loader import dataset_loader_for, load_global_config
from wine_browser.config.model import GlobalConfig
from wine_browser.core.base_view import BaseView
from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.dataset_loader import DatasetLoader
from wine_browser.core.records import RecordStore
from wine_browser.core.selectors import build_selectors
from wine_browser.core.view_registry import ViewRegistry
from wine_browser.ui.layout.build_layout import build_layout
from wine_browser.ui.callbacks.callbacks_filters import register_filter_callbacks
from wine_browser.ui.callbacks.callbacks_render import register_render_callbacks

logger = logging.getLogger(__name__)


def _build_view_registry() -> ViewRegistry:
    from wine_browser.views import (
        CountryCountView,
        CountryDistributionView,
        AveragePointsView,
        PointsDistributionView,
        NationalVarietyView,
        PriceToPointsView,
    )

    registry = ViewRegistry()
    registry.register(CountryCountView)
    registry.register(CountryDistributionView)
    registry.register(AveragePointsView)
    registry.register(PointsDistributionView)
    registry.register(NationalVarietyView)
    registry.register(PriceToPointsView)
    return registry


def _create_views(registry: ViewRegistry, index: CrossfilterIndex, global_config: GlobalConfig) -> List[BaseView]:
    views = []
    for view_cls in registry.all_classes():
        options = {}
        if view_cls.id == "national_variety" and global_config.varieties:
            options["varieties"] = global_config.varieties
        views.append(registry.create(view_cls.id, index, **options))
    return views


def build_context(global_config: GlobalConfig, store: RecordStore) -> AppConfig:
    """
    Build the index, selectors and views over a fully loaded store.
    """
    index = CrossfilterIndex(store)
    selectors = build_selectors(index)
    registry = _build_view_registry()
    views = _create_views(registry, index, global_config)

    ctx = AppConfig(
        global_config=global_config,
        index=index,
        selectors=selectors,
        registry=registry,
        views=views,
        data_count=index.group_all(name="data-count"),
    )
    ctx.validate()

    logger.info(
        "Cross-filter index ready",
        extra={
            "n_records": index.size(),
            "n_dimensions": len(index.dimensions),
            "n_groups": len(index.groups),
            "views": [v.id for v in views],
        },
    )
    return ctx


def load_context(config_root: Path, loader: Optional[DatasetLoader] = None) -> Tuple[AppConfig, DatasetLoader]:
    # 1) Load Config
    global_config = load_global_config(config_root)

    # 2) Load the dataset exactly once; LoadError / ParseError abort here
    loader = loader or dataset_loader_for(global_config)
    store = loader.load_sync()

    # 3) Index, selectors, views
    return build_context(global_config, store), loader


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    ctx, _ = load_context(Path(config_root))

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )
    app.title = ctx.global_config.ui_title

    app.layout = build_layout(ctx)

    # Register callbacks
    register_filter_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    return app
