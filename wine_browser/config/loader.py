from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Union

from wine_browser.config.model import DatasetConfig, GlobalConfig
from wine_browser.core.dataset_loader import PARSE_POLICIES, DatasetLoader
from wine_browser.core.exceptions import ConfigurationError
from wine_browser.core.records import RecordColumns

logger = logging.getLogger(__name__)


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory.

    Expected structure:

        root/
            global.json

    global.json keys:

    - ui_title: title for the UI, defaults to 'Wine Browser'
    - subtitle: navbar subtitle
    - data_root: directory relative dataset paths resolve against
                 (relative to root; WINE_BROWSER_DATA_ROOT wins when set)
    - dataset: {"file", "name", "columns", "on_parse_error"}
    - varieties: varieties shown in the national variety chart

    :param root: Directory containing 'global.json'.
    :return: A GlobalConfig instance.
    :raises FileNotFoundError: if global.json does not exist.
    :raises ConfigurationError: if a value is missing or invalid.
    """
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    with global_path.open() as f:
        try:
            raw_global = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{global_path} is not valid JSON: {e}") from e

    raw_dataset = raw_global.get("dataset")
    if not isinstance(raw_dataset, dict) or not raw_dataset.get("file"):
        raise ConfigurationError(f"{global_path}: 'dataset.file' is required")

    dataset = DatasetConfig.from_raw(raw_dataset, source_path=global_path)
    _validate_dataset(dataset, global_path)

    # Resolve data_root:
    # - WINE_BROWSER_DATA_ROOT env var wins
    # - absolute paths are used as-is
    # - relative paths are resolved relative to the config root directory
    env_root = os.environ.get("WINE_BROWSER_DATA_ROOT")
    data_root_raw = env_root or raw_global.get("data_root")
    if data_root_raw is None:
        data_root = None
    else:
        data_root_path = Path(data_root_raw)
        data_root = data_root_path if data_root_path.is_absolute() else (root / data_root_path).resolve()

    varieties = raw_global.get("varieties", [])
    if not isinstance(varieties, list) or not all(isinstance(v, str) for v in varieties):
        raise ConfigurationError(f"{global_path}: 'varieties' must be a list of strings")

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Wine Browser"),
        subtitle=raw_global.get("subtitle", "Wine Reviews Explorer"),
        dataset=dataset,
        varieties=tuple(varieties),
        data_root=data_root,
        config_root=root,
    )


def _validate_dataset(dataset: DatasetConfig, global_path: Path) -> None:
    if dataset.on_parse_error not in PARSE_POLICIES:
        raise ConfigurationError(
            f"{global_path}: dataset.on_parse_error must be one of {PARSE_POLICIES}, "
            f"got {dataset.on_parse_error!r}"
        )
    try:
        dataset.columns
    except TypeError as e:
        raise ConfigurationError(
            f"{global_path}: dataset.columns may only map {list(RecordColumns().as_dict())}: {e}"
        ) from e


def resolve_dataset_source(cfg: GlobalConfig) -> Union[str, Path]:
    """
    URLs pass through; relative paths resolve against data_root, then the config root.
    """
    if cfg.dataset.is_url:
        return cfg.dataset.file

    path = Path(cfg.dataset.file)
    if path.is_absolute():
        return path

    base = cfg.data_root if cfg.data_root is not None else cfg.config_root
    resolved = base / path

    # Fallback for redundant 'data/' prefix
    if not resolved.is_file() and path.parts and path.parts[0] == "data":
        alt_path = base / Path(*path.parts[1:])
        if alt_path.is_file():
            resolved = alt_path
    return resolved


def dataset_loader_for(cfg: GlobalConfig) -> DatasetLoader:
    source = resolve_dataset_source(cfg)
    logger.info(
        "Dataset source resolved",
        extra={"dataset": cfg.dataset.name, "source": str(source), "on_parse_error": cfg.dataset.on_parse_error},
    )
    return DatasetLoader(source, columns=cfg.dataset.columns, on_parse_error=cfg.dataset.on_parse_error)
