from .model import DatasetConfig, GlobalConfig
from .loader import dataset_loader_for, load_global_config, resolve_dataset_source

__all__ = ["DatasetConfig", "GlobalConfig", "dataset_loader_for", "load_global_config", "resolve_dataset_source"]
