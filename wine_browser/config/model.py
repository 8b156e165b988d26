from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from wine_browser.core.records import RecordColumns


@dataclass
class DatasetConfig:
    """
    Parsed `dataset` entry of global.json.
    """
    raw: Dict[str, Any]
    source_path: Path

    @property
    def name(self) -> str:
        return self.raw.get("name", "Wine reviews")

    @property
    def file(self) -> str:
        return self.raw["file"]

    @property
    def is_url(self) -> bool:
        return self.file.startswith(("http://", "https://"))

    @property
    def columns(self) -> RecordColumns:
        return RecordColumns(**self.raw.get("columns", {}))

    @property
    def on_parse_error(self) -> str:
        return self.raw.get("on_parse_error", "reject")

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path) -> DatasetConfig:
        return cls(raw=raw, source_path=source_path)


@dataclass
class GlobalConfig:
    ui_title: str
    dataset: DatasetConfig
    subtitle: str = "Wine Reviews Explorer"
    varieties: Tuple[str, ...] = ()
    data_root: Optional[Path] = None
    config_root: Path = field(default_factory=Path)
