"""
Record store
============

Each row of the wine reviews file becomes a `WineRecord`. Records are frozen
so dimensions and groups can refer to them by position without worrying about
them changing underneath.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Iterable, Iterator, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class WineRecord:
    """One reviewed wine."""
    country: str
    variety: str
    points: int
    # currency units; None when the review has no price
    price: Optional[int] = None


RECORD_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(WineRecord))


@dataclass(frozen=True)
class RecordColumns:
    """
    Source column names feeding each WineRecord field.
    """
    country: str = "country"
    variety: str = "variety"
    points: str = "points"
    price: str = "price"

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


class RecordStore:
    """
    Immutable ordered sequence of WineRecord objects.

    Built once at load time and shared read-only by every dimension.
    """

    def __init__(self, records: Iterable[WineRecord]):
        self._records: Tuple[WineRecord, ...] = tuple(records)

    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> WineRecord:
        return self._records[index]

    def __iter__(self) -> Iterator[WineRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"RecordStore(size={len(self._records)})"

    def to_frame(self) -> pd.DataFrame:
        """
        Tabular copy of the store. Price stays nullable (Int64).
        """
        df = pd.DataFrame([asdict(r) for r in self._records], columns=list(RECORD_FIELDS))
        df["points"] = df["points"].astype("int64")
        df["price"] = df["price"].astype("Int64")
        return df
