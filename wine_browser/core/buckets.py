"""
Bucketing
=========

Maps a numeric field onto a small, fixed, ordered set of labelled ranges.
Used as key functions for the points and price selectors.

Buckets are contiguous on the integers (inclusive on both ends). Lookup is a
bisect over the lower bounds, so any value >= the first lower bound lands in
exactly one bucket. Everything else (None, negatives, NaN) maps to the
scheme's undefined label instead of being dropped.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from wine_browser.core.exceptions import ConfigurationError

UNDEFINED_LABEL = "Unknown"


@dataclass(frozen=True)
class Bucket:
    label: str
    low: int
    # None = open-ended
    high: Optional[int] = None


class BucketScheme:
    """
    Ordered, gap-free set of buckets plus an explicit undefined label.
    """

    def __init__(self, name: str, buckets: Sequence[Bucket], undefined_label: str = UNDEFINED_LABEL):
        if not buckets:
            raise ConfigurationError(f"Bucket scheme '{name}' has no buckets")

        for prev, cur in zip(buckets, buckets[1:]):
            if prev.high is None or cur.low != prev.high + 1:
                raise ConfigurationError(
                    f"Bucket scheme '{name}': '{cur.label}' must start at "
                    f"{None if prev.high is None else prev.high + 1}, got {cur.low}"
                )
        for b in buckets:
            if b.high is not None and b.high < b.low:
                raise ConfigurationError(f"Bucket scheme '{name}': '{b.label}' has high < low")

        labels = [b.label for b in buckets] + [undefined_label]
        if len(set(labels)) != len(labels):
            raise ConfigurationError(f"Bucket scheme '{name}' has duplicate labels")

        self.name = name
        self.buckets: Tuple[Bucket, ...] = tuple(buckets)
        self.undefined_label = undefined_label
        self._lows = [b.low for b in self.buckets]
        self._order = {label: i for i, label in enumerate(labels)}

    def __call__(self, value: Optional[float]) -> str:
        if value is None:
            return self.undefined_label
        if isinstance(value, float) and not math.isfinite(value):
            return self.undefined_label

        i = bisect_right(self._lows, value) - 1
        if i < 0:
            return self.undefined_label

        bucket = self.buckets[i]
        # only the last bucket can be closed above with nothing after it
        if bucket.high is not None and i == len(self.buckets) - 1 and value >= bucket.high + 1:
            return self.undefined_label
        return bucket.label

    def __repr__(self) -> str:
        return f"BucketScheme({self.name!r}, {len(self.buckets)} buckets)"

    @property
    def labels(self) -> Tuple[str, ...]:
        """Fixed ordered label list, undefined label last."""
        return tuple(b.label for b in self.buckets) + (self.undefined_label,)

    def order(self, label: str) -> int:
        return self._order[label]


POINTS_BUCKETS = BucketScheme(
    "points",
    [
        Bucket("Bad: Below 83", 0, 82),
        Bucket("Average: 83 to 87", 83, 87),
        Bucket("Good: 88 to 91", 88, 91),
        Bucket("Very Good: 92 to 95", 92, 95),
        Bucket("Excellent: Above 95", 96),
    ],
)

PRICE_BUCKETS = BucketScheme(
    "price",
    [
        Bucket("$1 to $25", 0, 25),
        Bucket("$25 to $50", 26, 50),
        Bucket("$50 to $75", 51, 75),
        Bucket("$75 to $100", 76, 100),
        Bucket("Above $100", 101),
    ],
)
