from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from wine_browser.core.buckets import POINTS_BUCKETS, PRICE_BUCKETS, BucketScheme
from wine_browser.core.crossfilter import CrossfilterIndex
from wine_browser.core.dimension import Dimension, field_key
from wine_browser.core.group import Group

logger = logging.getLogger(__name__)


@dataclass
class Selector:
    """
    A filter widget's view of the index: one dimension, a count group over
    it, and the label set the user picks from.

    For bucketed selectors the labels are the scheme's fixed ordered list;
    otherwise they are the dimension's distinct keys.
    """

    id: str
    label: str
    dimension: Dimension
    group: Group
    scheme: Optional[BucketScheme] = None
    selected: Any = field(default=None, init=False)

    @property
    def labels(self) -> Tuple[Any, ...]:
        if self.scheme is not None:
            return self.scheme.labels
        return tuple(entry.key for entry in self.group.snapshot())

    def options(self) -> List[Tuple[Any, int]]:
        """
        (label, count) pairs in display order, zero counts included.

        Counts reflect every other selector's filter but not this one's.
        """
        counts: Dict[Any, int] = {e.key: e.value for e in self.group.snapshot()}
        return [(label, counts.get(label, 0)) for label in self.labels]

    def select(self, label: Any) -> None:
        """
        Filter the bound dimension on `label`; None clears the filter.

        :raises ValueError: label is not one this selector offers
        """
        if label is None:
            self.dimension.clear_filter()
            self.selected = None
            return

        if label not in self.labels:
            raise ValueError(f"Selector '{self.id}' has no option {label!r}")

        self.dimension.filter_exact(label)
        self.selected = label


def _points_bucket(record) -> str:
    return POINTS_BUCKETS(record.points)


def _price_bucket(record) -> str:
    return PRICE_BUCKETS(record.price)


def build_selectors(index: CrossfilterIndex) -> Dict[str, Selector]:
    """
    Create the four filter widgets' dimensions and groups on `index`.

    Each selector owns its own dimension, so the charts (which own theirs)
    are filtered by a selection while the selector keeps its full list.
    """
    specs: Sequence[Tuple[str, str, Any, Optional[BucketScheme]]] = (
        ("country", "Country", field_key("country"), None),
        ("variety", "Variety", field_key("variety"), None),
        ("points", "Points", _points_bucket, POINTS_BUCKETS),
        ("price", "Price", _price_bucket, PRICE_BUCKETS),
    )

    selectors: Dict[str, Selector] = {}
    for sel_id, label, key_fn, scheme in specs:
        dim = index.dimension(key_fn, name=f"{sel_id}-selector")
        selectors[sel_id] = Selector(
            id=sel_id,
            label=label,
            dimension=dim,
            group=dim.group(name=f"{sel_id}-selector-count"),
            scheme=scheme,
        )

    logger.debug(
        "Selectors built",
        extra={"selectors": {k: len(s.labels) for k, s in selectors.items()}},
    )
    return selectors
