from __future__ import annotations

from operator import attrgetter
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Optional, Tuple

import numpy as np

from wine_browser.core.exceptions import ConfigurationError
from wine_browser.core.records import RECORD_FIELDS, WineRecord

if TYPE_CHECKING:
    from wine_browser.core.crossfilter import CrossfilterIndex
    from wine_browser.core.group import Group
    from wine_browser.core.reducers import Reducer

KeyFn = Callable[[WineRecord], Any]
Predicate = Callable[[Any], bool]


def natural_key(key: Any) -> Tuple[bool, Any]:
    """
    Sort key giving a dimension's keys their natural order, None last.
    """
    return (key is None, 0 if key is None else key)


def field_key(name: str) -> KeyFn:
    """
    Key function plucking one WineRecord field.

    :raises ConfigurationError: if WineRecord has no such field
    """
    if name not in RECORD_FIELDS:
        raise ConfigurationError(
            f"Key function references unknown field '{name}' (known: {list(RECORD_FIELDS)})"
        )
    return attrgetter(name)


class Dimension:
    """
    Filterable view over the record store keyed by `key_fn`.

    A Dimension never owns records: it holds one key per record position and
    the pass/fail bit of its current filter for each position. Filter changes
    are routed through the owning CrossfilterIndex, which updates every group.

    Create dimensions with `CrossfilterIndex.dimension(...)`.
    """

    def __init__(
        self,
        index: CrossfilterIndex,
        key_fn: KeyFn,
        keys: List[Any],
        bit: int,
        name: str,
    ):
        self._index = index
        self.key_fn = key_fn
        self.name = name
        self.bit = bit
        self.bit_mask = np.uint64(1) << np.uint64(bit)

        self._keys: Tuple[Any, ...] = tuple(keys)
        self._predicate: Optional[Predicate] = None
        self._active = np.ones(len(self._keys), dtype=bool)
        self._sorted_positions: Optional[List[int]] = None

    def __repr__(self) -> str:
        return f"Dimension({self.name!r}, filtered={self.has_filter})"

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------
    @property
    def keys(self) -> Tuple[Any, ...]:
        return self._keys

    def key(self, record_index: int) -> Any:
        return self._keys[record_index]

    def distinct_keys(self) -> List[Any]:
        return sorted(set(self._keys), key=natural_key)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    @property
    def has_filter(self) -> bool:
        return self._predicate is not None

    @property
    def predicate(self) -> Optional[Predicate]:
        return self._predicate

    def set_filter(self, predicate: Optional[Predicate]) -> None:
        """
        Replace this dimension's filter. None accepts every record.

        All groups are brought up to date before this returns.
        """
        self._index.apply_filter(self, predicate)

    def clear_filter(self) -> None:
        self.set_filter(None)

    def filter_exact(self, value: Any) -> None:
        self.set_filter(lambda key: key == value)

    def filter_in(self, values: Iterable[Any]) -> None:
        wanted = frozenset(values)
        if not wanted:
            self.clear_filter()
            return
        self.set_filter(lambda key: key in wanted)

    def filter_range(self, low: Any, high: Any) -> None:
        """Keep keys in [low, high). Records with a None key never match."""
        self.set_filter(lambda key: key is not None and low <= key < high)

    def active_bit(self, record_index: int) -> bool:
        """Pass/fail for this record under this dimension's filter only."""
        return bool(self._active[record_index])

    def evaluate(self, predicate: Optional[Predicate]) -> np.ndarray:
        """Active bitset `predicate` would produce; does not change any state."""
        if predicate is None:
            return np.ones(len(self._keys), dtype=bool)
        return np.fromiter(
            (bool(predicate(k)) for k in self._keys),
            dtype=bool,
            count=len(self._keys),
        )

    def _commit(self, predicate: Optional[Predicate], active: np.ndarray) -> None:
        self._predicate = predicate
        self._active = active

    # ------------------------------------------------------------------
    # Ordered access
    # ------------------------------------------------------------------
    def _positions(self) -> List[int]:
        if self._sorted_positions is None:
            self._sorted_positions = sorted(
                (i for i, k in enumerate(self._keys) if k is not None),
                key=lambda i: self._keys[i],
            )
        return self._sorted_positions

    def bottom(self, k: int) -> List[WineRecord]:
        """
        Up to k records visible under every filter, smallest key first.
        Records whose key is None have no place in the ordering.
        """
        return self._take(self._positions(), k)

    def top(self, k: int) -> List[WineRecord]:
        """Up to k records visible under every filter, largest key first."""
        return self._take(reversed(self._positions()), k)

    def _take(self, positions: Iterable[int], k: int) -> List[WineRecord]:
        out: List[WineRecord] = []
        if k <= 0:
            return out
        for i in positions:
            if self._index.is_visible(i):
                out.append(self._index.store[i])
                if len(out) == k:
                    break
        return out

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------
    def group(
        self,
        reducer: Optional[Reducer] = None,
        key_fn: Optional[Callable[[Any], Any]] = None,
        name: Optional[str] = None,
    ) -> Group:
        """Shorthand for `index.group(self, ...)`. Defaults to counting."""
        return self._index.group(self, reducer=reducer, key_fn=key_fn, name=name)
