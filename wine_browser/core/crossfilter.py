"""
Cross-filter index
==================

Owns the record store, every dimension and every group.

Each record carries a uint64 filter mask: bit j is set when dimension j's
filter rejects the record. A record is visible to a group when its mask is
zero once the group's own dimension bit is ignored. When one dimension's
filter changes, only records whose bit flipped can change visibility, and
for each group the index applies exactly those adds and removes.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

import numpy as np

from wine_browser.core.dimension import Dimension, KeyFn, Predicate, natural_key
from wine_browser.core.exceptions import ConfigurationError
from wine_browser.core.group import Group, GroupAll, GroupEntry
from wine_browser.core.records import RecordStore, WineRecord
from wine_browser.core.reducers import Reducer, count_reducer

logger = logging.getLogger(__name__)

MAX_DIMENSIONS = 64

Listener = Callable[[Dimension], None]


class CrossfilterIndex:
    """
    Multidimensional index over one fully materialised RecordStore.

    All recomputation happens synchronously inside `apply_filter`; readers
    only ever see settled snapshots. A filter change issued while another is
    being applied (e.g. from a listener) is queued and run afterwards; one
    from another thread waits for the current change to settle.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self._dimensions: List[Dimension] = []
        self._groups: List[Group] = []
        self._mask = np.zeros(store.size(), dtype=np.uint64)

        self._listeners: List[Listener] = []
        self._pending: Deque[Tuple[Dimension, Optional[Predicate]]] = deque()
        self._busy = False
        # held across a whole filter change; re-entrant so listeners can queue more
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return (
            f"CrossfilterIndex(records={self.size()}, dimensions={len(self._dimensions)}, "
            f"groups={len(self._groups)})"
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def dimension(self, key_fn: KeyFn, name: Optional[str] = None) -> Dimension:
        """
        Create a dimension, extracting its key for every record up front.

        :raises ConfigurationError: key function fails or yields an unhashable
            key for some record, or the dimension limit is reached
        """
        if len(self._dimensions) >= MAX_DIMENSIONS:
            raise ConfigurationError(f"At most {MAX_DIMENSIONS} dimensions per index")

        name = name or f"dimension-{len(self._dimensions)}"
        keys = self._extract(key_fn, name)

        dim = Dimension(self, key_fn, keys, bit=len(self._dimensions), name=name)
        self._dimensions.append(dim)

        logger.debug(
            "Dimension created",
            extra={"dimension": name, "n_keys": len(set(keys))},
        )
        return dim

    def _extract(self, key_fn: Callable[[Any], Any], name: str, source: Optional[Tuple[Any, ...]] = None) -> List[Any]:
        keys: List[Any] = []
        items = self.store if source is None else source
        for i, item in enumerate(items):
            try:
                key = key_fn(item)
                hash(key)
            except Exception as e:
                msg = f"Key function for '{name}' failed on record {i}: {e!r}"
                logger.error(msg, extra={"dimension": name, "record": i})
                raise ConfigurationError(msg) from e
            keys.append(key)
        return keys

    def group(
        self,
        dimension: Dimension,
        reducer: Optional[Reducer] = None,
        key_fn: Optional[Callable[[Any], Any]] = None,
        name: Optional[str] = None,
    ) -> Group:
        """
        Create a group over `dimension`, aggregating the records visible
        under every other dimension's filter.

        `key_fn` optionally maps dimension keys onto coarser group keys.
        """
        if dimension not in self._dimensions:
            raise ConfigurationError(f"Dimension '{dimension.name}' belongs to another index")

        reducer = reducer or count_reducer()
        group = Group.from_reducer(dimension, reducer, key_fn=key_fn, name=name)
        record_keys = (
            list(dimension.keys)
            if key_fn is None
            else self._extract(key_fn, group.name, source=dimension.keys)
        )
        return self._register(group, record_keys)

    def group_all(self, reducer: Optional[Reducer] = None, name: Optional[str] = None) -> GroupAll:
        """Single accumulator over the records passing every filter."""
        reducer = reducer or count_reducer()
        group = GroupAll(reducer.initialize, reducer.add, reducer.remove, name=name)
        self._register(group, [GroupAll.KEY] * self.size())
        return group

    def _register(self, group: Group, record_keys: List[Any]) -> Group:
        group._bind(record_keys)
        for i in np.flatnonzero(self._visible_to(group, self._mask)):
            group._reduce_add(int(i), self.store[int(i)])
        self._groups.append(group)
        logger.debug("Group created", extra={"group": group.name, "n_keys": group.size()})
        return group

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------
    @staticmethod
    def _visible_to(group: Group, mask: np.ndarray) -> np.ndarray:
        return (mask & ~group.own_mask) == 0

    @property
    def lock(self) -> threading.RLock:
        """
        Lock serialising filter changes. Hold it across apply-then-read
        sequences that must see one consistent state.
        """
        return self._lock

    def apply_filter(self, dimension: Dimension, predicate: Optional[Predicate]) -> None:
        """
        Replace `dimension`'s filter and bring every group up to date.

        Called through `Dimension.set_filter`. A call from another thread
        blocks until the change in progress (and anything it queued) has
        settled. If a queued change fails, the changes still waiting behind
        it are dropped.
        """
        with self._lock:
            self._pending.append((dimension, predicate))
            if self._busy:
                logger.debug("Filter change queued", extra={"dimension": dimension.name})
                return

            self._busy = True
            try:
                while self._pending:
                    dim, pred = self._pending.popleft()
                    self._recompute(dim, pred)
                    self._notify(dim)
            except Exception:
                if self._pending:
                    logger.warning(
                        "Dropping queued filter changes after a failed change",
                        extra={"dropped": [d.name for d, _ in self._pending]},
                    )
                    self._pending.clear()
                raise
            finally:
                self._busy = False

    def _recompute(self, dimension: Dimension, predicate: Optional[Predicate]) -> None:
        # evaluate before touching any state so a failing predicate changes nothing
        active = dimension.evaluate(predicate)
        flipped = np.flatnonzero(active != dimension._active)

        old_mask = self._mask
        new_mask = old_mask.copy()
        bit = dimension.bit_mask
        new_mask[active] &= ~bit
        new_mask[~active] |= bit

        n_added = n_removed = 0
        if flipped.size:
            old_sub = old_mask[flipped]
            new_sub = new_mask[flipped]
            for group in self._groups:
                before = self._visible_to(group, old_sub)
                after = self._visible_to(group, new_sub)
                for i in flipped[before & ~after]:
                    group._reduce_remove(int(i), self.store[int(i)])
                    n_removed += 1
                for i in flipped[after & ~before]:
                    group._reduce_add(int(i), self.store[int(i)])
                    n_added += 1

        self._mask = new_mask
        dimension._commit(predicate, active)

        logger.debug(
            "Filter applied",
            extra={
                "dimension": dimension.name,
                "n_flipped": int(flipped.size),
                "n_group_adds": n_added,
                "n_group_removes": n_removed,
                "n_visible": self.visible_count(),
            },
        )

    def clear_all(self) -> None:
        with self._lock:
            for dim in self._dimensions:
                if dim.has_filter:
                    dim.clear_filter()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call `listener(dimension)` after every settled filter change.
        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, dimension: Dimension) -> None:
        for listener in list(self._listeners):
            listener(dimension)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @property
    def dimensions(self) -> Tuple[Dimension, ...]:
        return tuple(self._dimensions)

    @property
    def groups(self) -> Tuple[Group, ...]:
        return tuple(self._groups)

    def size(self) -> int:
        return self.store.size()

    def is_visible(self, record_index: int) -> bool:
        """True when the record passes every dimension's filter."""
        return bool(self._mask[record_index] == 0)

    def visible_indices(self) -> List[int]:
        return [int(i) for i in np.flatnonzero(self._mask == 0)]

    def visible_records(self) -> List[WineRecord]:
        return [self.store[i] for i in self.visible_indices()]

    def visible_count(self) -> int:
        return int(np.count_nonzero(self._mask == 0))

    def rebuild(self, group: Group) -> Tuple[GroupEntry, ...]:
        """
        Aggregate `group` from scratch over the records currently visible to
        it, without touching the group. Same shape and order as
        `group.snapshot()`.
        """
        values: Dict[Any, Any] = {}
        for i in range(self.size()):
            key = group.record_key(i)
            if key not in values:
                values[key] = group.initialize()
        for i in np.flatnonzero(self._visible_to(group, self._mask)):
            key = group.record_key(int(i))
            values[key] = group.add(values[key], self.store[int(i)])
        entries = [GroupEntry(k, v) for k, v in values.items()]
        entries.sort(key=lambda e: natural_key(e.key))
        return tuple(entries)
