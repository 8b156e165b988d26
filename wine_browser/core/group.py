from __future__ import annotations

import copy
import heapq
from typing import TYPE_CHECKING, Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from wine_browser.core.dimension import natural_key
from wine_browser.core.exceptions import InvariantViolation
from wine_browser.core.reducers import Initialize, Reducer, ReduceFn
from wine_browser.core.records import WineRecord

if TYPE_CHECKING:
    from wine_browser.core.dimension import Dimension


class GroupEntry(NamedTuple):
    key: Any
    value: Any


class Group:
    """
    Key -> accumulator mapping over one dimension.

    For a group tied to dimension D, the entry for key k reflects exactly the
    records whose key is k and that pass every *other* dimension's filter.
    D's own filter never removes records from its own group, which is what
    lets a selector keep showing all of its categories while filtered.

    Groups are passive: the CrossfilterIndex is the only caller of
    `_reduce_add` / `_reduce_remove`.
    """

    def __init__(
        self,
        dimension: Optional[Dimension],
        initialize: Initialize,
        add: ReduceFn,
        remove: ReduceFn,
        key_fn: Optional[Callable[[Any], Any]] = None,
        name: Optional[str] = None,
    ):
        self.dimension = dimension
        self.initialize = initialize
        self.add = add
        self.remove = remove
        self.key_fn = key_fn
        self.name = name or (f"{dimension.name}-group" if dimension is not None else "group")

        self.own_mask = dimension.bit_mask if dimension is not None else np.uint64(0)

        self._record_keys: Tuple[Any, ...] = ()
        # insertion order = first-seen order of keys
        self._values: Dict[Any, Any] = {}
        self._members: Dict[Any, int] = {}

    @classmethod
    def from_reducer(
        cls,
        dimension: Optional[Dimension],
        reducer: Reducer,
        key_fn: Optional[Callable[[Any], Any]] = None,
        name: Optional[str] = None,
    ) -> Group:
        return cls(dimension, reducer.initialize, reducer.add, reducer.remove, key_fn=key_fn, name=name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, size={self.size()})"

    # ------------------------------------------------------------------
    # Index-facing
    # ------------------------------------------------------------------
    def _bind(self, record_keys: Sequence[Any]) -> None:
        """Seed one entry per distinct key, in first-seen order."""
        self._record_keys = tuple(record_keys)
        self._values = {}
        self._members = {}
        for key in self._record_keys:
            if key not in self._values:
                self._values[key] = self.initialize()
                self._members[key] = 0

    def _reduce_add(self, record_index: int, record: WineRecord) -> None:
        key = self._record_keys[record_index]
        self._values[key] = self.add(self._values[key], record)
        self._members[key] += 1

    def _reduce_remove(self, record_index: int, record: WineRecord) -> None:
        key = self._record_keys[record_index]
        if self._members[key] <= 0:
            raise InvariantViolation(
                f"Group '{self.name}': removing record {record_index} from empty key {key!r}"
            )
        self._values[key] = self.remove(self._values[key], record)
        self._members[key] -= 1

    def record_key(self, record_index: int) -> Any:
        return self._record_keys[record_index]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def size(self) -> int:
        return len(self._values)

    def value(self, key: Any) -> Any:
        """Copy of the accumulator for `key`."""
        return copy.copy(self._values[key])

    def member_count(self, key: Any) -> int:
        """How many records are currently reduced into `key`."""
        return self._members[key]

    def snapshot(self, order: Optional[Callable[[GroupEntry], Any]] = None) -> Tuple[GroupEntry, ...]:
        """
        Read-only view of the group.

        Default order is the keys' natural order (None last). A custom
        `order` sort key is applied stably over first-seen order.
        """
        entries = [GroupEntry(k, copy.copy(v)) for k, v in self._values.items()]
        if order is None:
            entries.sort(key=lambda e: natural_key(e.key))
        else:
            entries.sort(key=order)
        return tuple(entries)

    def top(self, k: int, value_fn: Optional[Callable[[Any], Any]] = None) -> List[GroupEntry]:
        """k entries with the largest value (ties keep first-seen order)."""
        value_fn = value_fn or (lambda v: v)
        entries = [GroupEntry(key, copy.copy(v)) for key, v in self._values.items()]
        return heapq.nlargest(k, entries, key=lambda e: value_fn(e.value))


class GroupAll(Group):
    """
    Single accumulator over the records visible under every filter.
    """

    KEY = "all"

    def __init__(self, initialize: Initialize, add: ReduceFn, remove: ReduceFn, name: Optional[str] = None):
        super().__init__(None, initialize, add, remove, name=name or "all")

    def value(self, key: Any = KEY) -> Any:
        return super().value(key)
