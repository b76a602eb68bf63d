import math
import threading
from collections import deque
from typing import Deque, Hashable, Iterable, List, Set, Tuple, Union

from .stats import average

Number = Union[int, float]

_NAN = object()


def _member_key(value: Number) -> Hashable:
    # every NaN is the same window value
    if isinstance(value, float) and math.isnan(value):
        return _NAN
    return value


class SlidingUniqueWindow:
    """
    Count-based sliding window of distinct numbers.
    Keeps the most recently introduced values, oldest first, with O(1)
    membership checks and eviction.

    Calls are serialized by an internal lock. Inside an asyncio handler,
    call ``ingest`` and ``average`` back to back (no ``await`` between them)
    so that a response reflects one consistent state.
    """
    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: Deque[Number] = deque()
        self._members: Set[Hashable] = set()
        self._lock = threading.Lock()

    def ingest(self, batch: Iterable[Number]) -> Tuple[List[Number], List[Number]]:
        """Add unseen numbers from batch, evicting the oldest when full.

        Returns copies of the window before and after the batch.
        """
        with self._lock:
            previous = list(self._items)
            for value in batch:
                key = _member_key(value)
                if key in self._members:
                    continue
                if len(self._items) >= self.capacity:
                    self._members.discard(_member_key(self._items.popleft()))
                self._items.append(value)
                self._members.add(key)
            return previous, list(self._items)

    def average(self) -> Number:
        """Mean of the window rounded to 2 decimals, 0 when empty."""
        with self._lock:
            return average(self._items)

    def snapshot(self) -> List[Number]:
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
