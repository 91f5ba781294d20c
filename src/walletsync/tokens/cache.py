"""LRUTokenCache — bounded in-process cache for resolved token metadata."""

import threading
from collections import OrderedDict

from walletsync.domain.models.token import TokenInfo


class LRUTokenCache:
    """Least-recently-used cache keyed by asset unit.

    Reads refresh recency; writes are idempotent (last write wins). A lock
    keeps the OrderedDict consistent when shared across threads.
    """

    def __init__(self, max_size: int = 1000) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self._max_size = max_size
        self._items: OrderedDict[str, TokenInfo] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, unit: str) -> TokenInfo | None:
        with self._lock:
            token = self._items.get(unit)
            if token is not None:
                self._items.move_to_end(unit)
            return token

    def set(self, unit: str, token: TokenInfo) -> None:
        with self._lock:
            if unit in self._items:
                self._items.move_to_end(unit)
            elif len(self._items) >= self._max_size:
                self._items.popitem(last=False)
            self._items[unit] = token

    def has(self, unit: str) -> bool:
        """Membership check. Does not touch LRU order."""
        with self._lock:
            return unit in self._items

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def size(self) -> int:
        return len(self._items)

    def stats(self) -> dict[str, float]:
        size = self.size()
        return {
            "size": size,
            "max_size": self._max_size,
            "utilization": size / self._max_size,
        }

    def cached_units(self) -> list[str]:
        with self._lock:
            return list(self._items.keys())
