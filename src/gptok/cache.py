"""Memo table for merged BPE chunks, safe for concurrent callers."""

import logging
import threading
from collections import OrderedDict

log = logging.getLogger(__name__)


class BpeCache:
    """
    Map a byte-mapped chunk to its space-joined merge result.

    Entries never go stale: a chunk always reduces to the same result for a
    given merge table. Without a capacity the cache only grows, and writes are
    insert-if-absent so racing writers agree on the stored value. With a
    capacity the least recently used entry is evicted once the cache is full.
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity < 1:
            capacity = None
        self.capacity = capacity
        self._data: dict[str, str] | OrderedDict[str, str] = (
            {} if capacity is None else OrderedDict()
        )
        # guards recency bookkeeping, only used in bounded mode
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        """Return the cached result for ``key`` or ``None``."""
        if self.capacity is None:
            return self._data.get(key)

        with self._lock:
            value = self._data.get(key)
            if value is not None:
                self._data.move_to_end(key)
            return value

    def put(self, key: str, value: str) -> str:
        """
        Store ``value`` unless ``key`` is already cached.

        :returns: The value held by the cache after the call.
        """
        if self.capacity is None:
            return self._data.setdefault(key, value)

        with self._lock:
            existing = self._data.get(key)
            if existing is not None:
                self._data.move_to_end(key)
                return existing
            self._data[key] = value
            if len(self._data) > self.capacity:
                evicted, _ = self._data.popitem(last=False)
                log.debug(f"evicted {evicted!r} from bpe cache")
            return value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
