# tutoring/core/cache.py
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional


class _Missing:
    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


# Returned by EvictionCache.get on a miss. A cached None is a hit.
MISSING = _Missing()


def now_ms() -> float:
    return time.time() * 1000


@dataclass
class CacheEntry:
    value: Any
    timestamp: float


class EvictionCache:
    """
    Key -> value memo with a TTL and a size cap.

    Values may be ``None`` ("no such entity"), so a hit can answer "not found"
    without another query until the entry expires. Entries are kept in write
    order; when the cap is exceeded the oldest writes go first. With
    ``max_size=None`` entries only ever leave by expiry or invalidation.
    """

    def __init__(self, ttl_ms: float, max_size: Optional[int] = 100,
                 clock: Callable[[], float] = now_ms):
        self.ttl_ms = ttl_ms
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()

    @staticmethod
    def is_valid(entry: CacheEntry, now: float, ttl_ms: float) -> bool:
        return (now - entry.timestamp) < ttl_ms

    def get(self, key: Hashable, default: Any = MISSING) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        if not self.is_valid(entry, self._clock(), self.ttl_ms):
            del self._entries[key]
            return default
        return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, timestamp=self._clock())
        self._entries.move_to_end(key)
        if self.max_size is not None and len(self._entries) > self.max_size:
            self.cleanup()

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self, now: Optional[float] = None) -> int:
        """Drop expired entries, then trim to the newest ``max_size``. Returns how many went."""
        now = self._clock() if now is None else now
        before = len(self._entries)

        for key in [k for k, e in self._entries.items() if not self.is_valid(e, now, self.ttl_ms)]:
            del self._entries[key]

        while self.max_size is not None and len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

        return before - len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not MISSING

    def __len__(self) -> int:
        return len(self._entries)
