"""In-memory TTL cache for external suggestion lookups."""
import json
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

DEFAULT_MAX_ENTRIES = 1000


class TTLCache:
    """
    Key/value cache whose entries expire a fixed time after being set.

    Expired entries are never returned; they are dropped on the next read of
    their key or swept on the next write. When the cache is full, the oldest
    entry is evicted. The clock is injectable so expiry can be tested without
    sleeping.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        # Insertion order is write order, so the first key is the oldest
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(kind: str, payload: Any) -> str:
        """Build a cache key from a lookup kind and its exact input."""
        return f"{kind}:{json.dumps(payload, sort_keys=True)}"

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._expired(stored_at, self._clock()):
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries.pop(key, None)
            while self._entries and len(self._entries) >= self.max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = (now, value)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for k in expired:
            del self._entries[k]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
