"""
Process-local cache store with per-entry TTL and pattern invalidation
"""

import threading
import time
from typing import Any, Callable, Dict, List, Optional

from quickcart.config.cache_config import cache_config
from quickcart.shared.utils import get_logger

logger = get_logger(__name__)


class CacheEntry:
    """Cached value with the moment it was stored and its TTL in seconds"""

    __slots__ = ("data", "stored_at", "ttl")

    def __init__(self, data: Any, stored_at: float, ttl: float):
        self.data = data
        self.stored_at = stored_at
        self.ttl = ttl

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


class CacheStore:
    """Read-through cache keyed by namespaced resource names.

    Entries expire lazily: an expired entry is removed the first time it is
    read after its TTL has elapsed. The store is a disposable accelerator and
    holds no state worth persisting.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache, evicting it when expired"""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._cache[key]
                return None
            return entry.data

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key, replacing any previous entry"""
        with self._lock:
            self._cache[key] = CacheEntry(
                value, self._clock(), ttl if ttl is not None else cache_config.DEFAULT_TTL
            )

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def invalidate_pattern(self, pattern: str) -> int:
        """Delete every key containing pattern as a substring"""
        with self._lock:
            keys_to_delete = [key for key in self._cache if pattern in key]
            for key in keys_to_delete:
                del self._cache[key]

        if keys_to_delete:
            logger.info(
                f"Invalidated {len(keys_to_delete)} cache keys matching '{pattern}'"
            )
        return len(keys_to_delete)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._cache.keys())

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        with self._lock:
            now = self._clock()
            total_keys = len(self._cache)
            expired_keys = sum(
                1 for entry in self._cache.values() if entry.is_expired(now)
            )

            # Count by prefix
            prefix_counts: Dict[str, int] = {}
            for key in self._cache.keys():
                prefix = key.split(":", 1)[0]
                prefix_counts[prefix] = prefix_counts.get(prefix, 0) + 1

            return {
                "backend": "in_memory",
                "total_keys": total_keys,
                "active_keys": total_keys - expired_keys,
                "expired_keys": expired_keys,
                "prefix_breakdown": prefix_counts,
            }
