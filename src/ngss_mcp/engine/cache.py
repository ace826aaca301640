"""Bounded in-memory query cache with TTL and insertion-order eviction.

Eviction is by oldest insertion time, not last access. That approximates LRU
closely enough for a cache whose entries are cheap to recompute; switching to
access order would not change the public interface.

TTL is checked lazily on read. There is no background sweep.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

import structlog

log = structlog.get_logger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_SEC = 300.0


def make_cache_key(operation: str, **params: Any) -> str:
    """Deterministic key for an (operation, parameters) pair.

    Parameters are serialized as compact JSON with sorted keys, so keyword
    order never causes a miss and distinct values never collide.

    Example:
        make_cache_key("search", query="energy", category=None)
        -> 'search:{"category":null,"query":"energy"}'
    """
    encoded = json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
    return f"{operation}:{encoded}"


@dataclass(frozen=True, slots=True)
class CacheEntry[T]:
    value: T
    inserted_at: float
    hits: int = 0


@dataclass(frozen=True, slots=True)
class CacheMetrics:
    hits: int
    misses: int
    evictions: int
    size: int
    hit_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "size": self.size,
            "hit_rate": self.hit_rate,
        }


class QueryCache[T]:
    """Thread-safe key -> value store with capacity and TTL bounds.

    Args:
        max_size: Maximum number of live entries.
        ttl_sec: Entries older than this are treated as misses.
        clock: Wall-clock source in seconds. Injected by tests.
        name: Label used in log events.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_sec: float = DEFAULT_TTL_SEC,
        *,
        clock: Callable[[], float] = time.time,
        name: str = "cache",
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        if ttl_sec <= 0:
            raise ValueError(f"ttl_sec must be > 0, got {ttl_sec}")
        self._max_size = max_size
        self._ttl_sec = ttl_sec
        self._clock = clock
        self._name = name
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_sec(self) -> float:
        return self._ttl_sec

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Membership does not touch metrics or expire entries
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> T | None:
        """Return the cached value, or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self._clock() - entry.inserted_at > self._ttl_sec:
                del self._entries[key]
                self._misses += 1
                self._evictions += 1
                log.debug("cache_expired", cache=self._name, key=key)
                return None

            self._entries[key] = replace(entry, hits=entry.hits + 1)
            self._hits += 1
            return entry.value

    def set(self, key: str, value: T) -> None:
        """Store a value, evicting the oldest-inserted entry when full."""
        with self._lock:
            if key in self._entries:
                # Re-insert so the entry moves to the back of insertion order
                del self._entries[key]
            elif len(self._entries) >= self._max_size:
                self._evict_oldest()
            self._entries[key] = CacheEntry(value=value, inserted_at=self._clock())

    def _evict_oldest(self) -> None:
        # min() keeps the first of equal timestamps, which is the earliest
        # inserted because dicts preserve insertion order.
        oldest_key = min(self._entries, key=lambda k: self._entries[k].inserted_at)
        del self._entries[oldest_key]
        self._evictions += 1
        log.debug("cache_evicted", cache=self._name, key=oldest_key)

    def clear(self) -> None:
        """Drop all entries. Counters are kept."""
        with self._lock:
            self._entries.clear()

    def get_metrics(self) -> CacheMetrics:
        with self._lock:
            lookups = self._hits + self._misses
            return CacheMetrics(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._entries),
                hit_rate=self._hits / lookups if lookups else 0.0,
            )

    def get_detailed_stats(self, top: int = 10) -> dict[str, Any]:
        """Metrics plus the most-hit entries and the oldest entry age."""
        metrics = self.get_metrics()
        with self._lock:
            now = self._clock()
            ranked = sorted(self._entries.items(), key=lambda kv: kv[1].hits, reverse=True)
            oldest_age = max((now - e.inserted_at for e in self._entries.values()), default=0.0)
            top_entries = [
                {"key": key, "hits": entry.hits, "age_sec": round(now - entry.inserted_at, 3)}
                for key, entry in ranked[:top]
            ]
        return {
            **metrics.to_dict(),
            "max_size": self._max_size,
            "ttl_sec": self._ttl_sec,
            "oldest_entry_age_sec": round(oldest_age, 3),
            "top_entries": top_entries,
        }
