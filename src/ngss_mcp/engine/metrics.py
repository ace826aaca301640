"""Process-lifetime query timing counters."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class MethodStats:
    count: int = 0
    total_time_ms: float = 0.0
    max_time_ms: float = 0.0

    @property
    def average_time_ms(self) -> float:
        return self.total_time_ms / self.count if self.count else 0.0


@dataclass(slots=True)
class QueryMetrics:
    """Timing totals per engine operation.

    Never reset by the engine; counters live as long as the process.
    """

    count: int = 0
    total_time_ms: float = 0.0
    by_method: dict[str, MethodStats] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, method: str, elapsed_ms: float) -> None:
        with self._lock:
            self.count += 1
            self.total_time_ms += elapsed_ms
            stats = self.by_method.setdefault(method, MethodStats())
            stats.count += 1
            stats.total_time_ms += elapsed_ms
            stats.max_time_ms = max(stats.max_time_ms, elapsed_ms)

    def snapshot(self) -> dict[str, Any]:
        """Serializable view for stats tools."""
        with self._lock:
            slowest: dict[str, Any] | None = None
            if self.by_method:
                name, stats = max(self.by_method.items(), key=lambda kv: kv[1].max_time_ms)
                slowest = {"method": name, "time_ms": round(stats.max_time_ms, 3)}
            return {
                "total_queries": self.count,
                "average_time_ms": round(self.total_time_ms / self.count, 3) if self.count else 0.0,
                "slowest_query": slowest,
                "queries_by_method": {
                    name: {
                        "count": s.count,
                        "average_time_ms": round(s.average_time_ms, 3),
                        "max_time_ms": round(s.max_time_ms, 3),
                    }
                    for name, s in sorted(self.by_method.items())
                },
            }
