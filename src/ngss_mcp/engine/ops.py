"""StandardsEngine: the query surface over one loaded corpus.

One engine is built per process (or per test) and passed explicitly to
whatever needs it. It owns the indexes, both query caches, and the timing
counters; nothing here is module-level state.

Every public operation validates its inputs first and records its wall time
into QueryMetrics, including operations that raise.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from ngss_mcp.config.models import CacheConfig
from ngss_mcp.core.errors import NotFoundError
from ngss_mcp.engine.cache import QueryCache
from ngss_mcp.engine.compatibility import CompatibilityScorer
from ngss_mcp.engine.fuzzy import FuzzyMatcher
from ngss_mcp.engine.indexer import build_indexes
from ngss_mcp.engine.metrics import QueryMetrics
from ngss_mcp.engine.models import (
    DIMENSIONS,
    Category,
    CompatibilityScore,
    Components,
    Corpus,
    Dimension,
    FuzzyMatch,
    ScoredStandard,
    Standard,
)
from ngss_mcp.engine.search import SearchScorer
from ngss_mcp.engine.validation import (
    resolve_category,
    validate_code,
    validate_limit,
    validate_pagination,
    validate_query,
    validate_tag_name,
    validate_unit_size,
)

log = structlog.get_logger(__name__)


class StandardsEngine:
    """In-memory retrieval over an immutable corpus.

    Args:
        corpus: Loaded corpus. Indexed once here.
        cache_config: Cache sizing. ``enabled=False`` disables both caches.
        clock: Wall-clock source for cache TTLs.
    """

    def __init__(
        self,
        corpus: Corpus,
        cache_config: CacheConfig | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        cache_config = cache_config or CacheConfig()
        self._corpus = corpus
        self._indexes = build_indexes(corpus)
        self._metrics = QueryMetrics()

        self._fuzzy_cache: QueryCache[tuple[FuzzyMatch, ...]] | None = None
        self._search_cache: QueryCache[tuple[ScoredStandard, ...]] | None = None
        if cache_config.enabled:
            self._fuzzy_cache = QueryCache(
                cache_config.max_entries, cache_config.ttl_sec, clock=clock, name="fuzzy_match"
            )
            self._search_cache = QueryCache(
                cache_config.max_entries, cache_config.ttl_sec, clock=clock, name="search"
            )

        self._fuzzy = FuzzyMatcher(corpus, self._fuzzy_cache)
        self._search = SearchScorer(self._indexes, self._search_cache)
        self._compatibility = CompatibilityScorer(self._indexes)

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    @contextmanager
    def _timed(self, method: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self._metrics.record(method, (time.perf_counter() - start) * 1000)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_standard(self, code: str) -> Standard | None:
        """Look up a standard by code. A miss returns None.

        Raises:
            FormatError: code fails the code pattern.
        """
        with self._timed("get_standard"):
            return self._indexes.primary.get(validate_code(code))

    def require_standard(self, code: str) -> Standard:
        """Like get_standard, but a miss raises NotFoundError."""
        standard = self.get_standard(code)
        if standard is None:
            raise NotFoundError.standard(code.strip())
        return standard

    def get_components(self, code: str) -> Components | None:
        with self._timed("get_components"):
            standard = self._indexes.primary.get(validate_code(code))
            if standard is None:
                return None
            return Components(sep=standard.sep, dci=standard.dci, ccc=standard.ccc)

    # -------------------------------------------------------------------------
    # Category
    # -------------------------------------------------------------------------

    def search_by_category(
        self, category: Category | str, offset: int = 0, limit: int = 10
    ) -> list[Standard]:
        """One page of a category bucket, in corpus order."""
        with self._timed("search_by_category"):
            resolved = resolve_category(category)
            offset, limit = validate_pagination(offset, limit)
            return list(self._indexes.by_category[resolved][offset : offset + limit])

    def count_by_category(self, category: Category | str) -> int:
        return len(self._indexes.by_category[resolve_category(category)])

    # -------------------------------------------------------------------------
    # Text search
    # -------------------------------------------------------------------------

    def _search_args(
        self, query: str, category: Category | str | None
    ) -> tuple[str, Category | None] | None:
        resolved = resolve_category(category) if category is not None else None
        # Blank queries short-circuit to an empty result once the filter is valid
        if isinstance(query, str) and not query.strip():
            return None
        return validate_query(query), resolved

    def search(
        self,
        query: str,
        category: Category | str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> list[ScoredStandard]:
        """Keyword-overlap search. Blank or stop-word-only queries return []."""
        with self._timed("search"):
            args = self._search_args(query, category)
            offset, limit = validate_pagination(offset, limit)
            if args is None:
                return []
            return self._search.search(args[0], args[1], offset, limit)

    def search_total(self, query: str, category: Category | str | None = None) -> int:
        """Total hits for a query, ignoring pagination."""
        with self._timed("search_total"):
            args = self._search_args(query, category)
            if args is None:
                return 0
            return self._search.total(*args)

    # -------------------------------------------------------------------------
    # Driving questions
    # -------------------------------------------------------------------------

    def fuzzy_match(self, query: str, limit: int | None = None) -> list[FuzzyMatch]:
        """Find standards whose driving questions resemble the query."""
        with self._timed("fuzzy_match"):
            sanitized = validate_query(query)
            matches = self._fuzzy.match(sanitized)
            if limit is None:
                return list(matches)
            return list(matches[: validate_limit(limit)])

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def tag_names(self, dimension: Dimension) -> list[str]:
        """Distinct tag names used in one dimension, sorted."""
        return sorted(self._indexes.tags[dimension])

    def filter_by_tag(self, dimension: Dimension, name: str) -> list[Standard]:
        """Standards whose tag in ``dimension`` has exactly this name.

        Raises:
            UnknownTagError: No standard uses the name in this dimension.
        """
        with self._timed(f"filter_by_{dimension}"):
            by_name = self._indexes.tags[dimension]
            return list(by_name[validate_tag_name(dimension, name, by_name)])

    # -------------------------------------------------------------------------
    # Compatibility
    # -------------------------------------------------------------------------

    def get_compatibility(
        self, anchor_code: str, pool: Iterable[Standard] | None = None
    ) -> list[CompatibilityScore]:
        with self._timed("get_compatibility"):
            return self._compatibility.score(anchor_code, pool)

    def suggest_unit(self, anchor_code: str, unit_size: int = 3) -> list[CompatibilityScore]:
        """Top ``unit_size - 1`` companions for the anchor."""
        with self._timed("suggest_unit"):
            size = validate_unit_size(unit_size)
            return self._compatibility.score(anchor_code)[: size - 1]

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        idx = self._indexes
        return {
            "total_standards": len(idx.primary),
            "by_domain": {c.label: len(idx.by_category[c]) for c in Category},
            "distinct_tags": {d: len(idx.tags[d]) for d in DIMENSIONS},
            "driving_questions": sum(len(s.driving_questions) for s in self._corpus),
            "indexed_keywords": len(idx.inverted),
        }

    def get_metadata(self) -> dict[str, Any]:
        return {
            "generated_at": self._corpus.generated_at,
            "source": self._corpus.source,
            "total_standards": len(self._corpus),
        }

    def get_query_metrics(self) -> dict[str, Any]:
        return self._metrics.snapshot()

    def get_cache_stats(self) -> dict[str, Any]:
        """Detailed stats per cache, or ``{"enabled": False}``."""
        if self._fuzzy_cache is None or self._search_cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "fuzzy_match": self._fuzzy_cache.get_detailed_stats(),
            "search": self._search_cache.get_detailed_stats(),
        }

    def clear_cache(self) -> None:
        for cache in (self._fuzzy_cache, self._search_cache):
            if cache is not None:
                cache.clear()
        log.info("cache_cleared")
