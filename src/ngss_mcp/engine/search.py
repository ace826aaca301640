"""Keyword-overlap search over the inverted text index.

score(code) = query tokens found for that code / total query tokens.
Duplicate query tokens count every time they appear. The full sorted and
filtered result is cached per (tokens, category); pagination slices the
cached list, so every page comes from one sorted pass.
"""

from __future__ import annotations

from collections import Counter

import structlog

from ngss_mcp.engine.cache import QueryCache, make_cache_key
from ngss_mcp.engine.indexer import CorpusIndexes
from ngss_mcp.engine.models import Category, ScoredStandard
from ngss_mcp.engine.text import tokenize

log = structlog.get_logger(__name__)


class SearchScorer:
    def __init__(
        self,
        indexes: CorpusIndexes,
        cache: QueryCache[tuple[ScoredStandard, ...]] | None = None,
    ) -> None:
        self._indexes = indexes
        self._cache = cache

    def search(
        self,
        query: str,
        category: Category | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> list[ScoredStandard]:
        """Return one page of ranked results.

        A query with no indexable tokens returns an empty list.
        """
        return list(self.ranked(query, category)[offset : offset + limit])

    def total(self, query: str, category: Category | None = None) -> int:
        return len(self.ranked(query, category))

    def ranked(self, query: str, category: Category | None = None) -> tuple[ScoredStandard, ...]:
        """Full ranked result: score desc, ties in corpus order."""
        tokens = tokenize(query)
        if not tokens:
            return ()

        key = make_cache_key(
            "search",
            tokens=tokens,
            category=category.value if category is not None else None,
        )
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        results = self._compute(tokens, category)
        if self._cache is not None:
            self._cache.set(key, results)
        return results

    def _compute(self, tokens: list[str], category: Category | None) -> tuple[ScoredStandard, ...]:
        hits: Counter[str] = Counter()
        for token in tokens:
            for code in self._indexes.inverted.get(token, ()):
                hits[code] += 1

        primary = self._indexes.primary
        order = self._indexes.order
        # Corpus order first; the stable sort below keeps it for equal scores
        candidates = sorted(hits, key=order.__getitem__)
        if category is not None:
            candidates = [c for c in candidates if self._indexes.category_of(primary[c]) is category]

        scored = [ScoredStandard(primary[c], hits[c] / len(tokens)) for c in candidates]
        scored.sort(key=lambda s: -s.score)
        log.debug("search_computed", tokens=tokens, category=category, results=len(scored))
        return tuple(scored)
