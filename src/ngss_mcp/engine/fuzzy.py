"""Edit-distance matching of free text against driving questions.

Confidence is ``1 - distance / max(len(query), len(question))`` over the
normalized strings, using plain Levenshtein distance from rapidfuzz.
Character-level distance penalizes reordered words and big length gaps, so
short paraphrases of long questions fall below the threshold.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from rapidfuzz.distance import Levenshtein

from ngss_mcp.config.constants import FUZZY_CONFIDENCE_THRESHOLD
from ngss_mcp.engine.cache import QueryCache, make_cache_key
from ngss_mcp.engine.models import Corpus, FuzzyMatch, Standard
from ngss_mcp.engine.text import normalize_text

log = structlog.get_logger(__name__)


def confidence_for(query: str, candidate: str) -> tuple[float, int]:
    """Return (confidence, distance) for two already-normalized strings."""
    longest = max(len(query), len(candidate))
    if longest == 0:
        return 0.0, 0
    distance = Levenshtein.distance(query, candidate)
    return 1.0 - distance / longest, distance


@dataclass(frozen=True, slots=True)
class _Question:
    standard: Standard
    position: int
    original: str
    normalized: str


class FuzzyMatcher:
    """Matches queries against every driving question in the corpus.

    Questions are normalized once at construction. Results for a normalized
    query are cached in full; callers slice them.
    """

    def __init__(
        self,
        corpus: Corpus,
        cache: QueryCache[tuple[FuzzyMatch, ...]] | None = None,
        threshold: float = FUZZY_CONFIDENCE_THRESHOLD,
    ) -> None:
        self._cache = cache
        self._threshold = threshold
        self._questions = tuple(
            _Question(standard, position, question, normalize_text(question))
            for position, standard in enumerate(corpus)
            for question in standard.driving_questions
        )

    @property
    def threshold(self) -> float:
        return self._threshold

    def match(self, query: str) -> tuple[FuzzyMatch, ...]:
        """Return matches at or above the threshold, best first.

        Each standard appears at most once, with its closest question.
        Ordering: confidence desc, distance asc, then corpus order.
        """
        normalized = normalize_text(query)
        key = make_cache_key("fuzzy_match", query=normalized)

        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        results = self._compute(normalized)
        if self._cache is not None:
            self._cache.set(key, results)
        return results

    def _compute(self, normalized: str) -> tuple[FuzzyMatch, ...]:
        best: dict[str, tuple[FuzzyMatch, int]] = {}
        for q in self._questions:
            confidence, distance = confidence_for(normalized, q.normalized)
            if confidence < self._threshold:
                continue
            current = best.get(q.standard.code)
            if current is not None and (current[0].confidence, -current[0].distance) >= (
                confidence,
                -distance,
            ):
                continue
            match = FuzzyMatch(
                standard=q.standard,
                confidence=confidence,
                matched_question=q.original,
                distance=distance,
            )
            best[q.standard.code] = (match, q.position)

        ranked = sorted(best.values(), key=lambda mp: (-mp[0].confidence, mp[0].distance, mp[1]))
        log.debug("fuzzy_computed", query=normalized, matches=len(ranked))
        return tuple(m for m, _ in ranked)
