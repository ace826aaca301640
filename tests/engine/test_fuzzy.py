"""Tests for driving-question fuzzy matching."""

from collections.abc import Callable
from typing import Any

import pytest

from ngss_mcp.engine.cache import QueryCache, make_cache_key
from ngss_mcp.engine.corpus import parse_corpus
from ngss_mcp.engine.fuzzy import FuzzyMatcher, confidence_for
from ngss_mcp.engine.models import Corpus


class TestConfidenceFor:
    """Confidence formula."""

    def test_identical_strings(self) -> None:
        assert confidence_for("energy", "energy") == (1.0, 0)

    def test_one_edit(self) -> None:
        confidence, distance = confidence_for("enrgy", "energy")
        assert distance == 1
        assert confidence == pytest.approx(1 - 1 / 6)

    def test_both_empty_is_zero(self) -> None:
        assert confidence_for("", "") == (0.0, 0)

    def test_one_empty_is_zero(self) -> None:
        assert confidence_for("", "energy") == (0.0, 6)


class TestFuzzyMatcher:
    """Ranking, thresholding, and dedupe."""

    def test_exact_question_returns_standard_first_with_full_confidence(
        self, corpus: Corpus
    ) -> None:
        matches = FuzzyMatcher(corpus).match("what do we know about energy?")

        assert [m.standard.code for m in matches] == ["MS-PS3-1"]
        assert matches[0].confidence == 1.0
        assert matches[0].distance == 0
        assert matches[0].matched_question == "What do we know about energy?"

    def test_typos_still_match(self, corpus: Corpus) -> None:
        matches = FuzzyMatcher(corpus).match("What do we knw about enrgy?")

        assert matches[0].standard.code == "MS-PS3-1"
        assert matches[0].confidence >= 0.80

    @pytest.mark.parametrize(
        "query",
        [
            "WHAT DO WE KNOW ABOUT ENERGY",
            "  what   do we know\tabout energy?! ",
            "What do we know about energy?",
        ],
    )
    def test_confidence_invariant_to_case_and_whitespace(self, corpus: Corpus, query: str) -> None:
        matches = FuzzyMatcher(corpus).match(query)
        assert matches[0].confidence == 1.0

    def test_unrelated_query_returns_nothing(self, corpus: Corpus) -> None:
        assert FuzzyMatcher(corpus).match("volcanic eruptions in iceland") == ()

    def test_never_below_threshold(self, corpus: Corpus) -> None:
        matcher = FuzzyMatcher(corpus)
        for query in ("How do plants make food?", "Why does the moon change?", "energy"):
            assert all(m.confidence >= 0.7 for m in matcher.match(query))

    def test_custom_threshold(self, corpus: Corpus) -> None:
        strict = FuzzyMatcher(corpus, threshold=0.99)
        assert strict.match("What do we knw about enrgy?") == ()
        assert strict.threshold == 0.99

    def test_standard_appears_once_with_best_question(
        self, make_standard: Callable[..., dict[str, Any]]
    ) -> None:
        corpus = parse_corpus(
            {
                "standards": [
                    make_standard(
                        "MS-PS3-1",
                        questions=["How does energy move?", "How does energy move around?"],
                    )
                ]
            }
        )
        matches = FuzzyMatcher(corpus).match("how does energy move around")

        assert len(matches) == 1
        assert matches[0].matched_question == "How does energy move around?"
        assert matches[0].confidence == 1.0

    def test_sorted_by_confidence_then_distance_then_corpus_order(
        self, make_standard: Callable[..., dict[str, Any]]
    ) -> None:
        corpus = parse_corpus(
            {
                "standards": [
                    make_standard("MS-PS1-1", questions=["what is heat made of"]),
                    make_standard("MS-PS1-2", questions=["what is heat"]),
                    make_standard("MS-PS1-3", questions=["what is heat"]),
                    make_standard("MS-PS1-4", questions=["what is a heap"]),
                ]
            }
        )
        matches = FuzzyMatcher(corpus).match("what is heat")

        codes = [m.standard.code for m in matches]
        assert codes[:3] == ["MS-PS1-2", "MS-PS1-3", "MS-PS1-4"]
        confidences = [m.confidence for m in matches]
        assert confidences == sorted(confidences, reverse=True)


class TestFuzzyMatcherCache:
    """Result caching per normalized query."""

    def test_results_cached_under_normalized_query(self, corpus: Corpus, fake_clock: Any) -> None:
        cache: QueryCache[Any] = QueryCache(clock=fake_clock)
        matcher = FuzzyMatcher(corpus, cache)

        first = matcher.match("What do we know about energy?")
        second = matcher.match("  WHAT do we know about energy ")

        assert make_cache_key("fuzzy_match", query="what do we know about energy") in cache
        assert second is first
        metrics = cache.get_metrics()
        assert (metrics.hits, metrics.misses) == (1, 1)

    def test_empty_results_are_cached(self, corpus: Corpus, fake_clock: Any) -> None:
        cache: QueryCache[Any] = QueryCache(clock=fake_clock)
        matcher = FuzzyMatcher(corpus, cache)

        matcher.match("volcanoes")
        matcher.match("volcanoes")

        assert cache.get_metrics().hits == 1
