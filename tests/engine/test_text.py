"""Tests for shared text normalization."""

import pytest

from ngss_mcp.engine.text import STOP_WORDS, fold_key, normalize_text, tokenize


class TestTokenize:
    """Index and query tokenization."""

    def test_lowercases_and_splits_on_non_word(self) -> None:
        assert tokenize("Kinetic-Energy, MASS; speed!") == ["kinetic", "energy", "mass", "speed"]

    def test_drops_short_tokens(self) -> None:
        assert tokenize("an ox is big") == ["big"]

    def test_drops_stop_words(self) -> None:
        assert tokenize("what are the forces") == ["forces"]

    def test_keeps_duplicates_in_order(self) -> None:
        assert tokenize("energy mass energy") == ["energy", "mass", "energy"]

    def test_stop_word_only_text_yields_nothing(self) -> None:
        assert tokenize("the and of what how") == []

    def test_stop_words_are_lowercase(self) -> None:
        assert all(w == w.lower() for w in STOP_WORDS)


class TestNormalizeText:
    """Fuzzy-match normalization."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("What do we know about energy?", "what do we know about energy"),
            ("  WHAT   do we\tknow about energy ", "what do we know about energy"),
            ("object's kinetic energy", "objects kinetic energy"),
            ("", ""),
            ("?!...", ""),
        ],
    )
    def test_normalization(self, raw: str, expected: str) -> None:
        assert normalize_text(raw) == expected


class TestFoldKey:
    """Category key folding."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Earth and Space Science", "earth-and-space-science"),
            ("physical_science", "physical-science"),
            ("  LIFE   science ", "life-science"),
            ("PS", "ps"),
        ],
    )
    def test_folding(self, raw: str, expected: str) -> None:
        assert fold_key(raw) == expected
