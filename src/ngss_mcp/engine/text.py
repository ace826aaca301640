"""Shared text normalization for indexing, search, and fuzzy matching.

The tokenizer used to build the inverted index is the same one used to
tokenize search queries; keeping both on one function is what makes index
lookups line up with query tokens.
"""

from __future__ import annotations

import re

from ngss_mcp.config.constants import MIN_TOKEN_LENGTH

STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "is", "are", "was", "were", "be", "been",
        "being", "have", "has", "had", "do", "does", "did", "what", "how",
        "why", "when", "where", "who",
    }
)  # fmt: skip

_NON_WORD_RE = re.compile(r"\W+")
_PUNCT_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def tokenize(text: str) -> list[str]:
    """Split text into index tokens.

    Lower-cases, splits on non-word runs, and drops stop words and tokens
    shorter than three characters. Duplicates are kept in order.
    """
    return [
        token
        for token in _NON_WORD_RE.split(text.lower())
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS
    ]


def normalize_text(text: str) -> str:
    """Normalize free text for edit-distance comparison.

    "  What do we KNOW about   energy? " -> "what do we know about energy"
    """
    lowered = _PUNCT_RE.sub("", text.lower())
    return _WHITESPACE_RE.sub(" ", lowered).strip()


def fold_key(value: str) -> str:
    """Fold case and punctuation variants into a hyphenated key.

    "Earth and Space Science" -> "earth-and-space-science"
    "physical_science" -> "physical-science"
    """
    return "-".join(t for t in re.split(r"[\W_]+", value.lower()) if t)
