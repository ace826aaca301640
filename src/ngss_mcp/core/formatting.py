"""Text and payload-size formatting utilities for tool responses.

Design principles:
- Truncation happens only in the presentation layer, never in the engine
- Truncated text breaks at a word boundary and ends with "..."
- Token counts are estimates (chars / 4), good enough for budgeting
"""

from __future__ import annotations

import json
import math
from typing import Any

ELLIPSIS = "..."


def truncate_at_word_boundary(text: str, max_chars: int) -> str:
    """Truncate text to max_chars, cutting at the last space.

    Examples:
        ("Develop a model", 50) -> "Develop a model" (unchanged)
        ("Develop a model to describe", 12) -> "Develop a..."
        ("Unbreakable", 5) -> "Unbre..."
    """
    if len(text) <= max_chars:
        return text

    truncated = text[:max_chars]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        return truncated[:last_space] + ELLIPSIS

    # No space to break on
    return truncated + ELLIPSIS


def limit_keywords(keywords: list[str] | tuple[str, ...], limit: int) -> list[str]:
    return list(keywords[:limit])


def estimate_tokens(text: str) -> int:
    """Estimate token count using the chars/4 approximation."""
    return math.ceil(len(text) / 4)


def estimate_tokens_for_object(obj: Any) -> int:
    """Estimate tokens for a JSON-serializable object (compact encoding)."""
    return estimate_tokens(json.dumps(obj, separators=(",", ":"), default=str))


def token_metadata(request: str, response: Any) -> dict[str, int]:
    """Build the ``_metadata.tokens`` block attached to tool results."""
    input_tokens = estimate_tokens(request)
    output_tokens = estimate_tokens_for_object(response)
    return {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
    }


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Format "1 standard" / "3 standards"."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"
