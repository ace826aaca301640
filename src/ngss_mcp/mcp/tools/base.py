"""Base classes and shared presentation helpers for tool handlers."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ngss_mcp.config.constants import MINIMAL_PE_CHARS, SUMMARY_KEYWORDS, SUMMARY_PE_CHARS
from ngss_mcp.core.formatting import limit_keywords, token_metadata, truncate_at_word_boundary
from ngss_mcp.engine.models import Standard, standard_to_dict

DetailLevel = Literal["minimal", "summary", "full"]

DETAIL_LEVEL_DESCRIPTION = (
    "Response detail level: minimal (code, topic, PE 50 chars), "
    "summary (+ top 3 keywords, PE 138 chars), full (complete standard)"
)


class BaseParams(BaseModel):
    """Base class for all tool parameters.

    Uses extra="forbid" to reject unknown fields with clear errors.
    """

    model_config = ConfigDict(extra="forbid")


class DetailParams(BaseParams):
    detail_level: DetailLevel = Field("full", description=DETAIL_LEVEL_DESCRIPTION)


def format_standard(standard: Standard, detail_level: DetailLevel = "full") -> dict[str, Any]:
    """Project a standard to the requested detail level.

    minimal and summary truncate the performance expectation at a word
    boundary; full returns every field untouched.
    """
    if detail_level == "minimal":
        return {
            "code": standard.code,
            "topic": standard.topic,
            "performance_expectation": truncate_at_word_boundary(
                standard.performance_expectation, MINIMAL_PE_CHARS
            ),
        }
    if detail_level == "summary":
        return {
            "code": standard.code,
            "topic": standard.topic,
            "performance_expectation": truncate_at_word_boundary(
                standard.performance_expectation, SUMMARY_PE_CHARS
            ),
            "keywords": limit_keywords(standard.keywords, SUMMARY_KEYWORDS),
        }
    return standard_to_dict(standard)


def format_standards(
    standards: list[Standard], detail_level: DetailLevel = "full"
) -> list[dict[str, Any]]:
    return [format_standard(s, detail_level) for s in standards]


def with_token_metadata(request: str, result: dict[str, Any]) -> dict[str, Any]:
    """Attach ``_metadata.tokens`` estimated over the result body."""
    return {**result, "_metadata": {"tokens": token_metadata(request, result)}}
