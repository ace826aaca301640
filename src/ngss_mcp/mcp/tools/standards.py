"""Standards MCP tools - lookup, search, tag filters, and unit planning.

Handlers receive validated params and call the engine. Engine errors are
raised as-is; the server wrapper turns them into structured responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from ngss_mcp.core.errors import NotFoundError
from ngss_mcp.engine.models import Dimension, Tag
from ngss_mcp.engine.validation import resolve_category
from ngss_mcp.mcp.pagination import build_pagination_metadata
from ngss_mcp.mcp.registry import registry
from ngss_mcp.mcp.tools.base import (
    DETAIL_LEVEL_DESCRIPTION,
    DetailLevel,
    DetailParams,
    format_standard,
    format_standards,
    with_token_metadata,
)

if TYPE_CHECKING:
    from ngss_mcp.mcp.context import AppContext

CODE_DESCRIPTION = "NGSS standard code (format: MS-{PS|LS|ESS}{number}-{number}), e.g. MS-PS1-1"
DOMAIN_DESCRIPTION = "Science domain: Physical Science, Life Science, or Earth and Space Science"


# =============================================================================
# Parameter Models
# =============================================================================


class GetStandardParams(DetailParams):
    code: str = Field(..., description=CODE_DESCRIPTION)


class SearchByDomainParams(DetailParams):
    domain: str = Field(..., description=DOMAIN_DESCRIPTION)
    offset: int = Field(0, description="Number of results to skip (for pagination)")
    limit: int | None = Field(None, description="Maximum number of results to return (1-50)")


class Get3DComponentsParams(DetailParams):
    code: str = Field(..., description=CODE_DESCRIPTION)


class SearchStandardsParams(DetailParams):
    query: str = Field(..., description="Search query text, e.g. 'energy transfer'")
    domain: str | None = Field(None, description=f"Optional filter. {DOMAIN_DESCRIPTION}")
    offset: int = Field(0, description="Number of results to skip (for pagination)")
    limit: int | None = Field(None, description="Maximum number of results to return (1-50)")


class FindByDrivingQuestionParams(DetailParams):
    question: str = Field(..., description="A student-facing question, e.g. 'What do we know about energy?'")
    limit: int | None = Field(None, description="Maximum number of matches to return (1-50)")


class SearchByPracticeParams(DetailParams):
    practice: str = Field(
        ..., description="Science and Engineering Practice name, e.g. 'Developing and Using Models'"
    )


class SearchByConceptParams(DetailParams):
    concept: str = Field(..., description="Crosscutting Concept name, e.g. 'Cause and Effect'")


class SearchByCoreIdeaParams(DetailParams):
    dci: str = Field(..., description="Disciplinary Core Idea name, e.g. 'Definitions of Energy'")


class GetUnitSuggestionsParams(DetailParams):
    anchor_code: str = Field(..., description="The anchor NGSS standard code, e.g. MS-PS3-1")
    unit_size: int | None = Field(
        None, description="Total number of standards in the unit (2-8), including the anchor"
    )
    detail_level: DetailLevel = Field("summary", description=DETAIL_LEVEL_DESCRIPTION)


# =============================================================================
# Helpers
# =============================================================================


def _domain_label(domain: str) -> str:
    return resolve_category(domain).label


def _tag_dict(tag: Tag, detail_level: DetailLevel) -> dict[str, str]:
    if detail_level == "minimal":
        return {"code": tag.code, "name": tag.name}
    return {"code": tag.code, "name": tag.name, "description": tag.description}


def _filter_by_tag(
    ctx: AppContext, dimension: Dimension, key: str, name: str, detail_level: DetailLevel
) -> dict[str, Any]:
    standards = ctx.engine.filter_by_tag(dimension, name)
    result = {
        key: name.strip(),
        "total": len(standards),
        "standards": format_standards(standards, detail_level),
    }
    return with_token_metadata(name, result)


# =============================================================================
# Tool Handlers
# =============================================================================


@registry.register(
    "get_standard",
    "Retrieve a specific NGSS standard by its code identifier (e.g., MS-PS1-1, MS-LS2-3, MS-ESS3-1)",
    GetStandardParams,
)
async def get_standard(ctx: AppContext, params: GetStandardParams) -> dict[str, Any]:
    standard = ctx.engine.require_standard(params.code)
    return with_token_metadata(params.code, format_standard(standard, params.detail_level))


@registry.register(
    "search_by_domain",
    "Find NGSS standards in a science domain (Physical Science, Life Science, or "
    "Earth and Space Science), paginated",
    SearchByDomainParams,
)
async def search_by_domain(ctx: AppContext, params: SearchByDomainParams) -> dict[str, Any]:
    engine = ctx.engine
    limit = params.limit if params.limit is not None else ctx.config.limits.default_limit
    standards = engine.search_by_category(params.domain, params.offset, limit)
    total = engine.count_by_category(params.domain)
    result = {
        "domain": _domain_label(params.domain),
        "count": len(standards),
        "total": total,
        "standards": format_standards(standards, params.detail_level),
        "pagination": build_pagination_metadata(total, params.offset, limit),
    }
    return with_token_metadata(params.domain, result)


@registry.register(
    "get_3d_components",
    "Extract the three-dimensional learning components (SEP: Science and Engineering "
    "Practices, DCI: Disciplinary Core Ideas, CCC: Crosscutting Concepts) for a standard",
    Get3DComponentsParams,
)
async def get_3d_components(ctx: AppContext, params: Get3DComponentsParams) -> dict[str, Any]:
    components = ctx.engine.get_components(params.code)
    if components is None:
        raise NotFoundError.standard(params.code.strip())
    result = {
        "code": params.code.strip(),
        "framework_components": {
            "sep": _tag_dict(components.sep, params.detail_level),
            "dci": _tag_dict(components.dci, params.detail_level),
            "ccc": _tag_dict(components.ccc, params.detail_level),
        },
    }
    return with_token_metadata(params.code, result)


@registry.register(
    "search_standards",
    "Full-text keyword search across performance expectations, topics, and keywords "
    '(e.g., "energy transfer", "ecosystems", "climate change"), ranked by term overlap',
    SearchStandardsParams,
)
async def search_standards(ctx: AppContext, params: SearchStandardsParams) -> dict[str, Any]:
    engine = ctx.engine
    limit = params.limit if params.limit is not None else ctx.config.limits.default_limit
    hits = engine.search(params.query, params.domain, params.offset, limit)
    total = engine.search_total(params.query, params.domain)
    results = [
        {**format_standard(hit.standard, params.detail_level), "relevance": round(hit.score, 2)}
        for hit in hits
    ]
    result = {
        "query": params.query,
        "domain": _domain_label(params.domain) if params.domain else "all",
        "total_matches": total,
        "results": results,
        "pagination": build_pagination_metadata(total, params.offset, limit),
    }
    return with_token_metadata(params.query, result)


@registry.register(
    "find_by_driving_question",
    "Find standards whose driving questions resemble a student question. Tolerates typos; "
    "matches below 70% confidence are dropped",
    FindByDrivingQuestionParams,
)
async def find_by_driving_question(
    ctx: AppContext, params: FindByDrivingQuestionParams
) -> dict[str, Any]:
    limit = params.limit if params.limit is not None else ctx.config.limits.fuzzy_default_limit
    matches = ctx.engine.fuzzy_match(params.question, limit)
    result = {
        "question": params.question,
        "total": len(matches),
        "matches": [
            {
                **format_standard(m.standard, params.detail_level),
                "confidence": round(m.confidence, 3),
                "matched_question": m.matched_question,
            }
            for m in matches
        ],
    }
    return with_token_metadata(params.question, result)


@registry.register(
    "search_by_practice",
    "Find all NGSS standards using a Science and Engineering Practice (SEP), e.g. "
    '"Developing and Using Models", "Analyzing and Interpreting Data"',
    SearchByPracticeParams,
)
async def search_by_practice(ctx: AppContext, params: SearchByPracticeParams) -> dict[str, Any]:
    return _filter_by_tag(ctx, "sep", "practice", params.practice, params.detail_level)


@registry.register(
    "search_by_crosscutting_concept",
    'Find all NGSS standards using a Crosscutting Concept (CCC), e.g. "Patterns", '
    '"Cause and Effect", "Energy and Matter"',
    SearchByConceptParams,
)
async def search_by_crosscutting_concept(
    ctx: AppContext, params: SearchByConceptParams
) -> dict[str, Any]:
    return _filter_by_tag(ctx, "ccc", "concept", params.concept, params.detail_level)


@registry.register(
    "search_by_disciplinary_core_idea",
    'Find all NGSS standards using a Disciplinary Core Idea (DCI), e.g. "Definitions of '
    'Energy", "Interdependent Relationships in Ecosystems"',
    SearchByCoreIdeaParams,
)
async def search_by_disciplinary_core_idea(
    ctx: AppContext, params: SearchByCoreIdeaParams
) -> dict[str, Any]:
    return _filter_by_tag(ctx, "dci", "dci", params.dci, params.detail_level)


@registry.register(
    "get_unit_suggestions",
    "Recommend compatible standards for a curriculum unit around an anchor standard, "
    "scored by shared domain (+3), SEP (+2), CCC (+2), and DCI (+1)",
    GetUnitSuggestionsParams,
)
async def get_unit_suggestions(
    ctx: AppContext, params: GetUnitSuggestionsParams
) -> dict[str, Any]:
    engine = ctx.engine
    unit_size = (
        params.unit_size if params.unit_size is not None else ctx.config.limits.default_unit_size
    )
    suggestions = engine.suggest_unit(params.anchor_code, unit_size)
    anchor = engine.require_standard(params.anchor_code)
    result = {
        "anchor": format_standard(anchor, params.detail_level),
        "suggestions": [
            {
                **format_standard(s.standard, params.detail_level),
                "compatibility_score": s.score,
                "match_reasons": s.match_reasons(),
            }
            for s in suggestions
        ],
        "total_candidates": len(engine.corpus) - 1,
    }
    return with_token_metadata(params.anchor_code, result)
