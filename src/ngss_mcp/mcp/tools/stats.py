"""Server stats MCP tool - corpus, query timing, and cache introspection."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import TYPE_CHECKING, Any

from pydantic import Field

from ngss_mcp.engine.models import DIMENSIONS
from ngss_mcp.mcp.registry import registry
from ngss_mcp.mcp.tools.base import BaseParams

if TYPE_CHECKING:
    from ngss_mcp.mcp.context import AppContext


def _get_version() -> str:
    try:
        return pkg_version("ngss-mcp")
    except PackageNotFoundError:
        return "unknown"


class GetServerStatsParams(BaseParams):
    """Parameters for get_server_stats."""

    include_cache_entries: bool = Field(
        False, description="Include the most-hit cache entries in the cache section"
    )


@registry.register(
    "get_server_stats",
    "Report corpus size, per-domain counts, SEP/CCC/DCI tag names, query timing, and cache hit rates",
    GetServerStatsParams,
)
async def get_server_stats(ctx: AppContext, params: GetServerStatsParams) -> dict[str, Any]:
    engine = ctx.engine
    cache = engine.get_cache_stats()
    if not params.include_cache_entries:
        cache = {
            name: {k: v for k, v in section.items() if k != "top_entries"}
            if isinstance(section, dict)
            else section
            for name, section in cache.items()
        }
    return {
        "version": _get_version(),
        "tools": registry.names(),
        "corpus": {**engine.get_metadata(), **engine.get_stats()},
        "tag_names": {d: engine.tag_names(d) for d in DIMENSIONS},
        "queries": engine.get_query_metrics(),
        "cache": cache,
    }
