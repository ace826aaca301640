"""In-memory retrieval engine over the NGSS standards corpus."""

from ngss_mcp.engine.cache import CacheMetrics, QueryCache, make_cache_key
from ngss_mcp.engine.corpus import default_corpus_path, load_corpus, parse_corpus
from ngss_mcp.engine.models import (
    Category,
    CompatibilityBreakdown,
    CompatibilityScore,
    Components,
    Corpus,
    FuzzyMatch,
    ScoredStandard,
    Standard,
    Tag,
)
from ngss_mcp.engine.ops import StandardsEngine

__all__ = [
    "CacheMetrics",
    "Category",
    "CompatibilityBreakdown",
    "CompatibilityScore",
    "Components",
    "Corpus",
    "FuzzyMatch",
    "QueryCache",
    "ScoredStandard",
    "Standard",
    "StandardsEngine",
    "Tag",
    "default_corpus_path",
    "load_corpus",
    "make_cache_key",
    "parse_corpus",
]
