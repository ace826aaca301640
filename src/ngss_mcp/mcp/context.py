"""Application context for MCP handlers.

Single object passed to all tool handlers with access to the engine and
the resolved configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ngss_mcp.config.models import NgssConfig
    from ngss_mcp.engine.ops import StandardsEngine


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers."""

    engine: StandardsEngine
    config: NgssConfig

    @classmethod
    def create(cls, config: NgssConfig | None = None) -> AppContext:
        """Load the corpus and build the engine.

        Raises:
            CorpusLoadError: The corpus could not be loaded. Fatal at startup.
        """
        from ngss_mcp.config.models import NgssConfig
        from ngss_mcp.engine.corpus import load_corpus
        from ngss_mcp.engine.ops import StandardsEngine

        config = config or NgssConfig()
        corpus = load_corpus(config.data.corpus_path)
        engine = StandardsEngine(corpus, config.cache)
        return cls(engine=engine, config=config)
