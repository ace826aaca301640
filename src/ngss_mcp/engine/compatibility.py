"""Multi-dimension compatibility ranking against an anchor standard.

Each shared dimension adds a fixed weight: same domain +3, same practice
+2, same crosscutting concept +2, same core idea +1. Tags compare by name.
Cheap enough over this corpus size that results are not cached.
"""

from __future__ import annotations

from collections.abc import Iterable

from ngss_mcp.config.constants import (
    CATEGORY_MATCH_WEIGHT,
    CCC_MATCH_WEIGHT,
    DCI_MATCH_WEIGHT,
    SEP_MATCH_WEIGHT,
)
from ngss_mcp.core.errors import NotFoundError
from ngss_mcp.engine.indexer import CorpusIndexes
from ngss_mcp.engine.models import CompatibilityBreakdown, CompatibilityScore, Standard
from ngss_mcp.engine.validation import validate_code


class CompatibilityScorer:
    def __init__(self, indexes: CorpusIndexes) -> None:
        self._indexes = indexes

    def breakdown(self, anchor: Standard, candidate: Standard) -> CompatibilityBreakdown:
        idx = self._indexes
        return CompatibilityBreakdown(
            domain_match=CATEGORY_MATCH_WEIGHT
            if idx.category_of(anchor) is idx.category_of(candidate)
            else 0,
            shared_sep=SEP_MATCH_WEIGHT if anchor.sep.name == candidate.sep.name else 0,
            shared_ccc=CCC_MATCH_WEIGHT if anchor.ccc.name == candidate.ccc.name else 0,
            shared_dci=DCI_MATCH_WEIGHT if anchor.dci.name == candidate.dci.name else 0,
        )

    def score(
        self, anchor_code: str, pool: Iterable[Standard] | None = None
    ) -> list[CompatibilityScore]:
        """Score every pool member against the anchor.

        Args:
            anchor_code: Code of the anchor standard.
            pool: Candidates to score. Defaults to the whole corpus. The
                anchor is excluded whether or not the pool contains it.

        Returns:
            Scores sorted descending, ties broken by ascending code.

        Raises:
            FormatError: anchor_code fails the code pattern.
            NotFoundError: No standard has anchor_code.
        """
        code = validate_code(anchor_code)
        anchor = self._indexes.primary.get(code)
        if anchor is None:
            raise NotFoundError.standard(code)

        candidates = self._indexes.primary.values() if pool is None else pool
        scores = []
        for candidate in candidates:
            if candidate.code == anchor.code:
                continue
            b = self.breakdown(anchor, candidate)
            total = b.domain_match + b.shared_sep + b.shared_ccc + b.shared_dci
            scores.append(CompatibilityScore(candidate, total, b))

        scores.sort(key=lambda s: (-s.score, s.standard.code))
        return scores
