"""One-time transform of a corpus into read-only lookup structures.

Indexes built here are never mutated after build_indexes returns. Mappings
are wrapped in MappingProxyType and hold tuples and frozensets, so sharing
them across concurrent callers needs no locking.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from ngss_mcp.core.errors import CorpusLoadError
from ngss_mcp.engine.models import DIMENSIONS, Category, Corpus, Dimension, Standard
from ngss_mcp.engine.text import fold_key, tokenize

log = structlog.get_logger(__name__)

_CATEGORY_ALIASES: dict[str, Category] = {}
for _category in Category:
    _CATEGORY_ALIASES[_category.value] = _category
    _CATEGORY_ALIASES[fold_key(_category.label)] = _category
    _CATEGORY_ALIASES[_category.domain_code.lower()] = _category
_CATEGORY_ALIASES["earth-science"] = Category.EARTH_SPACE_SCIENCE
_CATEGORY_ALIASES["earth-and-space"] = Category.EARTH_SPACE_SCIENCE


def normalize_category(value: str) -> Category | None:
    """Fold a category label or alias to its canonical Category.

    Returns None for anything outside the closed set.
    """
    return _CATEGORY_ALIASES.get(fold_key(value))


@dataclass(frozen=True, slots=True)
class CorpusIndexes:
    """Read-only indexes over one corpus.

    Attributes:
        primary: code -> Standard, bijective with the corpus.
        by_category: Category -> standards in corpus order. Every category
            has a bucket, possibly empty; buckets partition the corpus.
        inverted: token -> codes whose topic, performance expectation, or
            keywords contain it.
        tags: dimension -> tag name -> standards in corpus order.
        order: code -> position in the corpus, used as a stable tie-breaker.
    """

    primary: Mapping[str, Standard]
    by_category: Mapping[Category, tuple[Standard, ...]]
    inverted: Mapping[str, frozenset[str]]
    tags: Mapping[Dimension, Mapping[str, tuple[Standard, ...]]]
    order: Mapping[str, int]

    def category_of(self, standard: Standard) -> Category:
        # Every indexed standard resolved at build time
        return normalize_category(standard.domain)  # type: ignore[return-value]


def _index_text(standard: Standard) -> str:
    return " ".join((standard.topic, standard.performance_expectation, *standard.keywords))


def build_indexes(corpus: Corpus) -> CorpusIndexes:
    """Build primary, category, inverted-text, and tag indexes.

    Raises:
        CorpusLoadError: A code appears twice, or a domain does not resolve
            to a known category.
    """
    primary: dict[str, Standard] = {}
    order: dict[str, int] = {}
    by_category: dict[Category, list[Standard]] = {c: [] for c in Category}
    inverted: dict[str, set[str]] = defaultdict(set)
    tags: dict[Dimension, dict[str, list[Standard]]] = {d: defaultdict(list) for d in DIMENSIONS}

    for position, standard in enumerate(corpus):
        if standard.code in primary:
            raise CorpusLoadError.duplicate_code(standard.code)
        category = normalize_category(standard.domain)
        if category is None:
            raise CorpusLoadError.unknown_category(standard.code, standard.domain)

        primary[standard.code] = standard
        order[standard.code] = position
        by_category[category].append(standard)

        for token in tokenize(_index_text(standard)):
            inverted[token].add(standard.code)

        for dimension in DIMENSIONS:
            tags[dimension][standard.tag(dimension).name].append(standard)

    indexes = CorpusIndexes(
        primary=MappingProxyType(primary),
        by_category=MappingProxyType({c: tuple(v) for c, v in by_category.items()}),
        inverted=MappingProxyType({k: frozenset(v) for k, v in inverted.items()}),
        tags=MappingProxyType(
            {
                d: MappingProxyType({name: tuple(v) for name, v in by_name.items()})
                for d, by_name in tags.items()
            }
        ),
        order=MappingProxyType(order),
    )
    log.info(
        "indexes_built",
        standards=len(primary),
        keywords=len(indexes.inverted),
        categories={c.value: len(v) for c, v in indexes.by_category.items()},
    )
    return indexes
