"""Data models for the standards engine.

Standards are immutable pydantic models: they are validated once when the
corpus loads and shared read-only by every index afterwards.

Result types (ScoredStandard, FuzzyMatch, CompatibilityScore) are plain
frozen dataclasses; they carry a reference to the Standard rather than a copy.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ngss_mcp.config.constants import STANDARD_CODE_PATTERN

_CODE_RE = re.compile(STANDARD_CODE_PATTERN)

Dimension = Literal["sep", "ccc", "dci"]
DIMENSIONS: tuple[Dimension, ...] = ("sep", "ccc", "dci")


class Category(StrEnum):
    """Closed set of science domains, keyed by canonical normalized form."""

    PHYSICAL_SCIENCE = "physical-science"
    LIFE_SCIENCE = "life-science"
    EARTH_SPACE_SCIENCE = "earth-space-science"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @property
    def domain_code(self) -> str:
        return _CATEGORY_CODES[self]


_CATEGORY_LABELS: dict[Category, str] = {
    Category.PHYSICAL_SCIENCE: "Physical Science",
    Category.LIFE_SCIENCE: "Life Science",
    Category.EARTH_SPACE_SCIENCE: "Earth and Space Science",
}

_CATEGORY_CODES: dict[Category, str] = {
    Category.PHYSICAL_SCIENCE: "PS",
    Category.LIFE_SCIENCE: "LS",
    Category.EARTH_SPACE_SCIENCE: "ESS",
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Tag(_Frozen):
    """One classification tag: {code, name, description}."""

    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str


class DepthBoundaries(_Frozen):
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


class LessonScope(_Frozen):
    """Structured scope metadata for lesson planning."""

    key_concepts: tuple[str, ...]
    prerequisite_knowledge: tuple[str, ...] = ()
    common_misconceptions: tuple[str, ...] = ()
    depth_boundaries: DepthBoundaries = Field(default_factory=DepthBoundaries)


class Standard(_Frozen):
    """An NGSS performance expectation.

    ``code`` is the primary key. Each classification dimension (sep, dci,
    ccc) holds exactly one tag.
    """

    code: str
    grade_level: str
    domain: str
    topic: str
    performance_expectation: str = Field(min_length=1)
    sep: Tag
    dci: Tag
    ccc: Tag
    driving_questions: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    lesson_scope: LessonScope

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        if not _CODE_RE.match(v):
            raise ValueError(f"code {v!r} does not match {STANDARD_CODE_PATTERN}")
        return v

    def tag(self, dimension: Dimension) -> Tag:
        """Return the tag for one classification dimension."""
        return getattr(self, dimension)  # type: ignore[no-any-return]


class Components(_Frozen):
    """The three framework components of one standard."""

    sep: Tag
    dci: Tag
    ccc: Tag


class CorpusFile(BaseModel):
    """On-disk corpus layout: ``{generated_at, source, standards: [...]}``."""

    model_config = ConfigDict(extra="ignore")

    generated_at: str = ""
    source: str = ""
    standards: list[Standard]


@dataclass(frozen=True, slots=True)
class Corpus:
    """Ordered, immutable list of standards plus provenance."""

    standards: tuple[Standard, ...]
    generated_at: str = ""
    source: str = ""

    def __len__(self) -> int:
        return len(self.standards)

    def __iter__(self) -> Iterator[Standard]:
        return iter(self.standards)


@dataclass(frozen=True, slots=True)
class ScoredStandard:
    """A search hit: overlap fraction in [0, 1]."""

    standard: Standard
    score: float


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    """A driving-question match with confidence in [0.7, 1]."""

    standard: Standard
    confidence: float
    matched_question: str
    distance: int


@dataclass(frozen=True, slots=True)
class CompatibilityBreakdown:
    """Points contributed by each dimension (0 when not shared)."""

    domain_match: int = 0
    shared_sep: int = 0
    shared_ccc: int = 0
    shared_dci: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "domain_match": self.domain_match,
            "shared_sep": self.shared_sep,
            "shared_ccc": self.shared_ccc,
            "shared_dci": self.shared_dci,
        }


@dataclass(frozen=True, slots=True)
class CompatibilityScore:
    """A candidate scored against an anchor standard."""

    standard: Standard
    score: int
    breakdown: CompatibilityBreakdown

    def match_reasons(self) -> list[str]:
        """Human-readable reasons, one per shared dimension."""
        reasons: list[str] = []
        s = self.standard
        b = self.breakdown
        if b.domain_match:
            reasons.append(f"Same domain: {s.domain} (+{b.domain_match})")
        if b.shared_sep:
            reasons.append(f'Shared SEP: "{s.sep.name}" (+{b.shared_sep})')
        if b.shared_ccc:
            reasons.append(f'Shared CCC: "{s.ccc.name}" (+{b.shared_ccc})')
        if b.shared_dci:
            reasons.append(f'Shared DCI: "{s.dci.name}" (+{b.shared_dci})')
        return reasons


def standard_to_dict(standard: Standard) -> dict[str, Any]:
    """Full JSON-compatible projection of a standard."""
    return standard.model_dump(mode="json")
