"""Input contracts enforced before any index or scoring logic runs.

Every function here is pure: it either returns the (possibly normalized)
value or raises a typed InputError subclass. Nothing touches the corpus
except validate_tag_name, which is handed the known names explicitly.
"""

from __future__ import annotations

import re
from collections.abc import Collection
from typing import Any

from ngss_mcp.config.constants import (
    LIMIT_MAX,
    LIMIT_MIN,
    OFFSET_MIN,
    QUERY_MAX_LENGTH,
    QUERY_MIN_LENGTH,
    STANDARD_CODE_PATTERN,
    UNIT_SIZE_MAX,
    UNIT_SIZE_MIN,
)
from ngss_mcp.core.errors import (
    FormatError,
    InvalidQueryError,
    RangeError,
    UnknownCategoryError,
    UnknownTagError,
)
from ngss_mcp.engine.indexer import normalize_category
from ngss_mcp.engine.models import Category, Dimension

_CODE_RE = re.compile(STANDARD_CODE_PATTERN)

# Checked against the raw query, case-insensitively
BLOCKED_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"<\s*/?\s*[a-z!]", re.IGNORECASE),  # markup tags
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"\bon\w+\s*=", re.IGNORECASE),  # event handler attributes
    re.compile(r"\$\{"),
    re.compile(r"\{\{"),
    re.compile(r"__proto__", re.IGNORECASE),
    re.compile(r"\bconstructor\b", re.IGNORECASE),
)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"\s+")


def validate_code(code: Any) -> str:
    """Return the trimmed code, or raise FormatError."""
    if not isinstance(code, str):
        raise FormatError.bad_code(str(code), STANDARD_CODE_PATTERN)
    trimmed = code.strip()
    if not _CODE_RE.match(trimmed):
        raise FormatError.bad_code(trimmed, STANDARD_CODE_PATTERN)
    return trimmed


def resolve_category(value: Any) -> Category:
    """Resolve a label, canonical key, or alias to a Category.

    Accepts "Physical Science", "physical-science", "PHYSICAL_SCIENCE", "PS".
    """
    category = normalize_category(value) if isinstance(value, str) else None
    if category is None:
        raise UnknownCategoryError.unknown(str(value), [c.label for c in Category])
    return category


def validate_query(query: Any) -> str:
    """Validate a free-text query and return a sanitized copy.

    Raises:
        InvalidQueryError: Query is not a string, is empty after trimming,
            is longer than the maximum, or matches a blocked pattern.
    """
    if not isinstance(query, str):
        raise InvalidQueryError.not_text(query)

    trimmed = query.strip()
    if len(trimmed) < QUERY_MIN_LENGTH:
        raise InvalidQueryError.empty()
    if len(trimmed) > QUERY_MAX_LENGTH:
        raise InvalidQueryError.too_long(len(trimmed), QUERY_MAX_LENGTH)

    if any(pattern.search(trimmed) for pattern in BLOCKED_PATTERNS):
        raise InvalidQueryError.blocked()

    sanitized = _CONTROL_RE.sub("", trimmed)
    return _WHITESPACE_RE.sub(" ", sanitized).strip()


def _require_int(name: str, value: Any, minimum: int, maximum: int | None) -> int:
    # bool is an int subclass; True must not pass as 1
    if not isinstance(value, int) or isinstance(value, bool):
        raise RangeError.out_of_bounds(name, value, minimum, maximum)
    if value < minimum or (maximum is not None and value > maximum):
        raise RangeError.out_of_bounds(name, value, minimum, maximum)
    return value


def validate_limit(limit: Any) -> int:
    return _require_int("limit", limit, LIMIT_MIN, LIMIT_MAX)


def validate_offset(offset: Any) -> int:
    return _require_int("offset", offset, OFFSET_MIN, None)


def validate_pagination(offset: Any, limit: Any) -> tuple[int, int]:
    """Validate both pagination parameters, offset first."""
    return validate_offset(offset), validate_limit(limit)


def validate_unit_size(unit_size: Any) -> int:
    return _require_int("unit_size", unit_size, UNIT_SIZE_MIN, UNIT_SIZE_MAX)


def validate_tag_name(dimension: Dimension, name: Any, known: Collection[str]) -> str:
    """Return the trimmed tag name if it is one of ``known``."""
    trimmed = name.strip() if isinstance(name, str) else ""
    if trimmed not in known:
        raise UnknownTagError.unknown(dimension, str(name), known)
    return trimmed
