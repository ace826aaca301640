"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are input contracts, scoring weights, and protocol limits.

For configurable values, see models.py (CacheConfig, LimitsConfig, etc.).
"""

# =============================================================================
# Input Contracts
# =============================================================================

STANDARD_CODE_PATTERN = r"^MS-(PS|LS|ESS)\d+-\d+$"
"""Primary key format: grade prefix, domain code, two numeric segments."""

QUERY_MIN_LENGTH = 1
QUERY_MAX_LENGTH = 500
"""Trimmed free-text query length bounds."""

LIMIT_MIN = 1
LIMIT_MAX = 50
"""Page size bounds for paginated operations."""

OFFSET_MIN = 0

UNIT_SIZE_MIN = 2
UNIT_SIZE_MAX = 8
"""Unit size bounds for unit suggestions (anchor included)."""

# =============================================================================
# Matching and Scoring
# =============================================================================

FUZZY_CONFIDENCE_THRESHOLD = 0.7
"""Fuzzy matches below this confidence are discarded."""

MIN_TOKEN_LENGTH = 3
"""Tokens shorter than this are dropped by the tokenizer."""

CATEGORY_MATCH_WEIGHT = 3
SEP_MATCH_WEIGHT = 2
CCC_MATCH_WEIGHT = 2
DCI_MATCH_WEIGHT = 1
MAX_COMPATIBILITY_SCORE = (
    CATEGORY_MATCH_WEIGHT + SEP_MATCH_WEIGHT + CCC_MATCH_WEIGHT + DCI_MATCH_WEIGHT
)

# =============================================================================
# Presentation
# =============================================================================

MINIMAL_PE_CHARS = 50
"""Performance expectation length for detail_level=minimal."""

SUMMARY_PE_CHARS = 138
"""Performance expectation length for detail_level=summary."""

SUMMARY_KEYWORDS = 3
"""Keywords kept for detail_level=summary."""

# =============================================================================
# Protocol/Validation Constants
# =============================================================================

PORT_MIN = 0
PORT_MAX = 65535
"""Valid port range."""
