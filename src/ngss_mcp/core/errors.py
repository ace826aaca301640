"""NGSS engine error types with typed error codes.

Error code ranges:
- 1xxx: Validation (caller input)
- 2xxx: Config
- 3xxx: Corpus
- 4xxx: Lookup
- 9xxx: Internal
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Validation (1xxx)
    INVALID_CODE_FORMAT = 1001
    UNKNOWN_CATEGORY = 1002
    INVALID_QUERY = 1003
    OUT_OF_RANGE = 1004
    UNKNOWN_TAG = 1005

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Corpus (3xxx)
    CORPUS_NOT_FOUND = 3001
    CORPUS_PARSE_ERROR = 3002
    CORPUS_SCHEMA_ERROR = 3003
    CORPUS_DUPLICATE_CODE = 3004
    CORPUS_UNKNOWN_CATEGORY = 3005

    # Lookup (4xxx)
    STANDARD_NOT_FOUND = 4001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class NgssError(Exception):
    """Base error with structured context for MCP responses."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'INVALID_QUERY')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/MCP responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class InputError(NgssError):
    """Caller input rejected before any lookup ran."""


class FormatError(InputError):
    """Standard code fails the lexical pattern."""

    @classmethod
    def bad_code(cls, code: str, pattern: str) -> "FormatError":
        return cls(
            code=ErrorCode.INVALID_CODE_FORMAT,
            message=f"Invalid standard code format: {code!r}. Expected: MS-{{PS|LS|ESS}}{{number}}-{{number}}",
            details={"value": code, "pattern": pattern},
        )


class UnknownCategoryError(InputError):
    """Category does not resolve to the closed enumeration."""

    @classmethod
    def unknown(cls, value: str, allowed: list[str]) -> "UnknownCategoryError":
        return cls(
            code=ErrorCode.UNKNOWN_CATEGORY,
            message=f"Invalid domain {value!r}. Must be one of: {', '.join(allowed)}",
            details={"value": value, "allowed": allowed},
        )


class InvalidQueryError(InputError):
    """Free-text query is empty, too long, or matches a blocked pattern."""

    @classmethod
    def empty(cls) -> "InvalidQueryError":
        return cls(
            code=ErrorCode.INVALID_QUERY,
            message="Query must be at least 1 character",
            details={"reason": "empty"},
        )

    @classmethod
    def too_long(cls, length: int, max_length: int) -> "InvalidQueryError":
        return cls(
            code=ErrorCode.INVALID_QUERY,
            message=f"Query exceeds maximum length of {max_length} characters",
            details={"reason": "too_long", "length": length, "max_length": max_length},
        )

    @classmethod
    def blocked(cls) -> "InvalidQueryError":
        return cls(
            code=ErrorCode.INVALID_QUERY,
            message="Query contains invalid characters or patterns",
            details={"reason": "blocked_pattern"},
        )

    @classmethod
    def not_text(cls, value: Any) -> "InvalidQueryError":
        return cls(
            code=ErrorCode.INVALID_QUERY,
            message="Query must be a string",
            details={"reason": "type", "type": type(value).__name__},
        )


class RangeError(InputError):
    """Numeric parameter outside its allowed bounds."""

    @classmethod
    def out_of_bounds(
        cls, name: str, value: Any, minimum: int, maximum: int | None = None
    ) -> "RangeError":
        if maximum is None:
            bounds = f">= {minimum}"
        else:
            bounds = f"between {minimum} and {maximum}"
        return cls(
            code=ErrorCode.OUT_OF_RANGE,
            message=f"{name} must be an integer {bounds}, got {value!r}",
            details={"field": name, "value": value, "min": minimum, "max": maximum},
        )


class UnknownTagError(InputError):
    """Tag name is not used by any standard for the given dimension."""

    @classmethod
    def unknown(
        cls, dimension: str, name: str, known: Iterable[str] = ()
    ) -> "UnknownTagError":
        return cls(
            code=ErrorCode.UNKNOWN_TAG,
            message=f"Unknown {dimension.upper()} name: {name!r}",
            details={"dimension": dimension, "value": name, "known": sorted(known)},
        )


class NotFoundError(NgssError):
    """A valid-format code has no standard where one is required."""

    @classmethod
    def standard(cls, code: str) -> "NotFoundError":
        return cls(
            code=ErrorCode.STANDARD_NOT_FOUND,
            message=f"Standard {code} does not exist in the database",
            details={"code": code},
        )


class ConfigError(NgssError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class CorpusLoadError(NgssError):
    """Fatal corpus load failure. The server must not start."""

    @classmethod
    def not_found(cls, path: str) -> "CorpusLoadError":
        return cls(
            code=ErrorCode.CORPUS_NOT_FOUND,
            message=f"Corpus file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "CorpusLoadError":
        return cls(
            code=ErrorCode.CORPUS_PARSE_ERROR,
            message=f"Failed to parse corpus at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def schema_error(cls, location: str, reason: str) -> "CorpusLoadError":
        return cls(
            code=ErrorCode.CORPUS_SCHEMA_ERROR,
            message=f"Corpus schema violation at {location}: {reason}",
            details={"location": location, "reason": reason},
        )

    @classmethod
    def duplicate_code(cls, code: str) -> "CorpusLoadError":
        return cls(
            code=ErrorCode.CORPUS_DUPLICATE_CODE,
            message=f"Duplicate standard code in corpus: {code}",
            details={"code": code},
        )

    @classmethod
    def unknown_category(cls, code: str, domain: str) -> "CorpusLoadError":
        return cls(
            code=ErrorCode.CORPUS_UNKNOWN_CATEGORY,
            message=f"Standard {code} has unknown domain {domain!r}",
            details={"code": code, "domain": domain},
        )


class InternalError(NgssError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
