"""Core module exports."""

from ngss_mcp.core.errors import (
    ConfigError,
    CorpusLoadError,
    ErrorCode,
    FormatError,
    InputError,
    InternalError,
    InvalidQueryError,
    NgssError,
    NotFoundError,
    RangeError,
    UnknownCategoryError,
    UnknownTagError,
)
from ngss_mcp.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CorpusLoadError",
    "ErrorCode",
    "FormatError",
    "InputError",
    "InternalError",
    "InvalidQueryError",
    "NgssError",
    "NotFoundError",
    "RangeError",
    "UnknownCategoryError",
    "UnknownTagError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
