"""Structured error system for MCP tools.

Engine errors (NgssError subclasses) are converted to MCPError here, adding
a machine-readable code and a remediation hint so callers can correct
their next request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fastmcp.exceptions import ToolError

from ngss_mcp.core.errors import ErrorCode, NgssError


class MCPErrorCode(StrEnum):
    """Machine-readable error codes for MCP tool failures."""

    # Validation errors - caller should fix input
    INVALID_PARAMS = "INVALID_PARAMS"
    INVALID_CODE_FORMAT = "INVALID_CODE_FORMAT"
    UNKNOWN_DOMAIN = "UNKNOWN_DOMAIN"
    INVALID_QUERY = "INVALID_QUERY"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    UNKNOWN_TAG = "UNKNOWN_TAG"

    # Lookup errors
    STANDARD_NOT_FOUND = "STANDARD_NOT_FOUND"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ErrorResponse:
    """Structured error response for MCP tools."""

    code: MCPErrorCode
    message: str
    remediation: str
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "remediation": self.remediation,
            "context": self.context,
        }


class MCPError(ToolError):
    """Base exception for MCP tool errors with structured response.

    Extends FastMCP's ToolError so FastMCP passes it through unchanged
    rather than wrapping it in a generic ToolError.
    """

    def __init__(
        self,
        code: MCPErrorCode,
        message: str,
        remediation: str,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.remediation = remediation
        self.context = context

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            code=self.code,
            message=self.message,
            remediation=self.remediation,
            context=self.context,
        )


# ErrorCode -> (MCP code, remediation)
_ENGINE_ERROR_MAP: dict[ErrorCode, tuple[MCPErrorCode, str]] = {
    ErrorCode.INVALID_CODE_FORMAT: (
        MCPErrorCode.INVALID_CODE_FORMAT,
        "Use a middle-school standard code such as MS-PS1-1, MS-LS2-3, or MS-ESS3-1.",
    ),
    ErrorCode.UNKNOWN_CATEGORY: (
        MCPErrorCode.UNKNOWN_DOMAIN,
        "Use one of: Physical Science, Life Science, Earth and Space Science.",
    ),
    ErrorCode.INVALID_QUERY: (
        MCPErrorCode.INVALID_QUERY,
        "Send 1-500 characters of plain text without markup or template syntax.",
    ),
    ErrorCode.OUT_OF_RANGE: (
        MCPErrorCode.OUT_OF_RANGE,
        "Keep limit within 1-50, offset at 0 or above, and unit_size within 2-8.",
    ),
    ErrorCode.UNKNOWN_TAG: (
        MCPErrorCode.UNKNOWN_TAG,
        "Use a name from context.details.known, or call get_server_stats for every tag name in use.",
    ),
    ErrorCode.STANDARD_NOT_FOUND: (
        MCPErrorCode.STANDARD_NOT_FOUND,
        "Check the code, or use search_standards to find the standard you meant.",
    ),
}


def from_engine_error(error: NgssError) -> MCPError:
    """Convert an engine error into an MCPError with remediation."""
    code, remediation = _ENGINE_ERROR_MAP.get(
        error.code,
        (MCPErrorCode.INTERNAL_ERROR, "Retry the request. If it keeps failing, check the server log."),
    )
    return MCPError(
        code=code,
        message=error.message,
        remediation=remediation,
        engine_code=error.code.value,
        details=error.details,
    )
