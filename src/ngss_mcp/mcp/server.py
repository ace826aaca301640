"""FastMCP server creation and wiring.

Two-phase tool logging: tool_start with params, tool_complete with a result
summary. Caller errors log a warning without traceback; unexpected errors
log an error, with the full traceback at DEBUG.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, Field

from ngss_mcp.core.logging import clear_request_id, set_request_id

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from ngss_mcp.config.models import NgssConfig
    from ngss_mcp.mcp.context import AppContext
    from ngss_mcp.mcp.registry import ToolSpec

log = structlog.get_logger(__name__)

SERVER_NAME = "ngss-standards"
SERVER_INSTRUCTIONS = (
    "NGSS middle-school science standards: look up standards by code, search by "
    "domain, keyword, driving question, or framework dimension, and plan units."
)


class ToolResponse(BaseModel):
    """Standardized tool response envelope."""

    result: Any = None
    meta: dict[str, Any] = Field(default_factory=dict)

    success: bool
    error: str | None = None


def _extract_log_params(kwargs: dict[str, Any]) -> dict[str, Any]:
    """Key params for the tool_start event, with long strings shortened."""
    params: dict[str, Any] = {}
    for key, value in kwargs.items():
        if isinstance(value, str) and len(value) > 50:
            params[key] = value[:50] + "..."
        elif value is not None:
            params[key] = value
    return params


def _extract_result_summary(result: dict[str, Any]) -> dict[str, Any]:
    """Summary metrics from a tool result for the tool_complete event."""
    summary: dict[str, Any] = {}
    for key in ("total", "count", "total_matches", "total_candidates"):
        if key in result:
            summary[key] = result[key]
    for key in ("standards", "results", "matches", "suggestions"):
        if isinstance(result.get(key), list):
            summary[key] = len(result[key])
    tokens = result.get("_metadata", {}).get("tokens")
    if tokens:
        summary["output_tokens"] = tokens["output_tokens"]
    return summary


def create_mcp_server(context: AppContext) -> FastMCP:
    """Create FastMCP server with all tools wired to context.

    Args:
        context: AppContext holding the engine and config

    Returns:
        Configured FastMCP server ready to run
    """
    from fastmcp import FastMCP

    from ngss_mcp.mcp.registry import registry

    # Import tools to trigger registration
    from ngss_mcp.mcp.tools import standards, stats  # noqa: F401

    log.info("mcp_server_creating", standards=len(context.engine.corpus))

    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    for spec in registry:
        _wire_tool(mcp, spec, context)

    log.info("mcp_server_created", tool_count=len(registry))
    return mcp


def _wire_tool(mcp: FastMCP, spec: ToolSpec, context: AppContext) -> None:
    """Wire a single tool spec to FastMCP.

    The params model's fields become direct tool parameters, so FastMCP
    publishes a flat schema every MCP client accepts.
    """
    from fastmcp.tools import FunctionTool

    handler = build_tool_handler(spec, context)
    tool = FunctionTool(
        name=spec.name,
        description=spec.description,
        parameters=spec.input_schema(),
        fn=handler,
    )
    mcp.add_tool(tool)


def build_tool_handler(spec: ToolSpec, context: AppContext) -> Any:
    """Build the kwargs-accepting coroutine FastMCP calls for one tool.

    Every outcome, including failures, is returned as a ToolResponse dict.
    """
    from pydantic import ValidationError

    from ngss_mcp.core.errors import NgssError
    from ngss_mcp.mcp.errors import MCPError, MCPErrorCode, from_engine_error

    params_model = spec.params_model
    tool_name = spec.name

    async def handler(**kwargs: Any) -> dict[str, Any]:
        request_id = set_request_id()
        start_time = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - start_time) * 1000)

        log.info("tool_start", tool=tool_name, **_extract_log_params(kwargs))
        try:
            try:
                params = params_model(**kwargs)
            except ValidationError as e:
                first = e.errors()[0]["msg"] if e.errors() else str(e)
                log.warning("tool_validation_error", tool=tool_name, error=first, elapsed_ms=elapsed_ms())
                return ToolResponse(
                    success=False,
                    error=f"Validation error: {first}",
                    meta={
                        "request_id": request_id,
                        "error_type": "validation",
                        "error": {
                            "code": MCPErrorCode.INVALID_PARAMS.value,
                            "message": first,
                            "remediation": "Check parameter names and types against the tool schema.",
                        },
                        "validation_errors": [
                            {"field": ".".join(str(x) for x in err["loc"]), "message": err["msg"]}
                            for err in e.errors()[:5]
                        ],
                    },
                ).model_dump()

            try:
                result_data: dict[str, Any] = await spec.handler(context, params)
            except NgssError as e:
                raise from_engine_error(e) from e

            log.info(
                "tool_complete",
                tool=tool_name,
                elapsed_ms=elapsed_ms(),
                **_extract_result_summary(result_data),
            )
            return ToolResponse(
                success=True,
                result=result_data,
                meta={"request_id": request_id, "timestamp": int(time.time() * 1000)},
            ).model_dump()

        except MCPError as e:
            log.warning(
                "tool_error",
                tool=tool_name,
                error_code=e.code.value,
                error=e.message,
                elapsed_ms=elapsed_ms(),
            )
            return ToolResponse(
                success=False,
                error=e.message,
                meta={"request_id": request_id, "error": e.to_response().to_dict()},
            ).model_dump()

        except Exception as e:
            log.error("tool_internal_error", tool=tool_name, error=str(e), elapsed_ms=elapsed_ms())
            log.debug("tool_internal_error_traceback", tool=tool_name, exc_info=True)
            return ToolResponse(
                success=False,
                error=str(e),
                meta={
                    "request_id": request_id,
                    "error": {
                        "code": MCPErrorCode.INTERNAL_ERROR.value,
                        "message": str(e),
                        "remediation": "Retry the request. If it keeps failing, check the server log.",
                    },
                },
            ).model_dump()

        finally:
            clear_request_id()

    handler.__name__ = tool_name
    return handler


def run_server(config: NgssConfig) -> None:
    """Load the corpus, then create and run the MCP server.

    Raises:
        CorpusLoadError: The corpus failed to load. The server does not start.
    """
    from ngss_mcp.core.logging import configure_logging
    from ngss_mcp.mcp.context import AppContext

    configure_logging(
        config=config.logging, protect_stdout=config.server.transport == "stdio"
    )

    log.info(
        "mcp_server_starting",
        transport=config.server.transport,
        corpus_path=config.data.corpus_path or "<bundled>",
    )

    context = AppContext.create(config)
    mcp = create_mcp_server(context)

    log.info("mcp_server_running", transport=config.server.transport)
    if config.server.transport == "http":
        mcp.run(transport="http", host=config.server.host, port=config.server.port)
    else:
        mcp.run()
