"""Structured logging for the NGSS server and CLI.

structlog events are handed to stdlib logging and rendered by one handler
per configured output, so third-party stdlib records share the same format.
Every event carries the logger name and, inside a tool call, the request id.

Under the stdio transport stdout carries MCP frames. With ``protect_stdout``
set, an output aimed at stdout is written to stderr instead.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from ngss_mcp.config.models import LoggingConfig, LogOutputConfig

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)

# Upstream loggers that chatter at INFO on every request
_QUIET_LOGGERS = ("mcp.server.lowlevel.server", "fastmcp.server.context.to_client")


def get_request_id() -> str | None:
    return _request_id.get()


def set_request_id(request_id: str | None = None) -> str:
    """Bind a request id for the current tool call, generating one if needed."""
    rid = request_id or uuid4().hex[:12]
    _request_id.set(rid)
    return rid


def clear_request_id() -> None:
    _request_id.set(None)


def _add_request_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := get_request_id():
        event_dict["request_id"] = rid
    return event_dict


def _level(name: str | None, default: int) -> int:
    if name is None:
        return default
    return logging.getLevelNamesMapping().get(name.upper(), default)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _add_request_id,  # type: ignore[list-item]
    ]


def _stream_for(destination: str, protect_stdout: bool) -> TextIO | None:
    """Console stream for a destination, or None for a file path."""
    if destination == "stderr":
        return sys.stderr
    if destination == "stdout":
        return sys.stderr if protect_stdout else sys.stdout
    return None


def _build_handler(
    output: LogOutputConfig,
    level: int,
    shared: list[structlog.types.Processor],
    protect_stdout: bool,
) -> logging.Handler:
    stream = _stream_for(output.destination, protect_stdout)
    handler: logging.Handler
    if stream is not None:
        handler = logging.StreamHandler(stream)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=stream is not None and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )
    handler.setLevel(level)
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
    protect_stdout: bool = True,
) -> None:
    """Install structlog and the root handlers. Safe to call repeatedly.

    Args:
        config: Multi-output configuration. When omitted, a single stderr
            output is built from ``level`` and ``json_format``.
        json_format: Render the default output as JSON lines.
        level: Level for the default output.
        protect_stdout: Send stdout outputs to stderr. Leave on for the
            stdio transport and for CLI commands that print results.
    """
    from ngss_mcp.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level, logging.INFO)
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers are created before this runs
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    for output in config.outputs:
        output_level = _level(output.level, root_level)
        root.addHandler(_build_handler(output, output_level, shared, protect_stdout))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger whose events carry ``logger=name``."""
    if name:
        return structlog.get_logger(name)  # type: ignore[no-any-return]
    return structlog.get_logger()  # type: ignore[no-any-return]
