"""MCP server exposing the standards engine as tools."""

from ngss_mcp.mcp.context import AppContext
from ngss_mcp.mcp.server import create_mcp_server, run_server

__all__ = ["AppContext", "create_mcp_server", "run_server"]
