"""MCP tool handlers."""

from ngss_mcp.mcp.tools import standards, stats

__all__ = ["standards", "stats"]
