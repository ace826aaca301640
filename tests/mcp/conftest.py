"""Shared fixtures for MCP tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

# Register tools before any test clears the registry
import ngss_mcp.mcp.tools  # noqa: F401
from ngss_mcp.config.models import NgssConfig
from ngss_mcp.engine.ops import StandardsEngine
from ngss_mcp.mcp.context import AppContext
from ngss_mcp.mcp.registry import ToolRegistry, registry


@pytest.fixture
def clean_registry() -> Generator[ToolRegistry, None, None]:
    """Clear and yield the global registry, restore after test."""
    original = dict(registry._specs)
    registry.clear()
    yield registry
    registry.clear()
    registry._specs.update(original)


@pytest.fixture
def app_context(engine: StandardsEngine) -> AppContext:
    """AppContext over the six-standard fixture corpus."""
    return AppContext(engine=engine, config=NgssConfig())
