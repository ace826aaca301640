"""Tests for the MCP tool registry."""

from typing import Any

import pytest
from pydantic import BaseModel

from ngss_mcp.mcp.registry import ToolRegistry, ToolSpec, registry
from ngss_mcp.mcp.tools.base import BaseParams


class _EchoParams(BaseParams):
    text: str


class _Inner(BaseModel):
    value: int


class _NestedParams(BaseParams):
    inner: _Inner


async def _noop(ctx: Any, params: Any) -> dict[str, Any]:
    return {}


class TestToolRegistry:
    """Decorator registration and lookup."""

    def test_register_returns_handler_unchanged(self, clean_registry: ToolRegistry) -> None:
        async def echo(ctx: Any, params: _EchoParams) -> dict[str, Any]:
            return {"text": params.text}

        decorated = clean_registry.register("echo", "Echo text back", _EchoParams)(echo)

        assert decorated is echo
        spec = clean_registry.get("echo")
        assert spec == ToolSpec("echo", echo, "Echo text back", _EchoParams)

    def test_get_unknown_returns_none(self, clean_registry: ToolRegistry) -> None:
        assert clean_registry.get("missing") is None
        assert "missing" not in clean_registry

    def test_names_sorted_iteration_in_registration_order(
        self, clean_registry: ToolRegistry
    ) -> None:
        for name in ("zeta", "alpha", "mid"):
            clean_registry.register(name, name, _EchoParams)(_noop)

        assert clean_registry.names() == ["alpha", "mid", "zeta"]
        assert [spec.name for spec in clean_registry] == ["zeta", "alpha", "mid"]
        assert len(clean_registry) == 3

    def test_duplicate_name_for_other_handler_raises(self, clean_registry: ToolRegistry) -> None:
        async def other(ctx: Any, params: Any) -> dict[str, Any]:
            return {}

        clean_registry.register("echo", "Echo", _EchoParams)(_noop)

        with pytest.raises(ValueError, match="already registered"):
            clean_registry.register("echo", "Echo again", _EchoParams)(other)

    def test_reregistering_same_handler_is_allowed(self, clean_registry: ToolRegistry) -> None:
        clean_registry.register("echo", "Echo", _EchoParams)(_noop)
        clean_registry.register("echo", "Echo text", _EchoParams)(_noop)

        assert clean_registry.get("echo").description == "Echo text"

    def test_clear(self, clean_registry: ToolRegistry) -> None:
        clean_registry.register("echo", "Echo", _EchoParams)(_noop)
        clean_registry.clear()
        assert clean_registry.get_all() == []

    def test_separate_instances_do_not_share_tools(self) -> None:
        first, second = ToolRegistry(), ToolRegistry()
        first.register("echo", "Echo", _EchoParams)(_noop)
        assert "echo" not in second


class TestInputSchema:
    def test_flat_fields(self) -> None:
        schema = ToolSpec("echo", _noop, "Echo", _EchoParams).input_schema()

        assert schema["properties"]["text"]["type"] == "string"
        assert schema["required"] == ["text"]

    def test_nested_models_inlined(self) -> None:
        schema = ToolSpec("nested", _noop, "Nested", _NestedParams).input_schema()

        assert "$defs" not in schema
        assert schema["properties"]["inner"]["properties"]["value"]["type"] == "integer"


class TestRegisteredTools:
    """The tools module registers the full public surface."""

    def test_all_tools_registered(self) -> None:
        assert registry.names() == [
            "find_by_driving_question",
            "get_3d_components",
            "get_server_stats",
            "get_standard",
            "get_unit_suggestions",
            "search_by_crosscutting_concept",
            "search_by_disciplinary_core_idea",
            "search_by_domain",
            "search_by_practice",
            "search_standards",
        ]

    def test_every_tool_has_description(self) -> None:
        for spec in registry:
            assert spec.description
