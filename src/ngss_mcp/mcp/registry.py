"""Decorator-based registry of NGSS tool handlers.

Tool modules register at import time; the server walks the registry once
at startup and publishes each entry as a FastMCP tool.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fastmcp.utilities.json_schema import dereference_refs
from pydantic import BaseModel

if TYPE_CHECKING:
    from ngss_mcp.mcp.context import AppContext

# (ctx, validated_params) -> result dict
HandlerFn = Callable[["AppContext", Any], Awaitable[dict[str, Any]]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    handler: HandlerFn
    description: str
    params_model: type[BaseModel]

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the params model with every $ref inlined.

        Some MCP clients reject $defs, so nested models are flattened.
        """
        return dereference_refs(self.params_model.model_json_schema())


class ToolRegistry:
    """Name -> ToolSpec map filled by the ``register`` decorator."""

    def __init__(self) -> None:
        self._specs: dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        params_model: type[BaseModel],
    ) -> Callable[[HandlerFn], HandlerFn]:
        """Register a handler under ``name``.

        Usage:
            @registry.register("get_standard", "Retrieve a standard by code", GetStandardParams)
            async def get_standard(ctx: AppContext, params: GetStandardParams) -> dict:
                ...

        Raises:
            ValueError: ``name`` is already registered to a different handler.
        """

        def decorator(fn: HandlerFn) -> HandlerFn:
            existing = self._specs.get(name)
            if existing is not None and existing.handler is not fn:
                raise ValueError(f"Tool {name!r} is already registered")
            self._specs[name] = ToolSpec(name, fn, description, params_model)
            return fn

        return decorator

    def get(self, name: str) -> ToolSpec | None:
        return self._specs.get(name)

    def get_all(self) -> list[ToolSpec]:
        return list(self._specs.values())

    def names(self) -> list[str]:
        return sorted(self._specs)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self.get_all())

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def clear(self) -> None:
        self._specs.clear()


registry = ToolRegistry()
