"""Tool registry for MCP server."""

from __future__ import annotations

from typing import Any, Protocol

from mcp.types import CallToolResult, Tool
from pubchem_mcp.utils.errors import MethodNotFoundError

from . import pubchem


class ToolProvider(Protocol):
    TOOL_NAME: str

    async def list_tools(self) -> list[Tool]:  # pragma: no cover - Protocol definition
        ...

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> CallToolResult:  # pragma: no cover - Protocol definition
        ...


_TOOL_MODULES: list[ToolProvider] = [pubchem]


async def list_tools() -> list[Tool]:
    """Aggregate tool metadata from all registered modules."""
    tools: list[Tool] = []
    for module in _TOOL_MODULES:
        tools.extend(await module.list_tools())
    return tools


async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
    """Dispatch tool execution to the module that owns the tool name."""
    for module in _TOOL_MODULES:
        if module.TOOL_NAME == name:
            return await module.call_tool(name, arguments)

    raise MethodNotFoundError(f"Unknown tool: {name}")


__all__ = ["call_tool", "list_tools"]
