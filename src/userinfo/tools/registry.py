"""Tool registry for managing and dispatching service methods."""

import logging
from typing import Any

from ..context import acting_as
from ..identity import Identity
from .base import Tool, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry for available tools."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool."""
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> None:
        """Unregister a tool by name."""
        if name in self._tools:
            del self._tools[name]

    def get(self, name: str) -> Tool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[str]:
        """List all registered tool names."""
        return list(self._tools.keys())

    def get_tools_schema(self) -> list[dict[str, Any]]:
        """Get schemas for all tools."""
        return [tool.get_schema() for tool in self._tools.values()]

    async def dispatch(
        self,
        tool_name: str,
        args: dict[str, Any],
        caller: Identity | str | int | None = None,
    ) -> ToolResult:
        """Dispatch a call by name on behalf of ``caller`` (anonymous if None)."""
        tool = self._tools.get(tool_name)

        if tool is None:
            return ToolResult(
                success=False,
                output="",
                error=f"Unknown tool: {tool_name}",
            )

        valid, error = tool.validate_args(args)
        if not valid:
            return ToolResult(
                success=False,
                output="",
                error=error,
            )

        try:
            with acting_as(caller):
                return await tool.execute(**args)
        except Exception as e:
            logger.exception("Tool %s failed", tool_name)
            return ToolResult(
                success=False,
                output="",
                error=f"Tool execution failed: {e}",
            )
