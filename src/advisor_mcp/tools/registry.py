"""Tool registry: registration, listing, and validated dispatch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp.types import Tool
from pydantic import ValidationError

from advisor_mcp.core.errors import ToolArgumentError
from advisor_mcp.tools.base import text_reply

if TYPE_CHECKING:
    from collections.abc import Iterable

    from advisor_mcp.tools.base import Reply, ToolDefinition

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of the tools one server exposes.

    Tools are registered once at startup; the registry is read-only
    afterwards, so concurrent calls need no locking.
    """

    def __init__(self, tools: Iterable[ToolDefinition[Any]] = ()) -> None:
        self._tools: dict[str, ToolDefinition[Any]] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolDefinition[Any]) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            msg = f"Tool already registered: {tool.name}"
            raise ValueError(msg)
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDefinition[Any]:
        """Get a tool by name.

        Raises:
            KeyError: If the tool is not found.
        """
        if name not in self._tools:
            msg = f"Tool not found: {name}"
            raise KeyError(msg)
        return self._tools[name]

    def list_tools(self) -> list[Tool]:
        """Return MCP tool descriptors for all registered tools."""
        return [
            Tool(name=t.name, description=t.description, inputSchema=t.input_schema)
            for t in self._tools.values()
        ]

    async def call(self, name: str, arguments: dict[str, Any] | None) -> Reply:
        """Validate ``arguments`` and run the named tool's handler.

        Unknown tools get an in-band reply.

        Raises:
            ToolArgumentError: If the arguments fail validation. The handler
                is not run.
        """
        try:
            tool = self.get(name)
        except KeyError:
            return text_reply(f"Unknown tool: {name}")
        try:
            args = tool.arguments.model_validate(arguments or {})
        except ValidationError as exc:
            raise ToolArgumentError(name, str(exc)) from exc
        logger.info("Calling tool %s", name)
        return await tool.handler(args)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def list_names(self) -> list[str]:
        """Return names of all registered tools."""
        return list(self._tools.keys())
