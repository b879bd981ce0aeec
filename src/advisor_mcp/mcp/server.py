"""MCP server for the advisor backend.

``create_server`` resolves the tool set once from the given config and
wires it into a low-level MCP :class:`~mcp.server.Server`. The same
server instance backs the stdio, SSE and streamable-HTTP transports.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from advisor_mcp.tools.advisor import build_tools
from advisor_mcp.tools.registry import ToolRegistry

if TYPE_CHECKING:
    import httpx

    from advisor_mcp.config.schema import AdvisorConfig

logger = logging.getLogger(__name__)


def build_registry(
    config: AdvisorConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ToolRegistry:
    """Register the tool set for ``config``."""
    registry = ToolRegistry(build_tools(config, transport=transport))
    logger.info("Registered tools: %s", ", ".join(registry.list_names()))
    return registry


def create_server(
    config: AdvisorConfig,
    registry: ToolRegistry | None = None,
) -> Server:
    """Create an MCP server exposing ``registry`` (built from config if omitted)."""
    tools = registry if registry is not None else build_registry(config)
    server = Server(config.server.name, version=config.server.version)

    @server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
    async def list_tools() -> list[Tool]:
        """List available MCP tools."""
        return tools.list_tools()

    @server.call_tool()  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        return await tools.call(name, arguments)

    return server


async def run_server(config: AdvisorConfig) -> None:
    """Start the MCP server on stdio."""
    server = create_server(config)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
