"""FastAPI application factory for the MCP HTTP transports.

Routes:
    GET  /sse           open a streaming MCP session (server-sent events)
    POST /sse/message   client-to-server messages for an SSE session
    *    /mcp           streamable-HTTP MCP endpoint
    GET  /api/health    health checks

Any other path is a 404.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from mcp.server.sse import SseServerTransport
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from mcp.server import Server
    from starlette.types import Receive, Scope, Send

    from advisor_mcp.config.schema import AdvisorConfig
    from advisor_mcp.tools.registry import ToolRegistry

SSE_PATH = "/sse"
SSE_MESSAGE_PATH = "/sse/message"
MCP_PATH = "/mcp"


class _SSEEndpoint:
    """ASGI app: run one MCP session over a server-sent event stream."""

    def __init__(self, server: Server, transport: SseServerTransport) -> None:  # type: ignore[type-arg]
        self._server = server
        self._transport = transport

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        async with self._transport.connect_sse(scope, receive, send) as (
            read_stream,
            write_stream,
        ):
            await self._server.run(
                read_stream,
                write_stream,
                self._server.create_initialization_options(),
            )


class _SSEMessageEndpoint:
    """ASGI app: deliver a POSTed message to its SSE session."""

    def __init__(self, transport: SseServerTransport) -> None:
        self._transport = transport

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._transport.handle_post_message(scope, receive, send)


class _StreamableHTTPEndpoint:
    """ASGI app: hand the request to the streamable-HTTP session manager."""

    def __init__(self, manager: StreamableHTTPSessionManager) -> None:
        self._manager = manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._manager.handle_request(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the streamable-HTTP session manager for the app's lifetime."""
    manager: StreamableHTTPSessionManager = app.state.session_manager
    async with manager.run():
        yield


def create_app(
    config: AdvisorConfig | None = None,
    registry: ToolRegistry | None = None,
) -> FastAPI:
    """Create the HTTP app serving one tool set over both MCP transports."""
    from advisor_mcp import __version__
    from advisor_mcp.config.loader import load_config
    from advisor_mcp.mcp.server import build_registry, create_server

    if config is None:
        config = load_config()
    if registry is None:
        registry = build_registry(config)

    server = create_server(config, registry)
    session_manager = StreamableHTTPSessionManager(app=server)
    sse = SseServerTransport(SSE_MESSAGE_PATH)

    app = FastAPI(
        title=config.server.name,
        description="MCP tools for the advisor backend",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.registry = registry
    app.state.session_manager = session_manager

    app.add_route(SSE_PATH, _SSEEndpoint(server, sse), methods=["GET"])
    app.add_route(SSE_MESSAGE_PATH, _SSEMessageEndpoint(sse), methods=["POST"])
    app.add_route(MCP_PATH, _StreamableHTTPEndpoint(session_manager))

    from advisor_mcp.api.health import router as health_router

    app.include_router(health_router)

    return app
