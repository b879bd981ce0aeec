"""Main CLI application.

Click commands for advisor-mcp: serve (HTTP transports), stdio, tools.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click

from advisor_mcp import __version__
from advisor_mcp.config.loader import load_config
from advisor_mcp.core.errors import ConfigError

if TYPE_CHECKING:
    from advisor_mcp.config.schema import AdvisorConfig, LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None) -> AdvisorConfig:
    """Load config with user-friendly error handling."""
    try:
        return load_config(path=config_path)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


def _configure_logging(config: LoggingConfig) -> None:
    """Send logs to stderr (stdout carries the stdio transport) and optionally a file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    logging.basicConfig(
        level=config.level.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="advisor-mcp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """advisor-mcp - MCP tools for the advisor backend.

    Exposes the backend's universe, asset and analysis endpoints as MCP tools.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.option("--host", default=None, help="Host to bind to (overrides config).")
@click.option(
    "--port", type=int, default=None, help="Port to bind to (overrides config)."
)
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Serve the tools over SSE (/sse) and streamable HTTP (/mcp)."""
    import uvicorn

    from advisor_mcp.api.app import create_app

    config = _load_config(ctx.obj["config_path"])
    _configure_logging(config.logging)

    app = create_app(config)
    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_config=None,
    )


# ── stdio ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def stdio(ctx: click.Context) -> None:
    """Serve the tools over stdio for local agent integration."""
    from advisor_mcp.mcp.server import run_server

    config = _load_config(ctx.obj["config_path"])
    _configure_logging(config.logging)
    asyncio.run(run_server(config))


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def tools(ctx: click.Context) -> None:
    """List the tools the current configuration registers."""
    from advisor_mcp.mcp.server import build_registry

    config = _load_config(ctx.obj["config_path"])
    registry = build_registry(config)
    if "config_error" in registry:
        click.echo("Backend base address is not configured (degraded mode).")
    for tool in registry.list_tools():
        click.echo(f"{tool.name}: {tool.description}")
