"""Tool definition and reply types.

A tool is a name, a description, a pydantic model describing its
arguments, and an async handler that receives a validated instance of
that model. Handlers return a :data:`Reply`: a list of MCP text blocks.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from mcp.types import TextContent
from pydantic import BaseModel

ArgsT = TypeVar("ArgsT", bound=BaseModel)

Reply = list[TextContent]


@dataclass(frozen=True, slots=True)
class ToolDefinition(Generic[ArgsT]):
    """A registered tool. Immutable for the lifetime of the server."""

    name: str
    description: str
    arguments: type[ArgsT]
    handler: Callable[[ArgsT], Awaitable[Reply]]

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for the tool's arguments, as sent to MCP clients."""
        return self.arguments.model_json_schema()


def text_reply(text: str) -> Reply:
    """Wrap ``text`` in a single-block reply."""
    return [TextContent(type="text", text=text)]


def json_reply(data: Any) -> Reply:
    """Pretty-print ``data`` as JSON (2-space indent) in a single-block reply."""
    return text_reply(json.dumps(data, indent=2, ensure_ascii=False))
