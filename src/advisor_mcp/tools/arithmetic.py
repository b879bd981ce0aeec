"""Arithmetic tools kept for quick client smoke tests."""

from __future__ import annotations

import operator
from typing import Any, Literal

from pydantic import BaseModel

from advisor_mcp.tools.base import Reply, ToolDefinition, text_reply

_OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
}


class AddArgs(BaseModel):
    a: float
    b: float


class CalculateArgs(BaseModel):
    operation: Literal["add", "subtract", "multiply", "divide"]
    a: float
    b: float


def format_number(value: float) -> str:
    """Render integral floats without a trailing ``.0``."""
    if value.is_integer():
        return str(int(value))
    return str(value)


async def add(args: AddArgs) -> Reply:
    return text_reply(format_number(args.a + args.b))


async def calculate(args: CalculateArgs) -> Reply:
    if args.operation == "divide" and args.b == 0:
        return text_reply("Error: Cannot divide by zero")
    return text_reply(format_number(_OPERATIONS[args.operation](args.a, args.b)))


def arithmetic_tools() -> list[ToolDefinition[Any]]:
    return [
        ToolDefinition(
            name="add",
            description="Add two numbers.",
            arguments=AddArgs,
            handler=add,
        ),
        ToolDefinition(
            name="calculate",
            description="Add, subtract, multiply or divide two numbers.",
            arguments=CalculateArgs,
            handler=calculate,
        ),
    ]
