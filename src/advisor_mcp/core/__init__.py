"""Core errors shared across the package."""

from advisor_mcp.core.errors import (
    BODY_EXCERPT_CHARS,
    AdvisorError,
    BackendDecodeError,
    BackendError,
    BackendHTTPError,
    BackendUnreachableError,
    ConfigError,
    ToolArgumentError,
)

__all__ = [
    "BODY_EXCERPT_CHARS",
    "AdvisorError",
    "BackendDecodeError",
    "BackendError",
    "BackendHTTPError",
    "BackendUnreachableError",
    "ConfigError",
    "ToolArgumentError",
]
