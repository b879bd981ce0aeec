"""Exception hierarchy for advisor-mcp.

Every module imports from here. The hierarchy is:

    AdvisorError
    ├── ConfigError
    ├── ToolArgumentError(tool_name)
    └── BackendError(path)
        ├── BackendHTTPError(status_code, body_excerpt)
        ├── BackendUnreachableError(reason)
        └── BackendDecodeError(status_code)

Backend errors never leave a tool handler: the tool layer renders
``str(exc)`` as the reply text.
"""

from __future__ import annotations

BODY_EXCERPT_CHARS = 200


class AdvisorError(Exception):
    """Base exception for all advisor-mcp errors."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(AdvisorError):
    """Invalid configuration."""


# ─── Tool Errors ──────────────────────────────────────────────


class ToolArgumentError(AdvisorError):
    """Tool arguments failed validation against the tool's argument model."""

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Invalid arguments for {tool_name}: {message}")


# ─── Backend Errors ───────────────────────────────────────────


class BackendError(AdvisorError):
    """Base for errors talking to the backend REST API."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Backend {path} {message}")


class BackendHTTPError(BackendError):
    """Backend answered with a non-2xx status.

    ``body_excerpt`` is truncated to ``BODY_EXCERPT_CHARS`` and only
    included in the message when non-empty.
    """

    def __init__(
        self, path: str, status_code: int, body: str | None = None
    ) -> None:
        self.status_code = status_code
        self.body_excerpt = (body or "")[:BODY_EXCERPT_CHARS]
        msg = f"failed: {status_code}"
        if self.body_excerpt:
            msg += f" - {self.body_excerpt}"
        super().__init__(path, msg)


class BackendUnreachableError(BackendError):
    """No response could be obtained (connect error, timeout, ...)."""

    def __init__(self, path: str, reason: str) -> None:
        self.reason = reason
        super().__init__(path, f"unreachable: {reason}")


class BackendDecodeError(BackendError):
    """Backend answered 2xx but the body is not valid JSON."""

    def __init__(self, path: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(path, f"returned invalid JSON (status {status_code})")
