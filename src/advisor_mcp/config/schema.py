"""Pydantic models for advisor-mcp configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BackendConfig(BaseModel):
    """Backend REST API connection settings."""

    api_base: str | None = None
    api_base_env: str = "API_BASE"
    timeout: float = 30.0

    @property
    def base_address(self) -> str:
        """Normalized base address: trimmed, trailing slashes removed.

        An empty string means the server runs in degraded mode.
        """
        return (self.api_base or "").strip().rstrip("/")


class ServerConfig(BaseModel):
    """MCP server identity and HTTP bind address."""

    name: str = "Advisor MCP"
    version: str = "0.1.0"
    host: str = "127.0.0.1"
    port: int = 8787


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""


class AdvisorConfig(BaseModel):
    """Top-level configuration for advisor-mcp."""

    backend: BackendConfig = Field(default_factory=BackendConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
