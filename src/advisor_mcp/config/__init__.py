"""Configuration loading and validation."""

from advisor_mcp.config.loader import load_config
from advisor_mcp.config.schema import (
    AdvisorConfig,
    BackendConfig,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    "AdvisorConfig",
    "BackendConfig",
    "LoggingConfig",
    "ServerConfig",
    "load_config",
]
