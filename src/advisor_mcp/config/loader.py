"""Configuration loading for advisor-mcp.

Sources, lowest priority first:
    1. Pydantic model defaults
    2. ``$XDG_CONFIG_HOME/advisor-mcp/config.toml``
    3. ``./advisor-mcp.toml``
    4. the file named by ``$ADVISOR_MCP_CONFIG``
    5. an explicit ``path`` argument
    6. ``overrides`` passed to :func:`load_config`

Every source is a table of sections (``[backend]``, ``[server]``,
``[logging]``) holding plain keys, so sources merge key by key within
each section. When no source sets ``backend.api_base`` it is taken from
the env var named by ``backend.api_base_env`` (``API_BASE``).
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from advisor_mcp.core.errors import ConfigError

from .schema import AdvisorConfig

Sections = dict[str, Any]


def _config_files(explicit: str | Path | None) -> list[Path]:
    """Existing config files, lowest priority first."""
    xdg = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    user = Path(xdg) / "advisor-mcp" / "config.toml"
    project = Path.cwd() / "advisor-mcp.toml"
    found = [p for p in (user, project) if p.is_file()]

    env_path = os.environ.get("ADVISOR_MCP_CONFIG")
    if env_path:
        if not Path(env_path).is_file():
            msg = f"ADVISOR_MCP_CONFIG points to non-existent file: {env_path}"
            raise ConfigError(msg)
        found.append(Path(env_path))

    if explicit is not None:
        if not Path(explicit).is_file():
            msg = f"Config file not found: {explicit}"
            raise ConfigError(msg)
        found.append(Path(explicit))

    return found


def _read_toml(path: Path) -> Sections:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _merge_sections(base: Sections, override: Sections) -> Sections:
    """Merge ``override`` into a copy of ``base`` key by key per section.

    A non-table value replaces the whole section and is left for
    validation to reject.
    """
    merged = {k: dict(v) if isinstance(v, dict) else v for k, v in base.items()}
    for section, values in override.items():
        current = merged.get(section)
        if isinstance(current, dict) and isinstance(values, dict):
            current.update(values)
        else:
            merged[section] = dict(values) if isinstance(values, dict) else values
    return merged


def load_config(
    path: str | Path | None = None,
    overrides: Sections | None = None,
) -> AdvisorConfig:
    """Load and validate configuration.

    Raises:
        ConfigError: On unreadable or invalid TOML, a missing config file,
            or values that fail validation.
    """
    merged: Sections = {}
    for config_file in _config_files(path):
        merged = _merge_sections(merged, _read_toml(config_file))
    if overrides:
        merged = _merge_sections(merged, overrides)

    try:
        config = AdvisorConfig.model_validate(merged)
    except Exception as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e

    backend = config.backend
    if backend.api_base is None and backend.api_base_env:
        backend.api_base = os.environ.get(backend.api_base_env)
    return config
