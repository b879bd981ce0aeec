"""Shared test fixtures for advisor-mcp."""

from __future__ import annotations

import pytest

from advisor_mcp.config.schema import AdvisorConfig
from advisor_mcp.mcp.server import build_registry
from advisor_mcp.tools.registry import ToolRegistry
from tests.fixtures.backend import FakeBackend

API_BASE = "https://advisor.example.test"


@pytest.fixture
def backend() -> FakeBackend:
    """Recording stand-in for the backend REST API."""
    return FakeBackend()


@pytest.fixture
def config() -> AdvisorConfig:
    """Config pointing at the fake backend (with a trailing slash to strip)."""
    return AdvisorConfig(backend={"api_base": API_BASE + "/"})  # type: ignore[arg-type]


@pytest.fixture
def degraded_config() -> AdvisorConfig:
    """Config with no usable base address."""
    return AdvisorConfig(backend={"api_base": "   "})  # type: ignore[arg-type]


@pytest.fixture
def registry(config: AdvisorConfig, backend: FakeBackend) -> ToolRegistry:
    """Full tool registry wired to the fake backend."""
    return build_registry(config, transport=backend.transport)
