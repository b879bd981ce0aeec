"""Health check endpoints."""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

_START_TIME = time.monotonic()


@router.get("/api/health")
async def health() -> dict[str, str]:
    """Basic health check -- always returns quickly."""
    return {"status": "ok"}


@router.get("/api/health/detailed")
async def health_detailed(request: Request) -> dict[str, Any]:
    """Version, uptime, and whether the backend is configured."""
    from advisor_mcp import __version__

    registry = request.app.state.registry
    degraded = "config_error" in registry
    return {
        "status": "degraded" if degraded else "ok",
        "version": __version__,
        "uptime_seconds": round(time.monotonic() - _START_TIME, 1),
        "mode": "degraded" if degraded else "ready",
        "tools": registry.list_names(),
    }
