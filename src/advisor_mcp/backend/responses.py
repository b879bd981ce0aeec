"""Typed decoding of backend response bodies.

Each model names the one field a tool extracts. Missing or malformed
fields decode to a defined fallback instead of failing, and bodies that
are not JSON objects decode as if they were ``{}``.
"""

from __future__ import annotations

import json
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, field_validator


class _BackendPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def decode(cls, body: Any) -> Self:
        return cls.model_validate(body if isinstance(body, dict) else {})


class ItemsPayload(_BackendPayload):
    """``{"items": [...]}`` from ``/universe`` and ``/search``."""

    items: list[Any] = []

    @field_validator("items", mode="before")
    @classmethod
    def _non_list_is_empty(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


class RationalePayload(_BackendPayload):
    """``{"rationale": "..."}`` from ``/explain``."""

    rationale: str | None = None

    @field_validator("rationale", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)


class AssetPayload(_BackendPayload):
    """``{"item": {...}}`` from ``/asset/{ticker}``."""

    item: Any = None
