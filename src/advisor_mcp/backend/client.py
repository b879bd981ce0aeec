"""Async HTTP client for the advisor backend REST API.

One :class:`BackendClient` is built per server from the normalized base
address and captured by the tool handlers. Each request opens its own
``httpx.AsyncClient``, so concurrent tool calls share no state.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from advisor_mcp.core.errors import BackendDecodeError, BackendUnreachableError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

# Backend data changes often; intermediaries must not serve stale copies.
NO_CACHE_HEADERS = {"cache-control": "no-store", "pragma": "no-cache"}


@dataclass(frozen=True, slots=True)
class BackendResponse:
    """Status and raw body of one backend response."""

    path: str
    status_code: int
    # Only status and body text outlive the httpx client context.
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            BackendDecodeError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.text)
        except ValueError as e:
            raise BackendDecodeError(self.path, self.status_code) from e


class BackendClient:
    """Issues single, non-retried requests against the backend."""

    def __init__(
        self,
        base_address: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_address = base_address.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def base_address(self) -> str:
        return self._base_address

    def url_for(self, path: str) -> str:
        return f"{self._base_address}{path}"

    async def get(
        self,
        path: str,
        params: Mapping[str, Any] | Sequence[tuple[str, Any]] | None = None,
    ) -> BackendResponse:
        """GET ``path`` with caching disabled."""
        return await self._send(
            "GET", path, params=params, headers=NO_CACHE_HEADERS
        )

    async def post(self, path: str, body: Any) -> BackendResponse:
        """POST ``body`` as JSON to ``path``."""
        return await self._send("POST", path, body=body)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | Sequence[tuple[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
        body: Any = None,
    ) -> BackendResponse:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.request(
                    method,
                    self.url_for(path),
                    params=params,
                    headers=headers,
                    json=body,
                )
        except httpx.HTTPError as e:
            raise BackendUnreachableError(path, type(e).__name__) from e
        return BackendResponse(path=path, status_code=resp.status_code, text=resp.text)
