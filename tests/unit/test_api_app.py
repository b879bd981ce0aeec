"""Tests for the HTTP app: MCP transports, health, and 404 fallback."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import anyio
from fastapi.testclient import TestClient

from advisor_mcp.api.app import MCP_PATH, SSE_MESSAGE_PATH, SSE_PATH, create_app

if TYPE_CHECKING:
    from fastapi import FastAPI
    from httpx import Response

    from advisor_mcp.config.schema import AdvisorConfig
    from advisor_mcp.tools.registry import ToolRegistry
    from tests.fixtures.backend import FakeBackend

PROTOCOL_VERSION = "2025-03-26"

INITIALIZE = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {},
        "clientInfo": {"name": "test-client", "version": "0.0.1"},
    },
}
INITIALIZED = {"jsonrpc": "2.0", "method": "notifications/initialized"}


def _search_call(request_id: int) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": "search_assets", "arguments": {"q": "apple"}},
    }


class TestRoutes:
    def test_transport_paths_registered(self, config: AdvisorConfig) -> None:
        app = create_app(config)
        paths = {getattr(r, "path", None) for r in app.routes}
        assert {SSE_PATH, SSE_MESSAGE_PATH, MCP_PATH} <= paths

    def test_unknown_path_is_404(self, config: AdvisorConfig) -> None:
        client = TestClient(create_app(config))
        assert client.get("/nope").status_code == 404
        assert client.get("/").status_code == 404

    def test_message_path_rejects_get(self, config: AdvisorConfig) -> None:
        client = TestClient(create_app(config))
        assert client.get(SSE_MESSAGE_PATH).status_code == 405


class TestHealth:
    def test_health_basic(self, config: AdvisorConfig) -> None:
        client = TestClient(create_app(config))
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_health_detailed_ready(
        self, config: AdvisorConfig, registry: ToolRegistry
    ) -> None:
        client = TestClient(create_app(config, registry))
        data = client.get("/api/health/detailed").json()
        assert data["status"] == "ok"
        assert data["mode"] == "ready"
        assert data["version"] == "0.1.0"
        assert "list_universe" in data["tools"]

    def test_health_detailed_degraded(self, degraded_config: AdvisorConfig) -> None:
        client = TestClient(create_app(degraded_config))
        data = client.get("/api/health/detailed").json()
        assert data["status"] == "degraded"
        assert data["mode"] == "degraded"
        assert data["tools"] == ["config_error"]


# ── Streamable HTTP (/mcp) ───────────────────────────────────────


def _rpc_result(resp: Response) -> dict[str, Any]:
    """JSON-RPC result from a plain JSON or single-event SSE response."""
    assert resp.status_code == 200, resp.text
    if resp.headers["content-type"].startswith("application/json"):
        return resp.json()["result"]  # type: ignore[no-any-return]
    data = [
        line[len("data:") :].strip()
        for line in resp.text.splitlines()
        if line.startswith("data:")
    ]
    return json.loads(data[-1])["result"]  # type: ignore[no-any-return]


class TestStreamableHTTP:
    HEADERS = {
        "accept": "application/json, text/event-stream",
        "content-type": "application/json",
    }

    def _open_session(self, client: TestClient) -> dict[str, str]:
        resp = client.post(MCP_PATH, json=INITIALIZE, headers=self.HEADERS)
        result = _rpc_result(resp)
        assert result["serverInfo"]["name"] == "Advisor MCP"
        headers = {
            **self.HEADERS,
            "mcp-session-id": resp.headers["mcp-session-id"],
            "mcp-protocol-version": PROTOCOL_VERSION,
        }
        ack = client.post(MCP_PATH, json=INITIALIZED, headers=headers)
        assert ack.status_code == 202
        return headers

    def test_tool_call_reaches_backend(
        self, config: AdvisorConfig, registry: ToolRegistry, backend: FakeBackend
    ) -> None:
        backend.respond("/search", json={"items": [{"ticker": "AAPL"}]})
        with TestClient(create_app(config, registry)) as client:
            headers = self._open_session(client)
            resp = client.post(MCP_PATH, json=_search_call(2), headers=headers)
        result = _rpc_result(resp)
        assert not result.get("isError")
        assert json.loads(result["content"][0]["text"]) == [{"ticker": "AAPL"}]
        assert backend.last.url.params["q"] == "apple"

    def test_backend_failure_is_in_band(
        self, config: AdvisorConfig, registry: ToolRegistry, backend: FakeBackend
    ) -> None:
        backend.respond("/search", 500, text="boom")
        with TestClient(create_app(config, registry)) as client:
            headers = self._open_session(client)
            resp = client.post(MCP_PATH, json=_search_call(2), headers=headers)
        result = _rpc_result(resp)
        assert not result.get("isError")
        assert result["content"][0]["text"] == "Backend /search failed: 500"

    def test_lists_registered_tools(
        self, config: AdvisorConfig, registry: ToolRegistry
    ) -> None:
        with TestClient(create_app(config, registry)) as client:
            headers = self._open_session(client)
            resp = client.post(
                MCP_PATH,
                json={"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
                headers=headers,
            )
        names = {t["name"] for t in _rpc_result(resp)["tools"]}
        assert names == set(registry.list_names())


# ── SSE (/sse + /sse/message) ────────────────────────────────────


def _http_scope(method: str, path: str, query: bytes = b"") -> dict[str, Any]:
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": query,
        "headers": [
            (b"host", b"testserver"),
            (b"content-type", b"application/json"),
            (b"accept", b"text/event-stream"),
        ],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }


async def _post_message(app: FastAPI, endpoint: str, message: dict[str, Any]) -> int:
    """POST one JSON-RPC message to the SSE message endpoint; return the status."""
    path, _, query = endpoint.partition("?")
    body = json.dumps(message).encode()
    sent = False
    status = 0

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    async def send(msg: dict[str, Any]) -> None:
        nonlocal status
        if msg["type"] == "http.response.start":
            status = msg["status"]

    await app(_http_scope("POST", path, query.encode()), receive, send)
    return status


class _EventReader:
    """Splits the raw SSE body stream into (event, data) pairs."""

    def __init__(self, chunks: anyio.abc.ObjectReceiveStream[bytes]) -> None:
        self._chunks = chunks
        self._buffer = ""

    async def next(self, kind: str) -> str:
        while True:
            while "\n\n" in self._buffer:
                raw, self._buffer = self._buffer.split("\n\n", 1)
                fields = dict(
                    line.split(": ", 1) for line in raw.split("\n") if ": " in line
                )
                if fields.get("event") == kind:
                    return fields["data"]
            chunk = await self._chunks.receive()
            self._buffer += chunk.decode().replace("\r\n", "\n")


class TestSSE:
    async def test_session_round_trip(
        self, config: AdvisorConfig, registry: ToolRegistry, backend: FakeBackend
    ) -> None:
        backend.respond("/search", json={"items": [{"ticker": "MSFT"}]})
        app = create_app(config, registry)
        send_chunks, recv_chunks = anyio.create_memory_object_stream[bytes](100)
        events = _EventReader(recv_chunks)

        async def sse_receive() -> dict[str, Any]:
            await anyio.sleep_forever()
            return {"type": "http.disconnect"}  # pragma: no cover

        async def sse_send(msg: dict[str, Any]) -> None:
            if msg["type"] == "http.response.body" and msg.get("body"):
                await send_chunks.send(msg["body"])

        with anyio.fail_after(10):
            async with anyio.create_task_group() as tg:
                tg.start_soon(app, _http_scope("GET", SSE_PATH), sse_receive, sse_send)

                endpoint = await events.next("endpoint")
                assert endpoint.startswith(f"{SSE_MESSAGE_PATH}?session_id=")

                assert await _post_message(app, endpoint, INITIALIZE) == 202
                init = json.loads(await events.next("message"))
                assert init["result"]["serverInfo"]["name"] == "Advisor MCP"

                assert await _post_message(app, endpoint, INITIALIZED) == 202
                assert await _post_message(app, endpoint, _search_call(2)) == 202
                reply = json.loads(await events.next("message"))

                tg.cancel_scope.cancel()

        assert reply["id"] == 2
        content = reply["result"]["content"]
        assert json.loads(content[0]["text"]) == [{"ticker": "MSFT"}]
        assert len(backend.requests) == 1
