"""Advisor tools: forward each call to the backend REST API.

Every tool makes at most one backend request and always returns a
normal reply; backend failures are described in the reply text.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from advisor_mcp.backend.client import BackendClient
from advisor_mcp.backend.responses import AssetPayload, ItemsPayload, RationalePayload
from advisor_mcp.core.errors import BackendError, BackendHTTPError
from advisor_mcp.tools.arithmetic import arithmetic_tools
from advisor_mcp.tools.base import ToolDefinition, json_reply, text_reply

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import httpx

    from advisor_mcp.backend.client import BackendResponse
    from advisor_mcp.config.schema import AdvisorConfig
    from advisor_mcp.tools.base import Reply

logger = logging.getLogger(__name__)

MAX_INGEST_TICKERS = 50
NO_RATIONALE = "No rationale."
NO_VALID_TICKERS = "No valid tickers provided."


# ── Argument models ──────────────────────────────────────────────


class ListUniverseArgs(BaseModel):
    sector: str | None = Field(
        default=None, min_length=1, description="Only list assets in this sector."
    )
    limit: int = Field(default=100, ge=1, le=500, description="Max rows to return.")


class ExplainUniverseArgs(BaseModel):
    risk: float = Field(
        default=3.0, ge=1, le=5, description="Risk level, 1 (low) to 5."
    )
    universe: list[str] = Field(
        default_factory=list, description="Tickers to explain."
    )


class TickerArgs(BaseModel):
    ticker: str = Field(min_length=1, description="Ticker symbol, e.g. AAPL.")


class SearchAssetsArgs(BaseModel):
    q: str = Field(min_length=1, description="Search query.")
    limit: int = Field(default=10, ge=1, le=100, description="Max results.")


class IngestArgs(BaseModel):
    tickers: list[str] = Field(
        min_length=1,
        max_length=MAX_INGEST_TICKERS,
        description="Tickers to ingest from Finnhub.",
    )


class NoArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ── Request/response helpers ─────────────────────────────────────


async def _forward(
    request: Awaitable[BackendResponse],
    path: str,
    shape: Callable[[Any], Reply],
    *,
    body_excerpt: bool = False,
) -> Reply:
    """Await one backend request and shape its JSON body into a reply.

    Non-2xx statuses, transport failures and undecodable bodies become
    the reply text instead of propagating.
    """
    try:
        response = await request
        if not response.ok:
            raise BackendHTTPError(
                path, response.status_code, response.text if body_excerpt else None
            )
        return shape(response.json())
    except BackendError as exc:
        logger.warning("%s", exc)
        return text_reply(str(exc))


def json_number(value: float) -> int | float:
    """Integral floats go on the wire as JSON integers (``3``, not ``3.0``)."""
    return int(value) if value.is_integer() else value


def clean_tickers(tickers: list[str]) -> list[str]:
    """Trim, uppercase, drop empties and duplicates (first wins), cap at 50."""
    cleaned = (t.strip().upper() for t in tickers)
    return list(dict.fromkeys(t for t in cleaned if t))[:MAX_INGEST_TICKERS]


def _items(body: Any) -> Reply:
    return json_reply(ItemsPayload.decode(body).items)


# ── Tool set ─────────────────────────────────────────────────────


def advisor_tools(client: BackendClient) -> list[ToolDefinition[Any]]:
    """Build the backend-forwarding tools bound to ``client``."""

    async def list_universe(args: ListUniverseArgs) -> Reply:
        params: dict[str, Any] = {"limit": args.limit}
        sector = (args.sector or "").strip()
        if sector:
            params["sector"] = sector
        return await _forward(client.get("/universe", params), "/universe", _items)

    async def explain_universe(args: ExplainUniverseArgs) -> Reply:
        body = {"risk": json_number(args.risk), "universe": args.universe}

        def shape(data: Any) -> Reply:
            rationale = RationalePayload.decode(data).rationale
            return text_reply(NO_RATIONALE if rationale is None else rationale)

        return await _forward(client.post("/explain", body), "/explain", shape)

    async def get_asset_details(args: TickerArgs) -> Reply:
        path = f"/asset/{quote(args.ticker, safe='')}"
        return await _forward(
            client.get(path),
            path,
            lambda data: json_reply(AssetPayload.decode(data).item),
        )

    async def search_assets(args: SearchAssetsArgs) -> Reply:
        params = {"q": args.q, "limit": args.limit}
        return await _forward(client.get("/search", params), "/search", _items)

    async def ingest_from_finnhub(args: IngestArgs) -> Reply:
        tickers = clean_tickers(args.tickers)
        if not tickers:
            return text_reply(NO_VALID_TICKERS)
        path = "/ingest/finnhub"
        params = [("tickers", t) for t in tickers]
        return await _forward(
            client.get(path, params), path, json_reply, body_excerpt=True
        )

    async def run_fundamentals(args: TickerArgs) -> Reply:
        path = "/analyze/fundamentals"
        return await _forward(
            client.get(path, {"ticker": args.ticker}),
            path,
            json_reply,
            body_excerpt=True,
        )

    return [
        ToolDefinition(
            name="list_universe",
            description=(
                "List tickers and sectors in the investable universe, "
                "optionally filtered by sector."
            ),
            arguments=ListUniverseArgs,
            handler=list_universe,
        ),
        ToolDefinition(
            name="explain_universe",
            description="Get a short educational rationale via the LLM.",
            arguments=ExplainUniverseArgs,
            handler=explain_universe,
        ),
        ToolDefinition(
            name="get_asset_details",
            description="Get the stored details for one asset by ticker.",
            arguments=TickerArgs,
            handler=get_asset_details,
        ),
        ToolDefinition(
            name="search_assets",
            description="Search assets by ticker or name.",
            arguments=SearchAssetsArgs,
            handler=search_assets,
        ),
        ToolDefinition(
            name="ingest_from_finnhub",
            description=(
                "Fetch fresh quotes and profiles from Finnhub for up to 50 "
                "tickers and store them in the backend."
            ),
            arguments=IngestArgs,
            handler=ingest_from_finnhub,
        ),
        ToolDefinition(
            name="run_fundamentals",
            description="Run the fundamentals analysis for one ticker.",
            arguments=TickerArgs,
            handler=run_fundamentals,
        ),
    ]


def config_error_tool(api_base_env: str) -> ToolDefinition[NoArgs]:
    """The only tool offered when no backend base address is configured."""
    message = (
        f"Missing {api_base_env} env var. Set it in the environment "
        "or under [backend] api_base in advisor-mcp.toml."
    )

    async def config_error(args: NoArgs) -> Reply:
        return text_reply(message)

    return ToolDefinition(
        name="config_error",
        description="Reports that the server is missing its backend configuration.",
        arguments=NoArgs,
        handler=config_error,
    )


def build_tools(
    config: AdvisorConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[ToolDefinition[Any]]:
    """Resolve the tool set for ``config``.

    With an empty base address the server is degraded: only
    ``config_error`` is returned and no backend call is ever possible.
    """
    base_address = config.backend.base_address
    if not base_address:
        logger.warning(
            "No backend base address configured (%s); only config_error is available",
            config.backend.api_base_env,
        )
        return [config_error_tool(config.backend.api_base_env)]

    client = BackendClient(
        base_address, timeout=config.backend.timeout, transport=transport
    )
    return [*arithmetic_tools(), *advisor_tools(client)]
