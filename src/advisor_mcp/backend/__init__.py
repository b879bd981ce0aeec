"""Backend REST API client and response decoding."""

from advisor_mcp.backend.client import BackendClient, BackendResponse
from advisor_mcp.backend.responses import AssetPayload, ItemsPayload, RationalePayload

__all__ = [
    "AssetPayload",
    "BackendClient",
    "BackendResponse",
    "ItemsPayload",
    "RationalePayload",
]
