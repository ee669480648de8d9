"""HTTP transport for the docs server.

The docs server is meant for a local MCP client, so the HTTP app only listens
on localhost and refuses browser requests from other origins. There is no
authentication.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP
    from starlette.responses import Response
    from starlette.types import ASGIApp, Receive, Scope, Send

    from gptproto_docs.config import Settings

log = structlog.get_logger()

SUPPORTED_PROTOCOL_VERSIONS: frozenset[str] = frozenset({"2025-11-25", "2025-06-18", "2025-03-26"})
_LOCAL_ORIGIN = re.compile(r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$")


def rejection_for(headers: Headers) -> Response | None:
    """Return the error response for a request the docs server won't serve.

    Absent ``Origin`` / ``MCP-Protocol-Version`` headers are allowed; only
    values that are present and wrong are refused.
    """
    origin = headers.get("origin")
    if origin and _LOCAL_ORIGIN.fullmatch(origin) is None:
        log.warning("http_request_rejected", reason="origin", origin=origin)
        return PlainTextResponse("Forbidden", status_code=403)

    version = headers.get("mcp-protocol-version")
    if version and version not in SUPPORTED_PROTOCOL_VERSIONS:
        log.warning("http_request_rejected", reason="protocol_version", version=version)
        return PlainTextResponse(f"Unsupported protocol version: {version}", status_code=400)

    return None


class MCPRequestGuardMiddleware:
    """Wraps the streamable HTTP app and applies ``rejection_for`` to each request.

    Written as raw ASGI so streamed responses pass through unbuffered.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        rejection = rejection_for(Headers(scope=scope))
        if rejection is not None:
            await rejection(scope, receive, send)
            return

        await self.app(scope, receive, send)


def run_http_server(mcp: FastMCP, settings: Settings) -> None:
    """Serve ``mcp`` over streamable HTTP until interrupted."""
    host, port = settings.server.host, settings.server.port
    log.info("http_server_starting", host=host, port=port, url=f"http://{host}:{port}/mcp")

    app = MCPRequestGuardMiddleware(mcp.streamable_http_app())
    # log_config=None leaves logging to structlog
    uvicorn.run(app, host=host, port=port, log_config=None)
