"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools and resources
- Start the correct transport (stdio or HTTP)
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import gptproto_docs.tools.get_doc as t_get_doc
import gptproto_docs.tools.list_apis as t_list_apis
import gptproto_docs.tools.resources as t_resources
import gptproto_docs.tools.search_docs as t_search
from gptproto_docs import __version__
from gptproto_docs.config import Settings
from gptproto_docs.errors import DocsError
from gptproto_docs.fetcher import RemoteIndexFetcher, build_http_client
from gptproto_docs.index_store import IndexStore
from gptproto_docs.state import AppState
from gptproto_docs.transport import run_http_server

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


_WARM_TIMEOUT_MARGIN_SECONDS = 5.0


def _log_index_unavailable_warning() -> None:
    log.warning(
        "index_not_ready_at_startup",
        message=(
            "Documentation index could not be loaded at startup. "
            "Tools will retry on first use. "
            "Suggested next steps: "
            "(1) Check your internet connection. "
            "(2) Verify GPTPROTO_DOCS_INDEX_URL if you overrode it. "
            "(3) Place a docs-index.json at the configured cache path."
        ),
    )


async def _warm_index(state: AppState) -> bool:
    """Load the index once before serving so the first tool call is fast.

    Bounded by the fetch timeout plus a small margin for disk fallback.
    Returns True if an index is in memory afterwards.
    """
    timeout = state.settings.index.timeout_seconds + _WARM_TIMEOUT_MARGIN_SECONDS
    try:
        index = await asyncio.wait_for(state.index_store.get_current_index(), timeout=timeout)
        log.info("index_warm_complete", version=index.version, entries=index.total_docs)
        return True
    except TimeoutError:
        log.warning("index_warm_timeout", timeout=timeout)
    except DocsError as exc:
        log.warning("index_warm_failed", code=exc.code, message=exc.message)

    _log_index_unavailable_warning()
    return False


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info(
        "server_starting",
        version=__version__,
        transport=settings.server.transport,
        index_url=settings.index.url,
    )

    http_client = build_http_client()
    fetcher = RemoteIndexFetcher(
        http_client,
        settings.index.url,
        timeout_seconds=settings.index.timeout_seconds,
    )
    index_store = IndexStore(
        fetcher,
        cache_path=Path(settings.index.cache_path).expanduser(),
        bundled_path=Path(settings.index.bundled_path).expanduser(),
        ttl_seconds=settings.index.ttl_seconds,
    )

    state = AppState(
        settings=settings,
        index_store=index_store,
        http_client=http_client,
    )

    if settings.index.warm_on_startup:
        await _warm_index(state)

    log.info("server_started", version=__version__, transport=settings.server.transport)

    try:
        yield state
    finally:
        if state.http_client is not None:
            await state.http_client.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance, tool and resource registration
# ---------------------------------------------------------------------------

mcp = FastMCP("gptproto-docs", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg; set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: DocsError) -> CallToolResult:
    """Convert a DocsError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


async def _run_tool(tool: str, call: Awaitable[dict]) -> object:
    try:
        return await call
    except DocsError as exc:
        log.warning(
            "tool_error",
            tool=tool,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=tool, exc_info=True)
        raise


@mcp.tool()
async def search_docs(query: str, ctx: Context, limit: int = 20) -> object:
    """Search GPTProto API documentation by keyword.

    Matches model names, vendors, titles, capabilities and descriptions
    (e.g. 'gpt-4o image', 'claude text', 'gemini video'). Returns document
    paths to pass to get_doc.
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("search_docs", t_search.handle(query, limit, state))


@mcp.tool()
async def get_doc(path: str, ctx: Context) -> object:
    """Fetch the full content of a documentation page by its path from search_docs."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("get_doc", t_get_doc.handle(path, state))


@mcp.tool()
async def list_apis(ctx: Context, vendor: str | None = None) -> object:
    """List available APIs, optionally filtered by vendor (e.g. 'OpenAI', 'Google', 'Claude').

    Without a vendor, returns every vendor with a count of its models.
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("list_apis", t_list_apis.handle(vendor, state))


def _resource_state() -> AppState:
    return mcp.get_context().request_context.lifespan_context


@mcp.resource(
    "gptproto://docs-index",
    name="GPTProto Docs Index",
    description="Complete index of all GPTProto API documentation (metadata only)",
    mime_type="application/json",
)
async def docs_index_resource() -> str:
    return await t_resources.read_index_summary(_resource_state())


@mcp.resource(
    "gptproto://quickstart",
    name="GPTProto Quickstart",
    description="Quick start guide for GPTProto API",
    mime_type="text/markdown",
)
async def quickstart_resource() -> str:
    return await t_resources.read_guide("gptproto://quickstart", _resource_state())


@mcp.resource(
    "gptproto://authentication",
    name="GPTProto Authentication",
    description="Authentication guide for GPTProto API",
    mime_type="text/markdown",
)
async def authentication_resource() -> str:
    return await t_resources.read_guide("gptproto://authentication", _resource_state())


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()

    if settings.server.transport == "http":
        _setup_logging(settings)
        run_http_server(mcp, settings)
        return

    mcp.run()


if __name__ == "__main__":
    main()
