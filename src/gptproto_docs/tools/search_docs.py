"""Tool handler for search_docs.

Receives AppState, loads the current index, ranks entries with the query
engine and returns a structured dict. No MCP or FastMCP imports; server.py
handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from gptproto_docs.errors import DocsError, ErrorCode
from gptproto_docs.models.tools import SearchDocsInput, SearchDocsOutput, SearchResult
from gptproto_docs.query import search

if TYPE_CHECKING:
    from gptproto_docs.models.index import DocEntry
    from gptproto_docs.state import AppState


async def handle(query: str, limit: int | None, state: AppState) -> dict:
    """Handle a search_docs tool call."""
    log = structlog.get_logger().bind(tool="search_docs", query=query)
    log.info("handler_called")

    search_settings = state.settings.search
    try:
        validated = SearchDocsInput(
            query=query,
            limit=search_settings.default_limit if limit is None else limit,
        )
    except ValueError as exc:
        raise DocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a non-empty keyword query (max 500 chars) and a limit of 1-100.",
            recoverable=False,
        ) from exc

    index = await state.index_store.get_current_index()
    entries = search(
        index,
        validated.query,
        limit=min(validated.limit, search_settings.max_limit),
        weights=search_settings.weights,
    )
    log.info("search_complete", result_count=len(entries))

    if not entries:
        output = SearchDocsOutput(
            query=validated.query,
            result_count=0,
            results=[],
            message="No documentation found matching your query.",
            suggestion="Try different keywords or use list_apis to see available APIs.",
        )
    else:
        output = SearchDocsOutput(
            query=validated.query,
            result_count=len(entries),
            results=[_to_result(entry) for entry in entries],
        )
    return output.model_dump(mode="json", exclude_none=True)


def _to_result(entry: DocEntry) -> SearchResult:
    return SearchResult(
        path=entry.path,
        title=entry.title or entry.path.rsplit("/", 1)[-1],
        description=entry.description,
        vendor=entry.vendor,
        model=entry.model,
        capability=entry.capability,
    )
