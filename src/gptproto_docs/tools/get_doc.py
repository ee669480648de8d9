"""Tool handler for get_doc."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from gptproto_docs.errors import DocsError, ErrorCode
from gptproto_docs.models.tools import GetDocInput, GetDocOutput
from gptproto_docs.query import get_by_path

if TYPE_CHECKING:
    from gptproto_docs.state import AppState

DOCS_SITE_URL = "https://docs.gptproto.com"


def public_url(path: str) -> str:
    """Map an index path to its page on the public docs site."""
    return f"{DOCS_SITE_URL}/{path.removeprefix('docs/')}"


async def handle(path: str, state: AppState) -> dict:
    """Handle a get_doc tool call."""
    log = structlog.get_logger().bind(tool="get_doc", path=path)
    log.info("handler_called")

    try:
        validated = GetDocInput(path=path)
    except ValueError as exc:
        raise DocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a document path exactly as returned by search_docs.",
            recoverable=False,
        ) from exc

    index = await state.index_store.get_current_index()
    entry = get_by_path(index, validated.path)
    log.info("document_found", content_length=len(entry.content))

    output = GetDocOutput(
        path=entry.path,
        title=entry.title or entry.path.rsplit("/", 1)[-1],
        vendor=entry.vendor,
        model=entry.model,
        url=public_url(entry.path),
        content=entry.content,
    )
    return output.model_dump(mode="json")
