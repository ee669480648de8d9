"""Tool handler for list_apis."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from gptproto_docs.errors import DocsError, ErrorCode
from gptproto_docs.models.tools import ListApisInput, ListApisOutput
from gptproto_docs.query import list_by_vendor

if TYPE_CHECKING:
    from gptproto_docs.state import AppState


async def handle(vendor: str | None, state: AppState) -> dict:
    """Handle a list_apis tool call."""
    log = structlog.get_logger().bind(tool="list_apis", vendor=vendor)
    log.info("handler_called")

    try:
        validated = ListApisInput(vendor=vendor)
    except ValueError as exc:
        raise DocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a vendor name such as 'OpenAI' (max 100 chars), or omit it.",
            recoverable=False,
        ) from exc

    index = await state.index_store.get_current_index()
    listing = list_by_vendor(index, validated.vendor)
    log.info("list_complete", api_count=len(listing.apis))

    output = ListApisOutput(
        vendor=validated.vendor or "all",
        vendors=listing.vendors,
        apis=listing.apis,
    )
    return output.model_dump(mode="json")
