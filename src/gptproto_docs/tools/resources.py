"""Handlers for the read-only MCP resources.

``gptproto://docs-index`` exposes index metadata without document bodies;
the guide resources expose a single document's markdown.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from gptproto_docs.query import get_by_path

if TYPE_CHECKING:
    from gptproto_docs.state import AppState

# resource URI → index path of the document it serves
GUIDE_RESOURCES: dict[str, str] = {
    "gptproto://quickstart": "quickstart",
    "gptproto://authentication": "authentication",
}


async def read_index_summary(state: AppState) -> str:
    index = await state.index_store.get_current_index()
    summary = index.model_dump(
        mode="json",
        by_alias=True,
        exclude={"entries": {"__all__": {"content"}}},
    )
    return json.dumps(summary, indent=2)


async def read_guide(uri: str, state: AppState) -> str:
    """Return the markdown of the document behind a guide resource URI."""
    index = await state.index_store.get_current_index()
    return get_by_path(index, GUIDE_RESOURCES[uri]).content
