"""Protocol interfaces for swappable components.

Tool handlers and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight in-memory fetchers (e.g. with call counters)
- Other index sources to be swapped in without changing tool code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gptproto_docs.fetcher import FetchedIndex
    from gptproto_docs.models.index import DocsIndex


class IndexFetcherProtocol(Protocol):
    """Interface for the remote index source."""

    async def fetch(self) -> FetchedIndex | None: ...


class IndexStoreProtocol(Protocol):
    """Interface for the component that owns the current index snapshot."""

    async def get_current_index(self) -> DocsIndex: ...

    def get_current_index_nowait(self) -> DocsIndex: ...
