"""Index acquisition with in-memory caching and layered fallback.

Source priority for ``get_current_index``:
  1. In-memory snapshot, if younger than the freshness window
  2. Remote fetch (persisted to the per-user cache file on success)
  3. Per-user cache file, then the bundled snapshot shipped in the package

Only the terminal "no source produced an index" case raises. Every other
failure is logged and falls through to the next source.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

import structlog

from gptproto_docs.disk import load_index_file, save_index_to_disk
from gptproto_docs.errors import DocsError, ErrorCode

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from gptproto_docs.models.index import DocsIndex
    from gptproto_docs.protocols import IndexFetcherProtocol

log = structlog.get_logger()

DEFAULT_TTL_SECONDS = 60 * 60

IndexSource = Literal["remote", "disk_cache", "bundled"]


@dataclass(frozen=True)
class IndexSnapshot:
    """The current index plus where and when it was obtained.

    Replaced wholesale on every refresh, never mutated.
    """

    index: DocsIndex
    source: IndexSource
    obtained_at: float  # Store clock reading, used for freshness checks; -inf when adopted stale
    loaded_at: datetime  # Wall-clock time, for reporting only


class IndexStore:
    """Owns the process-wide index snapshot."""

    def __init__(
        self,
        fetcher: IndexFetcherProtocol,
        *,
        cache_path: Path,
        bundled_path: Path | None = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._cache_path = cache_path
        self._bundled_path = bundled_path
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: IndexSnapshot | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def snapshot(self) -> IndexSnapshot | None:
        return self._snapshot

    def is_fresh(self) -> bool:
        return self._fresh_snapshot() is not None

    def _fresh_snapshot(self) -> IndexSnapshot | None:
        snapshot = self._snapshot
        if snapshot is not None and self._clock() - snapshot.obtained_at < self._ttl_seconds:
            return snapshot
        return None

    async def get_current_index(self) -> DocsIndex:
        """Return the current index, refreshing it when the snapshot is stale.

        Concurrent callers that find the snapshot stale queue on a lock; the
        first one refreshes and the rest reuse its result.
        """
        snapshot = self._fresh_snapshot()
        if snapshot is not None:
            return snapshot.index

        async with self._refresh_lock:
            snapshot = self._fresh_snapshot()
            if snapshot is not None:
                return snapshot.index
            return await self._refresh()

    def get_current_index_nowait(self) -> DocsIndex:
        """Return whatever index is available without network I/O.

        Uses the in-memory snapshot regardless of age, otherwise the disk
        sources. Raises INDEX_UNAVAILABLE when neither has anything.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot.index

        loaded = self._load_from_disk()
        if loaded is None:
            raise DocsError(
                code=ErrorCode.INDEX_UNAVAILABLE,
                message="Documentation index not loaded yet and no local copy is available.",
                suggestion="Call any documentation tool first so the index can be fetched.",
                recoverable=True,
            )
        index, source = loaded
        # Adopted as already stale so the next async call still tries the network
        return self._adopt(index, source, fresh=False)

    async def _refresh(self) -> DocsIndex:
        fetched = await self._fetcher.fetch()
        if fetched is not None:
            # Persist failures never fail the fetch
            if not save_index_to_disk(fetched.payload, self._cache_path):
                log.info("index_cache_write_skipped", path=str(self._cache_path))
            return self._adopt(fetched.index, "remote")

        loaded = self._load_from_disk()
        if loaded is not None:
            index, source = loaded
            log.warning("index_using_fallback", source=source, version=index.version)
            return self._adopt(index, source)

        log.error(
            "index_unavailable",
            cache_path=str(self._cache_path),
            bundled_path=str(self._bundled_path) if self._bundled_path else None,
        )
        raise DocsError(
            code=ErrorCode.INDEX_UNAVAILABLE,
            message="Documentation index not available from the network or local cache.",
            suggestion=(
                "Check your network connection, or rebuild the local index and "
                "place it at the cache path."
            ),
            recoverable=True,
        )

    def _load_from_disk(self) -> tuple[DocsIndex, IndexSource] | None:
        index = load_index_file(self._cache_path, source="disk_cache")
        if index is not None:
            return index, "disk_cache"

        if self._bundled_path is not None:
            index = load_index_file(self._bundled_path, source="bundled")
            if index is not None:
                return index, "bundled"

        return None

    def _adopt(self, index: DocsIndex, source: IndexSource, *, fresh: bool = True) -> DocsIndex:
        # Single reference swap keeps (index, timestamp) consistent for readers
        self._snapshot = IndexSnapshot(
            index=index,
            source=source,
            obtained_at=self._clock() if fresh else float("-inf"),
            loaded_at=datetime.now(UTC),
        )
        return index
