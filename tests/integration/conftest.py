"""Integration test fixtures.

Provides a fully wired AppState backed by a real IndexStore whose remote
source is an in-memory fetcher. Index fixtures come from tests/conftest.py
(sample_entries, docs_index).
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from gptproto_docs.config import Settings
from gptproto_docs.fetcher import FetchedIndex
from gptproto_docs.index_store import IndexStore
from gptproto_docs.state import AppState

if TYPE_CHECKING:
    from pathlib import Path

    from gptproto_docs.models.index import DocsIndex


class StaticFetcher:
    def __init__(self, index: DocsIndex | None) -> None:
        self.index = index
        self.calls = 0

    async def fetch(self) -> FetchedIndex | None:
        self.calls += 1
        if self.index is None:
            return None
        payload = self.index.model_dump_json(by_alias=True).encode("utf-8")
        return FetchedIndex(index=self.index, payload=payload)


@pytest.fixture()
def fetcher(docs_index: DocsIndex) -> StaticFetcher:
    return StaticFetcher(docs_index)


@pytest.fixture()
def app_state(tmp_path: Path, fetcher: StaticFetcher) -> AppState:
    """AppState wired with a real IndexStore and isolated cache paths."""
    store = IndexStore(
        fetcher,
        cache_path=tmp_path / "cache" / "docs-index.json",
        bundled_path=tmp_path / "bundled" / "docs-index.json",
    )
    return AppState(settings=Settings(), index_store=store)


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Forces stdio transport, points the remote index at an unroutable URL and
    isolates both disk sources in a tmp directory.
    """
    env = os.environ.copy()
    env["GPTPROTO_DOCS__SERVER__TRANSPORT"] = "stdio"
    env["GPTPROTO_DOCS__INDEX__URL"] = "http://127.0.0.1:1/docs-index.json"
    env["GPTPROTO_DOCS__INDEX__CACHE_PATH"] = str(tmp_path / "cache" / "docs-index.json")
    env["GPTPROTO_DOCS__INDEX__BUNDLED_PATH"] = str(tmp_path / "missing.json")
    env["GPTPROTO_DOCS__INDEX__WARM_ON_STARTUP"] = "false"
    env["GPTPROTO_DOCS__INDEX__TIMEOUT_SECONDS"] = "1"
    return env
