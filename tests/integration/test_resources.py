"""Integration tests for the read-only MCP resources."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from gptproto_docs.errors import DocsError, ErrorCode
from gptproto_docs.models.index import DocEntry, DocsIndex
from gptproto_docs.tools.resources import GUIDE_RESOURCES, read_guide, read_index_summary

if TYPE_CHECKING:
    from gptproto_docs.state import AppState

    from .conftest import StaticFetcher


class TestIndexSummaryResource:
    async def test_metadata_without_content(self, app_state: AppState) -> None:
        summary = json.loads(await read_index_summary(app_state))

        assert summary["version"] == "1.0.0"
        assert summary["totalDocs"] == len(summary["entries"])
        assert summary["vendors"] == ["Claude", "Google", "OpenAI"]
        assert all("content" not in entry for entry in summary["entries"])
        assert summary["entries"][0]["path"].startswith("docs/allapi/OpenAI/gpt-4o")
        assert summary["entries"][0]["category"] == "api"


class TestGuideResources:
    @pytest.mark.parametrize(
        ("uri", "expected"),
        [
            ("gptproto://quickstart", "# Quickstart guide"),
            ("gptproto://authentication", "# Authentication guide"),
        ],
    )
    async def test_returns_markdown(self, app_state: AppState, uri: str, expected: str) -> None:
        assert await read_guide(uri, app_state) == expected

    async def test_missing_guide_raises_not_found(
        self, app_state: AppState, fetcher: StaticFetcher
    ) -> None:
        fetcher.index = DocsIndex(entries=[DocEntry(path="quickstart", content="hi")])

        with pytest.raises(DocsError) as exc_info:
            await read_guide("gptproto://authentication", app_state)

        assert exc_info.value.code == ErrorCode.DOCUMENT_NOT_FOUND

    def test_guide_uris(self) -> None:
        assert set(GUIDE_RESOURCES) == {"gptproto://quickstart", "gptproto://authentication"}
