"""Unit tests for the startup index warm-up in server.py."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

from gptproto_docs.config import Settings
from gptproto_docs.errors import DocsError, ErrorCode
from gptproto_docs.models.index import DocsIndex
from gptproto_docs.server import _warm_index
from gptproto_docs.state import AppState


class _Store:
    def __init__(self, behaviour) -> None:
        self._behaviour = behaviour
        self.calls = 0

    async def get_current_index(self) -> DocsIndex:
        self.calls += 1
        return await self._behaviour()

    def get_current_index_nowait(self) -> DocsIndex:
        raise NotImplementedError


def _make_state(store: _Store, timeout_seconds: float = 10.0) -> AppState:
    settings = Settings(index={"timeout_seconds": timeout_seconds})
    return AppState(settings=settings, index_store=store)


class TestWarmIndex:
    async def test_success(self) -> None:
        async def ok() -> DocsIndex:
            return DocsIndex(version="1.0.0")

        store = _Store(ok)
        mock_warning = MagicMock()

        with patch("gptproto_docs.server._log_index_unavailable_warning", mock_warning):
            result = await _warm_index(_make_state(store))

        assert result is True
        assert store.calls == 1
        mock_warning.assert_not_called()

    async def test_index_unavailable_is_not_fatal(self) -> None:
        async def unavailable() -> DocsIndex:
            raise DocsError(
                code=ErrorCode.INDEX_UNAVAILABLE,
                message="nothing",
                suggestion="",
            )

        mock_warning = MagicMock()
        with patch("gptproto_docs.server._log_index_unavailable_warning", mock_warning):
            result = await _warm_index(_make_state(_Store(unavailable)))

        assert result is False
        mock_warning.assert_called_once()

    async def test_timeout_is_not_fatal(self) -> None:
        async def slow() -> DocsIndex:
            await asyncio.sleep(60)
            return DocsIndex()

        mock_warning = MagicMock()
        with (
            patch("gptproto_docs.server._log_index_unavailable_warning", mock_warning),
            patch("gptproto_docs.server._WARM_TIMEOUT_MARGIN_SECONDS", 0.0),
        ):
            result = await _warm_index(_make_state(_Store(slow), timeout_seconds=0.01))

        assert result is False
        mock_warning.assert_called_once()

    async def test_warning_message_content(self) -> None:
        """Verify the warning lists the actionable next steps."""

        async def unavailable() -> DocsIndex:
            raise DocsError(code=ErrorCode.INDEX_UNAVAILABLE, message="x", suggestion="")

        captured_calls: list[dict] = []

        def capture_warning(event: str, **kwargs: object) -> None:
            captured_calls.append({"event": event, **kwargs})

        with patch("gptproto_docs.server.log") as mock_log:
            mock_log.warning = capture_warning
            mock_log.info = lambda *a, **kw: None
            await _warm_index(_make_state(_Store(unavailable)))

        warning_calls = [c for c in captured_calls if c["event"] == "index_not_ready_at_startup"]
        assert len(warning_calls) == 1

        message = warning_calls[0]["message"]
        assert "Check your internet connection" in message
        assert "GPTPROTO_DOCS_INDEX_URL" in message
        assert "cache path" in message
