"""Remote index fetcher.

Downloads docs-index.json over HTTP. The fetcher receives an httpx.AsyncClient
via constructor injection; the lifespan owns the client lifecycle. Every
failure (network error, timeout, non-2xx status, malformed body) is logged and
reported as ``None`` so the IndexStore can fall through to disk sources.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx
import structlog
from pydantic import ValidationError

from gptproto_docs import __version__
from gptproto_docs.disk import parse_index
from gptproto_docs.models.index import DocsIndex

log = structlog.get_logger()

DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class FetchedIndex:
    """A validated remote index together with the exact bytes received."""

    index: DocsIndex
    payload: bytes


def build_http_client() -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(DEFAULT_FETCH_TIMEOUT_SECONDS),
        headers={"User-Agent": f"gptproto-docs/{__version__}"},
        limits=httpx.Limits(
            max_connections=5,
            max_keepalive_connections=2,
        ),
    )


class RemoteIndexFetcher:
    """Fetches and validates the index from a single configured URL."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client
        self.url = url
        self._timeout_seconds = timeout_seconds

    async def fetch(self) -> FetchedIndex | None:
        """Download and parse the index. Returns None on any failure."""
        try:
            # httpx timeouts apply per phase; asyncio.timeout bounds the whole request
            async with asyncio.timeout(self._timeout_seconds):
                response = await self._client.get(
                    self.url,
                    headers={"Accept": "application/json"},
                    timeout=self._timeout_seconds,
                )
        except TimeoutError:
            log.warning(
                "index_fetch_failed",
                reason="timeout",
                url=self.url,
                timeout=self._timeout_seconds,
            )
            return None
        except httpx.InvalidURL as exc:
            # Not an HTTPError subclass; raised for a malformed configured URL
            log.warning(
                "index_fetch_failed",
                reason="invalid_url",
                url=self.url,
                error=str(exc),
            )
            return None
        except httpx.HTTPError as exc:
            log.warning(
                "index_fetch_failed",
                reason="network_error",
                url=self.url,
                error=str(exc),
            )
            return None

        if not response.is_success:
            log.warning(
                "index_fetch_failed",
                reason="http_status",
                url=self.url,
                status_code=response.status_code,
            )
            return None

        try:
            index = parse_index(response.content)
        except ValidationError:
            log.warning(
                "index_fetch_failed",
                reason="invalid_body",
                url=self.url,
                exc_info=True,
            )
            return None

        log.info(
            "index_fetched",
            url=self.url,
            version=index.version,
            entries=index.total_docs,
        )
        return FetchedIndex(index=index, payload=response.content)
