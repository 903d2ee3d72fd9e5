"""HTTP fetcher for raw document content, via httpx."""

from __future__ import annotations

import logging

import httpx

from mdxsync.config.models import FetchConfig
from mdxsync.errors import FetchError

logger = logging.getLogger(__name__)


class HttpFetcher:
    """Single-attempt text fetcher. Use as an async context manager."""

    def __init__(self, config: FetchConfig, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> HttpFetcher:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                follow_redirects=self.config.follow_redirects,
                headers={"User-Agent": self.config.user_agent},
            )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_text(self, url: str) -> str:
        """GET url and return its body as text. Raises FetchError on any failure."""
        if self._client is None:
            raise RuntimeError("HttpFetcher used outside 'async with'")
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(url, e, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise FetchError(url, e) from e
        logger.debug("fetched %s (%d bytes)", url, len(resp.content))
        return resp.text
