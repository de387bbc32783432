"""HTTP document fetcher adapter.

Implements the core DocumentFetcherPort with a shared httpx AsyncClient and
the BeautifulSoup fragment parser.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from adapters.match_fragment import parse_document
from core.models import MatchRecord, RefreshResult

LOGGER = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """Raised when a match document cannot be retrieved."""


class HttpDocumentFetcher:
    """Fetch match pages over HTTP and extract the tracked match from them."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, match: MatchRecord) -> Optional[RefreshResult]:
        if not match.source_url:
            return None
        try:
            response = await self._client.get(match.source_url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise FetchError(f"timeout fetching {match.source_url}") from exc
        except httpx.HTTPStatusError as exc:
            raise FetchError(f"HTTP {exc.response.status_code} for {match.source_url}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"error fetching {match.source_url}: {exc}") from exc

        LOGGER.debug("Fetched %s bytes for %s", len(response.content), match.id)
        # bs4 parsing runs in a worker thread.
        return await asyncio.to_thread(parse_document, response.text, match)
