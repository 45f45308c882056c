"""Evidence retrieval via the Google Custom Search JSON API.

Every failure is swallowed here: missing credentials, HTTP errors, transport
errors and malformed payloads all come back as an empty list, which the
pipeline reports as "no results".
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from core.models import CandidateSource

LOGGER = logging.getLogger(__name__)


def _field(item: dict, name: str) -> str:
    value = item.get(name)
    return value if isinstance(value, str) else ""


def normalize_items(data: Any) -> list[CandidateSource]:
    """Map a provider payload onto CandidateSource, defaulting missing fields."""

    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list):
        return []
    return [
        CandidateSource(
            title=_field(item, "title"),
            link=_field(item, "link"),
            snippet=_field(item, "snippet"),
        )
        for item in items
        if isinstance(item, dict)
    ]


class GoogleSearchClient:
    """Search adapter enabled only when both key and engine id are configured."""

    BASE_URL = "https://www.googleapis.com/customsearch/v1"
    MAX_RESULTS = 10

    def __init__(
        self,
        api_key: Optional[str],
        cse_id: Optional[str],
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._cse_id = cse_id
        self._client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._owns_client = http_client is None

    def enabled(self) -> bool:
        return bool(self._api_key and self._cse_id)

    async def search(self, query: str, num_results: int = 10) -> list[CandidateSource]:
        """Return up to ``num_results`` (max 10) provider-ranked sources."""

        if not self.enabled():
            LOGGER.warning("Google Search API not configured: GOOGLE_SEARCH_API_KEY and GOOGLE_CSE_ID required")
            return []

        params = {
            "key": self._api_key,
            "cx": self._cse_id,
            "q": query,
            "num": max(1, min(int(num_results), self.MAX_RESULTS)),
        }
        try:
            response = await self._client.get(self.BASE_URL, params=params)
            if not response.is_success:
                LOGGER.warning("Google Search API error: HTTP %s", response.status_code)
                return []
            sources = normalize_items(response.json())
        except Exception as exc:
            LOGGER.warning("Google Search failed: %s", exc)
            return []

        LOGGER.info("Google Search returned %s result(s)", len(sources))
        return sources

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
