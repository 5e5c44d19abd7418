"""Web search providers returning candidate company websites.

Every provider exposes the same capability: ``search(company)`` returns an
ordered list of :class:`SearchResultItem`. Failures of any kind (network
errors, non-2xx status, malformed payloads) are logged and reported as an
empty list so one misbehaving provider never stops the lookup.

Providers:
1. Google Custom Search - general web search
2. Brave Search - privacy-focused web search
3. Scrapingdog - Google SERP scraping proxy
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

import httpx

from site_finder.models import CompanyInfo, SearchResultItem
from site_finder.services.query_sanitizer import (
    sanitize_address_for_query,
    sanitize_company_name_for_query,
)

logger = logging.getLogger(__name__)

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
SCRAPINGDOG_SEARCH_URL = "https://api.scrapingdog.com/google"

# Keyword appended to every query ("company profile"), steers results to
# corporate pages on Japanese sites
COMPANY_PROFILE_KEYWORD = "会社概要"

SEARCH_TIMEOUT = 30.0

# Google Custom Search rejects num outside 1..10
GOOGLE_MAX_RESULTS = 10


@runtime_checkable
class SearchProvider(Protocol):
    """Anything that can search the web for a company's website."""

    name: str

    async def search(self, company: CompanyInfo) -> list[SearchResultItem]:
        ...


def build_search_query(company: CompanyInfo) -> str:
    """Build the query string shared by all providers.

    Format: ``<sanitized name> 会社概要 [<sanitized address>]``.
    """
    query_parts = [sanitize_company_name_for_query(company.name), COMPANY_PROFILE_KEYWORD]
    if company.address:
        sanitized_address = sanitize_address_for_query(company.address)
        if sanitized_address:
            query_parts.append(sanitized_address)
    return " ".join(query_parts)


class HttpSearchProvider(ABC):
    """Shared HTTP plumbing for JSON search APIs.

    Subclasses implement :meth:`_request` and :meth:`_parse_results`.
    """

    name = "http"

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._http_client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(timeout=SEARCH_TIMEOUT)
            self._owns_client = True
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client and self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
        self._http_client = None

    async def search(self, company: CompanyInfo) -> list[SearchResultItem]:
        """Search for the company's website.

        Args:
            company: Company to look up.

        Returns:
            Result items in provider order; empty on any failure.
        """
        query = build_search_query(company)
        logger.info(f"Searching {self.name} for company websites with query: {query}")

        try:
            client = await self._get_client()
            response = await self._request(client, query)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"{self.name} search request failed with status "
                f"{e.response.status_code}: {e.response.reason_phrase}"
            )
            return []
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            logger.error(f"Failed to execute {self.name} search request: {e}")
            return []

        if not isinstance(payload, dict):
            logger.error(f"{self.name} returned an unexpected payload type: {type(payload).__name__}")
            return []

        try:
            results = self._parse_results(payload)
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Malformed {self.name} search payload: {e}")
            return []

        logger.debug(f"Received {len(results)} {self.name} search results.")
        logger.info(
            f"{self.name} search results: "
            f"{json.dumps([r.model_dump() for r in results], ensure_ascii=False)}"
        )
        return results

    @abstractmethod
    async def _request(self, client: httpx.AsyncClient, query: str) -> httpx.Response:
        """Send the provider-specific search request."""

    @abstractmethod
    def _parse_results(self, payload: dict[str, Any]) -> list[SearchResultItem]:
        """Map the provider's JSON payload to search result items."""


def _build_items(
    entries: Any,
    url_key: str,
    snippet_keys: tuple[str, ...],
) -> list[SearchResultItem]:
    """Map raw result dicts to SearchResultItem, skipping entries without a URL."""
    if not isinstance(entries, list):
        return []

    items: list[SearchResultItem] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        url = entry.get(url_key)
        if not isinstance(url, str) or not url.strip():
            continue

        snippet = None
        for key in snippet_keys:
            value = entry.get(key)
            if isinstance(value, str) and value:
                snippet = value
                break

        title = entry.get("title")
        items.append(SearchResultItem(
            title=title if isinstance(title, str) and title else url,
            url=url,
            snippet=snippet,
        ))
    return items


class GoogleSearchProvider(HttpSearchProvider):
    """Google Custom Search JSON API, restricted to Japanese results."""

    name = "google"

    def __init__(
        self,
        api_key: str,
        search_engine_id: str,
        result_count: int = GOOGLE_MAX_RESULTS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(http_client)
        self.api_key = api_key
        self.search_engine_id = search_engine_id
        self.result_count = max(1, min(result_count, GOOGLE_MAX_RESULTS))

    async def _request(self, client: httpx.AsyncClient, query: str) -> httpx.Response:
        params = {
            "key": self.api_key,
            "cx": self.search_engine_id,
            "q": query,
            "num": self.result_count,
            "hl": "ja",
            "lr": "lang_ja",
            "gl": "jp",
            "filter": "1",
        }
        return await client.get(GOOGLE_SEARCH_URL, params=params)

    def _parse_results(self, payload: dict[str, Any]) -> list[SearchResultItem]:
        return _build_items(payload.get("items", []), "link", ("snippet", "htmlSnippet"))


class BraveSearchProvider(HttpSearchProvider):
    """Brave Search web API."""

    name = "brave"

    def __init__(
        self,
        api_key: str,
        result_count: int = 10,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(http_client)
        self.api_key = api_key
        self.result_count = result_count

    async def _request(self, client: httpx.AsyncClient, query: str) -> httpx.Response:
        return await client.get(
            BRAVE_SEARCH_URL,
            params={"q": query, "count": self.result_count},
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": self.api_key,
            },
        )

    def _parse_results(self, payload: dict[str, Any]) -> list[SearchResultItem]:
        web = payload.get("web") or {}
        return _build_items(web.get("results", []), "url", ("description",))


class ScrapingdogSearchProvider(HttpSearchProvider):
    """Scrapingdog Google SERP proxy."""

    name = "scrapingdog"

    def __init__(
        self,
        api_key: str,
        result_count: int = 10,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(http_client)
        self.api_key = api_key
        self.result_count = result_count

    async def _request(self, client: httpx.AsyncClient, query: str) -> httpx.Response:
        params = {
            "api_key": self.api_key,
            "query": query,
            "gl": "jp",
            "hl": "ja",
            "num": self.result_count,
            "device": "desktop",
        }
        return await client.get(SCRAPINGDOG_SEARCH_URL, params=params)

    def _parse_results(self, payload: dict[str, Any]) -> list[SearchResultItem]:
        return _build_items(payload.get("organic_results", []), "link", ("snippet", "description"))
