"""Page fetcher for candidate websites."""

import logging

import httpx

logger = logging.getLogger(__name__)

# Timeout for page requests (seconds)
FETCH_TIMEOUT = 15.0

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    "Accept": "text/html,application/xhtml+xml",
}


class PageFetcher:
    """Fetches raw page bodies, returning an empty string on any failure."""

    def __init__(
        self,
        timeout: float = FETCH_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "PageFetcher":
        await self._get_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=DEFAULT_HEADERS,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def fetch(self, url: str) -> str:
        """
        Fetch the body of a page.

        Args:
            url: Page URL

        Returns:
            Response text, or "" for non-HTTP URLs, non-2xx status,
            network errors and timeouts
        """
        if not url.lower().startswith(("http://", "https://")):
            logger.warning(f"Skipping fetch for non-HTTP URL: {url}")
            return ""

        try:
            client = await self._get_client()
            response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Error fetching content for {url}: {e!r}")
            return ""

        if not response.is_success:
            logger.warning(
                f"Failed to fetch page content for {url}. Status: {response.status_code}"
            )
            return ""

        return response.text
