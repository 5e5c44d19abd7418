"""Multi-provider search, fetch and ranking pipeline for company websites.

Providers are queried one at a time in a fixed priority order:
1. Each provider's results are fetched concurrently and scored together
2. The provider's top candidate is reduced to its canonical origin
3. The best candidate across providers is tracked (earlier providers win ties)
4. A candidate scoring above the confidence threshold ends the lookup early

Failures in search, fetch or scoring never propagate; they only reduce the
number of candidates. A lookup with no candidates returns None.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pydantic import ValidationError

from site_finder.config import AppConfig, DEFAULT_CONFIDENCE_THRESHOLD, load_config
from site_finder.models import (
    CompanyInfo,
    PageContent,
    PipelineOutcome,
    ScoredUrl,
    SearchResultItem,
)
from site_finder.services.page_fetcher import PageFetcher
from site_finder.services.relevance_scorer import RelevanceScorer
from site_finder.services.search_providers import (
    BraveSearchProvider,
    GoogleSearchProvider,
    ScrapingdogSearchProvider,
    SearchProvider,
)
from site_finder.services.url_normalizer import get_domain_url

logger = logging.getLogger(__name__)

# Score above which a provider's best candidate is accepted without
# consulting the remaining providers
CONFIDENCE_THRESHOLD = DEFAULT_CONFIDENCE_THRESHOLD

SearchFn = Callable[[CompanyInfo], Awaitable[Any]]


class WebsiteFinder:
    """Finds the most plausible official website for a company.

    Attributes:
        providers: Search providers in priority order.
        fetcher: Page fetcher used for every candidate URL.
        scorer: Relevance scorer for fetched candidates.
        confidence_threshold: Early-stop threshold (strictly greater than).
    """

    def __init__(
        self,
        providers: Sequence[SearchProvider],
        fetcher: PageFetcher,
        scorer: RelevanceScorer,
        confidence_threshold: float = CONFIDENCE_THRESHOLD,
    ) -> None:
        self.providers: tuple[SearchProvider, ...] = tuple(providers)
        self.fetcher = fetcher
        self.scorer = scorer
        self.confidence_threshold = confidence_threshold

    @classmethod
    def from_config(cls, config: AppConfig) -> "WebsiteFinder":
        """Build a finder with the providers enabled in ``config``, in order."""
        available: dict[str, Callable[[], SearchProvider]] = {
            "google": lambda: GoogleSearchProvider(
                api_key=config.google_api_key,
                search_engine_id=config.google_search_engine_id,
                result_count=config.google_search_result_count,
            ),
            "brave": lambda: BraveSearchProvider(
                api_key=config.brave_api_key,
                result_count=config.brave_search_result_count,
            ),
            "scrapingdog": lambda: ScrapingdogSearchProvider(
                api_key=config.scrapingdog_api_key,
                result_count=config.scrapingdog_search_result_count,
            ),
        }
        return cls(
            providers=[available[name]() for name in config.providers],
            fetcher=PageFetcher(timeout=config.fetch_timeout),
            scorer=RelevanceScorer(
                api_key=config.openrouter_api_key,
                model=config.scorer_model,
                base_url=config.openrouter_base_url,
            ),
            confidence_threshold=config.confidence_threshold,
        )

    async def __aenter__(self) -> "WebsiteFinder":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close all provider, fetcher and scorer clients."""
        for provider in self.providers:
            close = getattr(provider, "close", None)
            if close is not None:
                await close()
        await self.fetcher.close()
        await self.scorer.close()

    async def find_best_url(self, company: CompanyInfo) -> ScoredUrl | None:
        """Find the best website for a company.

        Args:
            company: Company to look up; name must be non-empty.

        Returns:
            Best ScoredUrl with its url in canonical origin form, or None
            when no provider yielded a scorable candidate.
        """
        outcome = await self.find_best(company)
        return outcome.result if outcome else None

    async def find_best(self, company: CompanyInfo) -> PipelineOutcome | None:
        """Like :meth:`find_best_url`, but also reports which provider won."""
        logger.info(f"Starting website lookup for {company.name}")

        best: ScoredUrl | None = None
        best_provider: str | None = None

        for provider in self.providers:
            candidate = await self.evaluate(provider.name, provider.search, company)
            if candidate is None:
                continue

            if best is None or candidate.score > best.score:
                best = candidate
                best_provider = provider.name

            if candidate.score > self.confidence_threshold:
                logger.info(
                    f"{provider.name} candidate {candidate.url} scored {candidate.score:.2f}, "
                    f"above threshold {self.confidence_threshold:.2f}; skipping remaining providers."
                )
                break

            logger.info(
                f"Best {provider.name} score is {candidate.score:.2f} "
                f"({self.confidence_threshold:.2f} or below). Trying next provider."
            )

        if best is None or best_provider is None:
            logger.warning("No suitable website found after checking all providers.")
            return None

        logger.info(
            f"Best URL for {company.name}: {best.url} "
            f"(score={best.score:.2f}, provider={best_provider})"
        )
        return PipelineOutcome(result=best, provider=best_provider)

    async def evaluate(
        self,
        provider_name: str,
        search_fn: SearchFn,
        company: CompanyInfo,
    ) -> ScoredUrl | None:
        """Search with one provider, fetch and score its results.

        Args:
            provider_name: Provider name used in log messages.
            search_fn: Coroutine function returning search result items.
            company: Company being looked up.

        Returns:
            The provider's top ScoredUrl rewritten to its canonical origin,
            or None if the provider produced nothing scorable.
        """
        results = await self._run_search(provider_name, search_fn, company)
        if not results:
            logger.warning(f"{provider_name} search returned no results.")
            return None

        pages = await self._fetch_pages(results)

        scored = await self.scorer.score(company, pages)
        if not scored:
            logger.warning(f"{provider_name} search results could not be scored.")
            return None

        # max() keeps the first item on ties, so list order breaks them
        top = max(scored, key=lambda s: s.score)
        return top.model_copy(update={"url": get_domain_url(top.url)})

    async def _run_search(
        self,
        provider_name: str,
        search_fn: SearchFn,
        company: CompanyInfo,
    ) -> list[SearchResultItem]:
        """Call a provider, treating errors and non-list results as no results."""
        try:
            raw_results = await search_fn(company)
        except Exception as e:
            logger.error(f"{provider_name} search failed: {e}")
            return []

        if not isinstance(raw_results, list):
            logger.warning(
                f"{provider_name} search returned {type(raw_results).__name__}, expected a list."
            )
            return []

        results: list[SearchResultItem] = []
        for item in raw_results:
            if isinstance(item, dict):
                try:
                    item = SearchResultItem.model_validate(item)
                except ValidationError:
                    pass
            if isinstance(item, SearchResultItem) and item.url.strip():
                results.append(item)
            else:
                logger.debug(f"Dropping {provider_name} result without a usable URL: {item!r}")
        return results

    async def _fetch_pages(self, results: list[SearchResultItem]) -> list[PageContent]:
        """Fetch every result concurrently; a failed fetch leaves content empty."""
        contents = await asyncio.gather(
            *(self.fetcher.fetch(result.url) for result in results),
            return_exceptions=True,
        )

        pages: list[PageContent] = []
        for result, content in zip(results, contents):
            if isinstance(content, Exception):
                logger.warning(f"Error fetching content for {result.url}: {content!r}")
                content = ""
            elif isinstance(content, BaseException):
                raise content
            pages.append(PageContent(
                title=result.title,
                url=result.url,
                snippet=result.snippet,
                content=content or "",
            ))
        return pages


async def find_best_company_url(
    company: CompanyInfo,
    config: AppConfig | None = None,
) -> ScoredUrl | None:
    """
    Convenience function to find a company's website from configuration.

    Args:
        company: Company to look up
        config: Settings to use; read from the environment when omitted

    Returns:
        Best ScoredUrl or None
    """
    async with WebsiteFinder.from_config(config or load_config()) as finder:
        return await finder.find_best_url(company)
