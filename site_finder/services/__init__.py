"""Services package for Company Site Finder."""

from site_finder.services.page_fetcher import PageFetcher
from site_finder.services.query_sanitizer import (
    sanitize_address_for_query,
    sanitize_company_name_for_query,
)
from site_finder.services.relevance_scorer import RelevanceScorer, heuristic_score
from site_finder.services.search_providers import (
    BraveSearchProvider,
    GoogleSearchProvider,
    ScrapingdogSearchProvider,
    SearchProvider,
    build_search_query,
)
from site_finder.services.url_normalizer import get_domain_url
from site_finder.services.website_finder import (
    CONFIDENCE_THRESHOLD,
    WebsiteFinder,
    find_best_company_url,
)

__all__ = [
    "SearchProvider",
    "GoogleSearchProvider",
    "BraveSearchProvider",
    "ScrapingdogSearchProvider",
    "build_search_query",
    "PageFetcher",
    "RelevanceScorer",
    "heuristic_score",
    "get_domain_url",
    "sanitize_company_name_for_query",
    "sanitize_address_for_query",
    "CONFIDENCE_THRESHOLD",
    "WebsiteFinder",
    "find_best_company_url",
]
