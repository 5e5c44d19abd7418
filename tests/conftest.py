"""Pytest fixtures for Company Site Finder tests.

This module provides shared fixtures for building pipelines with mocked
providers, fetchers and scorers, plus common test data.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from site_finder.models import CompanyInfo, ScoredUrl, SearchResultItem


@pytest.fixture
def acme_company():
    """Company with name and address.

    Returns:
        CompanyInfo: Acme Corp at 123 Street.
    """
    return CompanyInfo(name="Acme Corp", address="123 Street")


@pytest.fixture
def acme_results():
    """Two search results for Acme Corp.

    Returns:
        list[SearchResultItem]: Official site first, partner portal second.
    """
    return [
        SearchResultItem(
            title="Acme Corp - Official",
            url="https://www.acme.com/about/company",
            snippet="Official website for Acme Corp",
        ),
        SearchResultItem(
            title="Acme Partners",
            url="https://partners.acme.com/portal",
            snippet="Partners portal",
        ),
    ]


@pytest.fixture
def make_provider():
    """Factory for mocked search providers.

    Returns:
        Callable: ``make_provider(name, results=None, side_effect=None)``.
    """
    def _make(name, results=None, side_effect=None):
        provider = MagicMock()
        provider.name = name
        provider.search = AsyncMock(return_value=results or [], side_effect=side_effect)
        provider.close = AsyncMock()
        return provider

    return _make


@pytest.fixture
def fetcher():
    """Mocked page fetcher returning a fixed body for every URL."""
    mock = MagicMock()
    mock.fetch = AsyncMock(
        return_value="Sample content mentioning Acme Corp and address 123 Street"
    )
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def make_scorer():
    """Factory for mocked scorers driven by a url -> score mapping.

    URLs missing from the mapping score 0.
    """
    def _make(scores):
        async def _score(company, pages):
            return [
                ScoredUrl(url=page.url, score=scores.get(page.url, 0.0), reason="test")
                for page in pages
            ]

        scorer = MagicMock()
        scorer.score = AsyncMock(side_effect=_score)
        scorer.close = AsyncMock()
        return scorer

    return _make
