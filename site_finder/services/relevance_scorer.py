"""LLM-based relevance scoring of candidate company websites.

The scorer uses the OpenAI Python SDK configured to talk to OpenRouter's
OpenAI-compatible API. Whatever the model returns, :meth:`RelevanceScorer.score`
yields exactly one :class:`ScoredUrl` per input page; when the model call
fails or its output cannot be parsed, a deterministic heuristic is used.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from bs4 import BeautifulSoup
from openai import AsyncOpenAI

from site_finder.config import DEFAULT_OPENROUTER_BASE_URL, DEFAULT_SCORER_MODEL
from site_finder.models import CompanyInfo, PageContent, ScoredUrl

logger = logging.getLogger(__name__)

CONTENT_PREVIEW_LENGTH = 1000

HEURISTIC_BASE_SCORE = 0.2
HEURISTIC_URL_NAME_BONUS = 0.5
HEURISTIC_SNIPPET_NAME_BONUS = 0.2
HEURISTIC_ADDRESS_BONUS = 0.1

HEURISTIC_REASON = "Heuristic fallback score due to scoring failure."
UNSCORED_REASON = "URL not scored by model."

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_WHITESPACE_RE = re.compile(r"\s+")
_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$", re.IGNORECASE)


def heuristic_score(company: CompanyInfo, pages: list[PageContent]) -> list[ScoredUrl]:
    """Score pages without the model.

    Starts at 0.2 and adds 0.5 when the URL contains the company name
    (lower-cased, non-alphanumerics removed), 0.2 when the snippet mentions
    the name, and 0.1 when the page content contains the address. Capped at 1.0.
    """
    normalized_name = _NON_ALNUM_RE.sub("", company.name.lower())
    name_lower = company.name.lower()
    address_lower = company.address.lower() if company.address else ""

    scored: list[ScoredUrl] = []
    for page in pages:
        score = HEURISTIC_BASE_SCORE
        if normalized_name in page.url.lower():
            score += HEURISTIC_URL_NAME_BONUS
        if page.snippet and name_lower in page.snippet.lower():
            score += HEURISTIC_SNIPPET_NAME_BONUS
        if address_lower and address_lower in page.content.lower():
            score += HEURISTIC_ADDRESS_BONUS
        scored.append(ScoredUrl(url=page.url, score=min(1.0, round(score, 10)), reason=HEURISTIC_REASON))
    return scored


class RelevanceScorer:
    """Scores candidate pages for how likely they are a company's official site."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_SCORER_MODEL,
        base_url: str = DEFAULT_OPENROUTER_BASE_URL,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.model = model
        self.base_url = base_url
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Check if the API key is configured."""
        return bool(self.api_key) or self._client is not None

    def _get_client(self) -> AsyncOpenAI:
        """Get or create SDK client."""
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    async def close(self) -> None:
        """Close SDK client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def score(self, company: CompanyInfo, pages: list[PageContent]) -> list[ScoredUrl]:
        """Score every candidate page.

        Args:
            company: Company being looked up.
            pages: Candidate pages with fetched content (content may be empty).

        Returns:
            One ScoredUrl per input page, in input order. Never raises for
            model or parsing failures; the heuristic is used instead.
        """
        if not pages:
            return []

        prompt = self._build_prompt(company, pages)
        content_text = await self._chat_completion(prompt)
        if not content_text:
            logger.warning("Model returned no usable response. Falling back to heuristic scoring.")
            return heuristic_score(company, pages)

        try:
            parsed = self._parse_response(content_text)
            if parsed is not None:
                return self._align_with_pages(parsed, pages)
        except Exception as e:
            logger.warning(f"Error parsing model response: {e!r}")

        logger.warning("Model response could not be parsed. Falling back to heuristic scoring.")
        return heuristic_score(company, pages)

    async def _chat_completion(self, prompt: str) -> str | None:
        if not self.is_configured:
            logger.warning("OpenRouter API key not configured")
            return None

        try:
            client = self._get_client()
            resp = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,
            )
        except Exception as e:
            logger.error(f"Failed to score URLs with {self.model}: {e}")
            return None

        usage = getattr(resp, "usage", None)
        if usage is not None:
            logger.info(
                f"Scorer token usage - prompt: {usage.prompt_tokens}, "
                f"completion: {usage.completion_tokens}, total: {usage.total_tokens}"
            )
        else:
            logger.info("Scorer token usage was not provided in the response.")

        if not resp.choices:
            return None
        return (resp.choices[0].message.content or "").strip()

    def _build_prompt(self, company: CompanyInfo, pages: list[PageContent]) -> str:
        """Build the scoring prompt listing every candidate page."""
        page_summaries = "\n---\n".join(
            f"URL: {page.url}\n"
            f"Title: {page.title}\n"
            f"Snippet: {page.snippet or 'N/A'}\n"
            f"Content Preview: {self._content_preview(page.content)}"
            for page in pages
        )
        address = company.address or "Not provided"
        description = company.description or "Not provided"

        return f'''You are evaluating candidate company websites. Return ONLY a raw JSON object (no markdown, no code blocks, no backticks).

The JSON must have a single property "urls" that is an array of objects with this exact shape:
{{"url": string, "score": number between 0 and 1, "reason": string}}

Company name: {company.name}
Address: {address}
Description: {description}

Candidate pages:
{page_summaries}

Base the score on how well the page seems to represent the official website for the company. Higher is better.
Always return scores for every provided URL, using the URL exactly as given. Return ONLY the JSON object, nothing else.'''

    def _content_preview(self, content: str) -> str:
        """Visible text of a page, truncated for the prompt."""
        if not content:
            return ""
        text = content
        if "<" in content:
            soup = BeautifulSoup(content, "html.parser")
            for tag in soup(["script", "style", "noscript"]):
                tag.decompose()
            text = soup.get_text(separator=" ", strip=True) or content
        return _WHITESPACE_RE.sub(" ", text).strip()[:CONTENT_PREVIEW_LENGTH]

    def _extract_json(self, text: str) -> str:
        """Extract JSON from response, handling markdown code blocks."""
        text = text.strip()
        match = _CODE_FENCE_RE.match(text)
        if match:
            text = match.group(1)
        return text.strip()

    def _parse_response(self, text: str) -> list[ScoredUrl] | None:
        """Parse ``{"urls": [...]}`` into ScoredUrl entries.

        Entries without a string url or a finite numeric score are dropped. Returns
        None when the text is not a JSON object with a ``urls`` list.
        """
        try:
            data = json.loads(self._extract_json(text))
        except json.JSONDecodeError as e:
            logger.warning(f"Unable to parse model response as JSON: {e}")
            return None

        if not isinstance(data, dict) or not isinstance(data.get("urls"), list):
            return None

        entries: list[ScoredUrl] = []
        for entry in data["urls"]:
            if not self._is_valid_entry(entry):
                continue
            reason = entry.get("reason")
            entries.append(ScoredUrl(
                url=entry["url"],
                score=entry["score"],
                reason=reason if isinstance(reason, str) else None,
            ))
        return entries

    def _is_valid_entry(self, entry: Any) -> bool:
        if not isinstance(entry, dict):
            return False
        score = entry.get("score")
        if not isinstance(entry.get("url"), str):
            return False
        if not isinstance(score, (int, float)) or isinstance(score, bool):
            return False
        try:
            return math.isfinite(score)
        except OverflowError:
            return False

    def _align_with_pages(self, parsed: list[ScoredUrl], pages: list[PageContent]) -> list[ScoredUrl]:
        """Return exactly one entry per input page.

        The model's entry is matched by exact URL, then by URL without a
        trailing slash. Pages the model skipped get score 0.
        """
        exact: dict[str, ScoredUrl] = {}
        loose: dict[str, ScoredUrl] = {}
        for entry in parsed:
            exact.setdefault(entry.url, entry)
            loose.setdefault(entry.url.rstrip("/"), entry)

        scored: list[ScoredUrl] = []
        for page in pages:
            match = exact.get(page.url) or loose.get(page.url.rstrip("/"))
            if match is None:
                scored.append(ScoredUrl(url=page.url, score=0.0, reason=UNSCORED_REASON))
            else:
                scored.append(ScoredUrl(url=page.url, score=match.score, reason=match.reason))
        return scored
