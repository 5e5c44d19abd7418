"""Pydantic models for Company Site Finder.

All models are transient: they are created, consumed, and discarded within
a single website lookup.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CompanyInfo(BaseModel):
    """Company whose official website is being looked up.

    Attributes:
        name: Company name as given by the caller.
        address: Optional postal address, used to narrow search queries.
        description: Optional free-text description passed to the scorer.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Company name")
    address: str | None = None
    description: str | None = None


class SearchResultItem(BaseModel):
    """A single result returned by a search provider."""

    title: str
    url: str
    snippet: str | None = None


class PageContent(SearchResultItem):
    """Search result together with the fetched page body.

    An empty ``content`` means the page could not be fetched; the item is
    still a valid candidate.
    """

    content: str = ""


class ScoredUrl(BaseModel):
    """Relevance score for a candidate URL.

    Attributes:
        url: Candidate URL (canonical origin once chosen by the pipeline).
        score: Relevance in [0, 1]; out-of-range values are clamped.
        reason: Short rationale from the scorer.
    """

    url: str
    score: float = Field(..., ge=0.0, le=1.0)
    reason: str | None = None

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        """Clamp numeric scores into [0, 1]."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            try:
                return min(1.0, max(0.0, float(v)))
            except OverflowError:
                return 1.0 if v > 0 else 0.0
        return v


class PipelineOutcome(BaseModel):
    """Best candidate across all providers with its provenance."""

    result: ScoredUrl
    provider: str
