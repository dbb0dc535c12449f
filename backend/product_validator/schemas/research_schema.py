from typing import Literal, Optional

from pydantic import BaseModel, Field

from .analysis_schema import CamelModel


class ProblemVariation(BaseModel):
    """One rephrasing of the user's problem, used as a search seed."""

    text: str = Field(..., min_length=1)
    reasoning: str = ""
    type: Literal["question", "statement", "pain_point"] = "statement"


class SerpResult(BaseModel):
    """A single organic result returned by the SERP API."""

    title: str = ""
    url: str = ""
    description: str = ""
    position: int = 0


class SerpResponse(BaseModel):
    results: list[SerpResult] = Field(default_factory=list)
    related_keywords: Optional[list[str]] = None


class DiscussionResult(CamelModel):
    """A scored search hit; relevance_score is on a 0-100 scale."""

    platform: str
    title: str
    url: str
    content: str = ""
    author: str = ""
    engagement: str = ""
    relevance_score: int = Field(..., ge=0, le=100)
    profile_url: str = ""
    profile_name: str = ""


class ResearchInsights(CamelModel):
    """LLM summary of the discussions found by the pipeline."""

    overview: str = ""
    pain_points: list[str] = Field(default_factory=list)
    segments: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    sentiment: Literal["negative", "positive", "neutral"] = "neutral"
    key_insights: list[str] = Field(default_factory=list)


class ResearchResult(CamelModel):
    variations: list[ProblemVariation] = Field(default_factory=list)
    discussions: list[DiscussionResult] = Field(default_factory=list)
    insights: ResearchInsights
    processing_errors: list[str] = Field(default_factory=list)


class ResearchRequest(CamelModel):
    """Request body for the research endpoint."""

    problem: Optional[str] = Field(
        default=None,
        description="Problem statement to research",
        examples=["Freelancers waste hours chasing unpaid invoices"],
    )
    target_audience: Optional[str] = None
    is_b2b: Optional[bool] = Field(default=None, alias="isB2B")
    max_results: int = Field(default=20, ge=1, le=50)
