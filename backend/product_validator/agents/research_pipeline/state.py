from typing import Optional, TypedDict

from ...schemas.research_schema import DiscussionResult, ProblemVariation, ResearchInsights


class ResearchState(TypedDict):
    # Inputs
    problem: str
    target_audience: str
    is_b2b: bool
    max_results: int

    # Stage outputs (each node fills one)
    variations: list[ProblemVariation]
    discussions: list[DiscussionResult]
    insights: Optional[ResearchInsights]

    # Metadata
    processing_errors: list[str]  # Track any errors during processing
