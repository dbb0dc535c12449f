"""Deterministic helpers turning research output into dashboard records."""

from __future__ import annotations

import math
from typing import Optional

from ...constants import B2B_AUDIENCE_MARKERS, B2B_CHANNELS, B2B_PROBLEM_MARKERS, B2C_CHANNELS
from ...schemas.analysis_schema import ICP, Discussion
from ...schemas.research_schema import DiscussionResult, ResearchInsights


def detect_b2b(target_audience: Optional[str], problem: Optional[str]) -> bool:
    """True when the audience or the problem reads like a business market."""
    target = (target_audience or "").lower()
    problem_text = (problem or "").lower()
    return any(marker in target for marker in B2B_AUDIENCE_MARKERS) or any(
        marker in problem_text for marker in B2B_PROBLEM_MARKERS
    )


def build_icps_from_insights(insights: ResearchInsights, is_b2b: bool) -> list[ICP]:
    """One ICP per research segment, paired with the pain point at the same index."""
    channels = B2B_CHANNELS if is_b2b else B2C_CHANNELS
    pain_points = insights.pain_points

    icps = []
    for index, segment in enumerate(insights.segments):
        pain = pain_points[index] if index < len(pain_points) else "the core problem"
        icps.append(
            ICP(
                title=segment,
                description=f"{segment} experiencing {pain}",
                pain_points=pain_points[index:index + 3],
                channels=list(channels),
            )
        )
    return icps


def relevance_out_of_ten(score: int) -> int:
    """0-100 score to the dashboard's 0-10 scale, rounding halves up."""
    return max(0, min(10, math.floor(score / 10 + 0.5)))


def to_dashboard_discussion(result: DiscussionResult) -> Discussion:
    return Discussion(
        platform=result.platform,
        title=result.title,
        url=result.url,
        engagement=result.engagement,
        relevance=relevance_out_of_ten(result.relevance_score),
        profile_url=result.profile_url,
        profile_name=result.profile_name,
    )
