"""
Research Insights Node

Summarises the discussions found into overview, pain points, segments,
opportunities, sentiment and key insights (balanced tier).
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ....constants import INSIGHT_SENTIMENTS
from ....schemas.research_schema import DiscussionResult, ResearchInsights
from ....services.errors import LLMError, LLMResponseError
from ....services.llm_router import complete_json
from ....services.mock_data import fallback_insights
from ..prompts import build_insights_prompt
from ..state import ResearchState
from ..timing import timed_node

logger = logging.getLogger(__name__)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def _parse_insights(data: Dict[str, Any]) -> ResearchInsights:
    sentiment = str(data.get("sentiment") or "").strip().lower()
    try:
        return ResearchInsights(
            overview=str(data.get("overview") or ""),
            pain_points=_string_list(data.get("painPoints", data.get("pain_points"))),
            segments=_string_list(data.get("segments")),
            opportunities=_string_list(data.get("opportunities")),
            sentiment=sentiment if sentiment in INSIGHT_SENTIMENTS else "neutral",
            key_insights=_string_list(data.get("keyInsights", data.get("key_insights"))),
        )
    except ValidationError as e:
        raise LLMResponseError(f"Insights did not match the expected shape: {e}") from e


async def request_research_insights(discussions: List[DiscussionResult], problem: str) -> ResearchInsights:
    """LLM call only. Raises LLMError on failure."""
    data = await complete_json(
        build_insights_prompt(discussions, problem),
        tier="balanced",
        max_tokens=1500,
        temperature=0.7,
    )
    return _parse_insights(data)


async def _insights_or_fallback(
    discussions: List[DiscussionResult], problem: str
) -> Tuple[ResearchInsights, Optional[LLMError]]:
    try:
        return await request_research_insights(discussions, problem), None
    except LLMError as e:
        logger.warning("[RESEARCH] Insights fallback: %s", e)
        return fallback_insights(), e


async def generate_research_insights(discussions: List[DiscussionResult], problem: str) -> ResearchInsights:
    insights, _ = await _insights_or_fallback(discussions, problem)
    return insights


@timed_node("insights")
async def generate_insights(state: ResearchState) -> Dict[str, Any]:
    processing_errors = list(state.get("processing_errors", []))
    discussions = state.get("discussions") or []
    problem = state.get("problem", "")

    print("🧠 [RESEARCH] Generating research insights...")
    insights, error = await _insights_or_fallback(discussions, problem)
    if error is not None:
        processing_errors.append(f"Insights: {error}")

    return {"insights": insights, "processing_errors": processing_errors}
