"""
Discussion Search Node (Google Dorks)

For the top variations x top platforms, runs ``site:<platform> "<variation>"``
through the SERP API, scores every hit and keeps the relevant ones.

Searches run one at a time with a fixed delay before each request to stay
under the RapidAPI rate limit. A failing search is logged and skipped.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ....config import serp_request_delay
from ....constants import (
    B2B_PLATFORMS,
    B2C_PLATFORMS,
    DEFAULT_SEARCH_MAX_RESULTS,
    MAX_PLATFORMS_SEARCHED,
    MAX_VARIATIONS_SEARCHED,
    MIN_RELEVANCE_SCORE,
    PIPELINE_MAX_DISCUSSIONS,
    SERP_RESULTS_PER_QUERY,
)
from ....schemas.research_schema import DiscussionResult, ProblemVariation
from ....services.errors import SearchAPIError
from ....services.serp_client import search_with_google_dorks, serp_configured
from ..scoring import (
    build_google_dork,
    calculate_advanced_score,
    estimate_engagement,
    extract_profile_name,
    generate_profile_url,
)
from ..state import ResearchState
from ..timing import StepTimer, timed_node

logger = logging.getLogger(__name__)


async def search_discussions_with_dorks(
    variations: List[ProblemVariation],
    is_b2b: bool = True,
    max_results: int = DEFAULT_SEARCH_MAX_RESULTS,
    errors: Optional[List[str]] = None,
) -> List[DiscussionResult]:
    """
    Search public discussions for each variation on each platform.

    Results below MIN_RELEVANCE_SCORE are dropped. Collection stops once
    *max_results* hits are gathered; the list is sorted by relevance and
    truncated to *max_results*. Search failures are appended to *errors*.
    """
    if errors is None:
        errors = []

    if not serp_configured():
        logger.warning("[RESEARCH] RAPIDAPI_KEY not set, skipping discussion search")
        errors.append("Discussions: RAPIDAPI_KEY not set")
        return []

    platforms = B2B_PLATFORMS if is_b2b else B2C_PLATFORMS
    delay = serp_request_delay()
    timer = StepTimer("discussions")
    results: List[DiscussionResult] = []

    for variation in variations[:MAX_VARIATIONS_SEARCHED]:
        for platform in platforms[:MAX_PLATFORMS_SEARCHED]:
            query = build_google_dork(platform, variation.text)

            if delay > 0:
                await asyncio.sleep(delay)

            try:
                async with timer.async_step(f"serp:{platform}"):
                    serp = await search_with_google_dorks(query, SERP_RESULTS_PER_QUERY)
            except SearchAPIError as e:
                logger.warning("[RESEARCH] Error searching %s: %s", platform, e)
                errors.append(f"Discussions ({platform}): {e}")
                continue

            for hit in serp.results:
                score = calculate_advanced_score(f"{hit.description} {hit.title}", variation.text, platform)
                if score < MIN_RELEVANCE_SCORE:
                    continue

                profile_name = extract_profile_name(hit.url, hit.title, platform)
                results.append(
                    DiscussionResult(
                        platform=platform,
                        title=hit.title,
                        url=hit.url,
                        content=hit.description,
                        author=profile_name,
                        engagement=estimate_engagement(hit),
                        relevance_score=score,
                        profile_url=generate_profile_url(hit.url, platform),
                        profile_name=profile_name,
                    )
                )

            if len(results) >= max_results:
                break
        if len(results) >= max_results:
            break

    timer.summary()
    results.sort(key=lambda d: d.relevance_score, reverse=True)
    return results[:max_results]


@timed_node("discussions")
async def search_discussions(state: ResearchState) -> Dict[str, Any]:
    processing_errors = list(state.get("processing_errors", []))
    variations = state.get("variations") or []

    print("🔎 [RESEARCH] Searching discussions with Google Dorks...")
    discussions = await search_discussions_with_dorks(
        variations,
        is_b2b=state.get("is_b2b", True),
        max_results=state.get("max_results") or PIPELINE_MAX_DISCUSSIONS,
        errors=processing_errors,
    )

    print(f"🔎 [RESEARCH] {len(discussions)} relevant discussions")
    return {"discussions": discussions, "processing_errors": processing_errors}
