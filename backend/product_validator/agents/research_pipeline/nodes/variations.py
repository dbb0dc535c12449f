"""
Problem Variations Node

Asks the fast-tier model for ~20 rephrasings of the user's problem. These are
the seeds of the Google Dork queries run by the next node. Falls back to three
deterministic variations when no LLM is configured or the call fails.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ....constants import VARIATION_TYPES
from ....schemas.research_schema import ProblemVariation
from ....services.errors import LLMError, LLMResponseError
from ....services.llm_router import complete_json
from ....services.mock_data import fallback_variations
from ..prompts import VARIATIONS_SYSTEM_INSTRUCTION, build_variations_prompt
from ..state import ResearchState
from ..timing import timed_node

logger = logging.getLogger(__name__)


def _parse_variations(raw: Any) -> List[ProblemVariation]:
    """Keep items with non-empty text; unknown types become ``statement``."""
    if not isinstance(raw, list):
        return []

    variations: List[ProblemVariation] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        text = str(item.get("text") or "").strip()
        if not text:
            continue
        kind = item.get("type")
        variations.append(
            ProblemVariation(
                text=text,
                reasoning=str(item.get("reasoning") or ""),
                type=kind if kind in VARIATION_TYPES else "statement",
            )
        )
    return variations


async def request_problem_variations(problem: str) -> List[ProblemVariation]:
    """LLM call only. Raises LLMError when nothing usable comes back."""
    data = await complete_json(
        build_variations_prompt(problem),
        system=VARIATIONS_SYSTEM_INSTRUCTION,
        tier="fast",
        max_tokens=2000,
        temperature=0.8,
    )
    variations = _parse_variations(data.get("variations"))
    if not variations:
        raise LLMResponseError("LLM returned no usable variations")
    return variations


async def _variations_or_fallback(problem: str) -> Tuple[List[ProblemVariation], Optional[LLMError]]:
    """Model variations, or the deterministic ones plus the error that forced them."""
    try:
        return await request_problem_variations(problem), None
    except LLMError as e:
        logger.warning("[RESEARCH] Variations fallback: %s", e)
        return fallback_variations(problem), e


async def generate_problem_variations(problem: str) -> List[ProblemVariation]:
    variations, _ = await _variations_or_fallback(problem)
    return variations


@timed_node("variations")
async def generate_variations(state: ResearchState) -> Dict[str, Any]:
    problem = state.get("problem", "")
    processing_errors = list(state.get("processing_errors", []))

    print("📝 [RESEARCH] Generating problem variations...")
    variations, error = await _variations_or_fallback(problem)
    if error is not None:
        processing_errors.append(f"Variations: {error}")

    print(f"📝 [RESEARCH] {len(variations)} variations")
    return {"variations": variations, "processing_errors": processing_errors}
