"""Market Analysis Agent: research pipeline + one LLM call -> dashboard data.

Entry point: generate_market_analysis(context) -> MarketAnalysis

Flow:
  1. Derive problem / audience / B2B flag from the conversation context
  2. Run the research pipeline (variations -> dork search -> insights)
  3. Ask the LLM for ICPs, discussions, inbound content, outreach, hypothesis
  4. Real discussions and insight-based ICPs win over generated ones

If the LLM answer is unusable (or no provider is configured) the mock
analysis is merged with the real research data. Any other failure returns
the mock analysis. Never raises.
"""

from __future__ import annotations

import logging
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ...schemas.analysis_schema import ICP, Discussion, InboundContent, MarketAnalysis, OutreachMessage
from ...schemas.conversation_schema import ConversationContext
from ...services.errors import LLMNotConfiguredError, LLMResponseError
from ...services.llm_router import complete_json
from ...services.mock_data import default_hypothesis, mock_market_analysis
from ..research_pipeline import run_complete_research_pipeline
from .icp_builder import build_icps_from_insights, detect_b2b, relevance_out_of_ten, to_dashboard_discussion
from .prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt

logger = logging.getLogger(__name__)

_ANALYSIS_MAX_TOKENS = 3000

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_items(raw: Any, model: Type[ModelT]) -> list[ModelT]:
    """Validate each list item on its own; malformed items are dropped."""
    if not isinstance(raw, list):
        return []
    items = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            items.append(model.model_validate(entry))
        except ValidationError as e:
            logger.warning("[ANALYSIS] Dropping malformed %s: %s", model.__name__, e)
    return items


def _normalise_discussions(raw: Any) -> list[dict]:
    # Generated discussions sometimes use a 0-100 relevance scale.
    normalised = []
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, dict):
            continue
        entry = dict(entry)
        try:
            relevance = float(entry.get("relevance", 0))
        except (TypeError, ValueError):
            relevance = 0
        if relevance > 10:
            relevance = relevance_out_of_ten(int(relevance))
        entry["relevance"] = max(0, min(10, int(relevance)))
        normalised.append(entry)
    return normalised


async def generate_market_analysis(context: ConversationContext) -> MarketAnalysis:
    try:
        problem = context.problem_description or context.product_idea or "Product validation challenge"
        target = context.target_audience or "General users"
        is_b2b = detect_b2b(target, problem)

        print(f"📊 [ANALYSIS] Starting market analysis (b2b={is_b2b})")
        research = await run_complete_research_pipeline(problem, target, is_b2b)

        real_discussions = [to_dashboard_discussion(d) for d in research.discussions]
        insight_icps = build_icps_from_insights(research.insights, is_b2b)

        try:
            generated = await complete_json(
                build_analysis_prompt(context, target, problem, research.insights),
                system=ANALYSIS_SYSTEM_PROMPT,
                tier="balanced",
                max_tokens=_ANALYSIS_MAX_TOKENS,
                temperature=0.7,
            )
        except (LLMResponseError, LLMNotConfiguredError) as e:
            logger.warning("[ANALYSIS] Using mock analysis merged with research data: %s", e)
            mock = mock_market_analysis(context)
            return mock.model_copy(
                update={
                    "icps": insight_icps or mock.icps,
                    "discussions": real_discussions or mock.discussions,
                }
            )

        ai_icps = _parse_items(generated.get("icps"), ICP)
        ai_discussions = _parse_items(_normalise_discussions(generated.get("discussions")), Discussion)

        analysis = MarketAnalysis(
            icps=insight_icps or ai_icps,
            discussions=real_discussions or ai_discussions,
            inbound_content=_parse_items(generated.get("inboundContent"), InboundContent),
            outreach_messages=_parse_items(generated.get("outreachMessages"), OutreachMessage),
            hypothesis=str(generated.get("hypothesis") or "").strip() or default_hypothesis(context),
        )
        print(
            f"📊 [ANALYSIS] Done: {len(analysis.icps)} ICPs, {len(analysis.discussions)} discussions, "
            f"{len(analysis.inbound_content)} inbound, {len(analysis.outreach_messages)} outreach"
        )
        return analysis

    except Exception:
        logger.exception("Analysis generation failed, returning mock analysis")
        return mock_market_analysis(context)
