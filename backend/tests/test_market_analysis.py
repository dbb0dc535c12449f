"""Market analysis agent: research + LLM merge, mock fallbacks, ICP helpers."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
from unittest.mock import AsyncMock, patch

from product_validator.agents.market_analysis_agent.agent import generate_market_analysis
from product_validator.agents.market_analysis_agent.icp_builder import (
    build_icps_from_insights,
    detect_b2b,
    relevance_out_of_ten,
    to_dashboard_discussion,
)
from product_validator.constants import B2B_CHANNELS, B2C_CHANNELS
from product_validator.schemas.conversation_schema import ConversationContext
from product_validator.schemas.research_schema import DiscussionResult, ResearchInsights, ResearchResult
from product_validator.services.errors import LLMResponseError

AGENT = "product_validator.agents.market_analysis_agent.agent"

CONTEXT = ConversationContext(
    stage="ready_for_analysis",
    message_count=3,
    product_idea="An app that automates invoice reminders",
    target_audience="Small business owners",
    problem_description="Clients pay invoices late",
)


def _discussion(score: int = 85) -> DiscussionResult:
    return DiscussionResult(
        platform="reddit.com",
        title="Clients never pay on time",
        url="https://reddit.com/u/owner1/comments/1",
        content="Frustrated with late invoices",
        author="owner1",
        engagement="40 likes, 12 comments",
        relevance_score=score,
        profile_url="https://reddit.com/u/owner1",
        profile_name="owner1",
    )


def _research(discussions=None, segments=None) -> ResearchResult:
    return ResearchResult(
        variations=[],
        discussions=discussions or [],
        insights=ResearchInsights(
            overview="Late payments hurt cash flow",
            pain_points=["Late payments", "Awkward follow-ups"],
            segments=segments or [],
            sentiment="negative",
        ),
    )


LLM_ANALYSIS = {
    "icps": [
        {"title": "Agency owners", "description": "Run small agencies", "painPoints": ["Cash flow"], "channels": ["LinkedIn"]},
        {"description": "missing a title"},
    ],
    "discussions": [
        {"platform": "Reddit", "title": "Invoices are a nightmare", "url": "https://reddit.com/x", "relevance": 75},
    ],
    "inboundContent": [
        {"type": "LinkedIn Post", "platform": "LinkedIn", "content": "How do you chase invoices?", "cta": "Comment"},
    ],
    "outreachMessages": [
        {"type": "LinkedIn DM", "platform": "LinkedIn", "message": "Hi {firstName}", "personalization": ["{firstName}"]},
    ],
    "hypothesis": "Small business owners will pay to stop chasing invoices.",
}


class TestIcpBuilder:
    def test_detect_b2b(self):
        assert detect_b2b("Small business owners", "")
        assert detect_b2b("Teams", "An enterprise SaaS problem")
        assert not detect_b2b("Parents", "Kids don't sleep")
        assert not detect_b2b(None, None)

    def test_relevance_rounds_half_up(self):
        assert relevance_out_of_ten(85) == 9
        assert relevance_out_of_ten(84) == 8
        assert relevance_out_of_ten(100) == 10
        assert relevance_out_of_ten(0) == 0

    def test_icps_from_insights(self):
        insights = ResearchInsights(
            pain_points=["Late payments", "Manual follow-ups"],
            segments=["Freelancers", "Agencies", "Consultants"],
        )
        icps = build_icps_from_insights(insights, is_b2b=False)

        assert [icp.title for icp in icps] == ["Freelancers", "Agencies", "Consultants"]
        assert icps[0].description == "Freelancers experiencing Late payments"
        assert icps[2].description == "Consultants experiencing the core problem"
        assert icps[1].pain_points == ["Manual follow-ups"]
        assert icps[0].channels == B2C_CHANNELS

    def test_dashboard_discussion(self):
        discussion = to_dashboard_discussion(_discussion(72))
        assert discussion.relevance == 7
        assert discussion.profile_name == "owner1"
        assert discussion.model_dump(by_alias=True)["profileUrl"] == "https://reddit.com/u/owner1"


class TestGenerateMarketAnalysis:
    def test_mock_mode_merges_research_icps(self):
        analysis = asyncio.run(generate_market_analysis(CONTEXT))

        # fallback insights segments become ICPs, mock discussions are kept
        assert [icp.title for icp in analysis.icps] == ["Early adopters", "Professional users", "Casual users"]
        assert analysis.icps[0].channels == B2B_CHANNELS
        assert len(analysis.discussions) == 2
        assert len(analysis.inbound_content) == 1
        assert len(analysis.outreach_messages) == 1
        assert analysis.hypothesis.startswith("Small business owners experience significant pain")

    def test_llm_analysis_with_real_discussions(self):
        with (
            patch(f"{AGENT}.run_complete_research_pipeline", new=AsyncMock(return_value=_research([_discussion()]))),
            patch(f"{AGENT}.complete_json", new=AsyncMock(return_value=LLM_ANALYSIS)) as llm,
        ):
            analysis = asyncio.run(generate_market_analysis(CONTEXT))

        assert [icp.title for icp in analysis.icps] == ["Agency owners"]
        assert len(analysis.discussions) == 1
        assert analysis.discussions[0].title == "Clients never pay on time"
        assert analysis.discussions[0].relevance == 9
        assert analysis.inbound_content[0].content == "How do you chase invoices?"
        assert analysis.outreach_messages[0].personalization == ["{firstName}"]
        assert analysis.hypothesis == "Small business owners will pay to stop chasing invoices."
        assert llm.await_args.kwargs["tier"] == "balanced"

    def test_generated_discussions_used_without_research_hits(self):
        with (
            patch(f"{AGENT}.run_complete_research_pipeline", new=AsyncMock(return_value=_research())),
            patch(f"{AGENT}.complete_json", new=AsyncMock(return_value=LLM_ANALYSIS)),
        ):
            analysis = asyncio.run(generate_market_analysis(CONTEXT))

        assert analysis.discussions[0].title == "Invoices are a nightmare"
        assert analysis.discussions[0].relevance == 8

    def test_insight_segments_win_over_generated_icps(self):
        research = _research(segments=["Freelancers"])
        with (
            patch(f"{AGENT}.run_complete_research_pipeline", new=AsyncMock(return_value=research)),
            patch(f"{AGENT}.complete_json", new=AsyncMock(return_value=LLM_ANALYSIS)),
        ):
            analysis = asyncio.run(generate_market_analysis(CONTEXT))

        assert [icp.title for icp in analysis.icps] == ["Freelancers"]

    def test_missing_hypothesis_uses_default(self):
        payload = dict(LLM_ANALYSIS, hypothesis="  ")
        with (
            patch(f"{AGENT}.run_complete_research_pipeline", new=AsyncMock(return_value=_research())),
            patch(f"{AGENT}.complete_json", new=AsyncMock(return_value=payload)),
        ):
            analysis = asyncio.run(generate_market_analysis(CONTEXT))

        assert "would be willing to try An app that automates invoice reminders" in analysis.hypothesis

    def test_unparseable_llm_answer_merges_mock(self):
        with (
            patch(f"{AGENT}.run_complete_research_pipeline", new=AsyncMock(return_value=_research([_discussion()]))),
            patch(f"{AGENT}.complete_json", new=AsyncMock(side_effect=LLMResponseError("bad json"))),
        ):
            analysis = asyncio.run(generate_market_analysis(CONTEXT))

        assert analysis.discussions[0].title == "Clients never pay on time"
        assert analysis.icps[0].title == "Early Adopter Segment"
        assert len(analysis.inbound_content) == 1

    def test_unexpected_failure_returns_mock(self):
        with patch(f"{AGENT}.run_complete_research_pipeline", new=AsyncMock(side_effect=RuntimeError("boom"))):
            analysis = asyncio.run(generate_market_analysis(CONTEXT))

        assert [icp.title for icp in analysis.icps] == ["Early Adopter Segment", "Professional Users"]
        assert analysis.discussions[0].profile_name == "Sarah Chen"
