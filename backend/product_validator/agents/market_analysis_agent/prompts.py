from __future__ import annotations

import json

from ...schemas.conversation_schema import ConversationContext
from ...schemas.research_schema import ResearchInsights

ANALYSIS_SYSTEM_PROMPT = (
    "You are a market research expert. Generate realistic, actionable market analysis "
    "data in JSON format for user research and validation purposes."
)


def build_analysis_prompt(
    context: ConversationContext,
    target_audience: str,
    problem: str,
    insights: ResearchInsights,
) -> str:
    resources = ", ".join(context.resources or []) or "None provided"
    insights_json = json.dumps(insights.model_dump(by_alias=True), ensure_ascii=False)

    return f"""\
Based on the following product information, generate a comprehensive market analysis for user research and validation:

Product Idea: {context.product_idea or "Not specified"}
Target Audience: {target_audience}
Problem Description: {problem}
Resources: {resources}
Research Insights: {insights_json}

Generate a JSON response with:
1. "icps": Array of 2-3 detailed ICPs with title, description, painPoints array, and channels array
2. "discussions": Array of 4-5 realistic discussions from LinkedIn/Reddit/Quora with platform, title, url, engagement, relevance (1-10), profileUrl, profileName
3. "inboundContent": Array of 4-5 pieces of content for user research (LinkedIn posts, Twitter polls, newsletter content, landing page copy) with type, platform, content, cta
4. "outreachMessages": Array of 3-4 outreach templates for user research (LinkedIn DM, Reddit comment, cold email) with type, platform, message, personalization array
5. "hypothesis": Clear hypothesis statement for validation

Focus on USER RESEARCH and VALIDATION content, not sales. The goal is to validate the problem and solution fit.
Use the research insights to make the content more targeted and relevant.

Return ONLY valid JSON, no additional text."""
