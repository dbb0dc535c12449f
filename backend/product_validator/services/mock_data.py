"""Deterministic stand-ins served when an external API is unavailable.

Every builder returns fresh objects so callers may mutate the result.
"""

from __future__ import annotations

import re
import zlib
from typing import Optional

from ..schemas.analysis_schema import ICP, Discussion, InboundContent, MarketAnalysis, OutreachMessage
from ..schemas.conversation_schema import ConversationContext
from ..schemas.enrichment_schema import EnrichedContact, Prospect
from ..schemas.research_schema import ProblemVariation, ResearchInsights
from ..schemas.validator_schema import (
    ContactInfo,
    ValidateResponse,
    ValidationDiscussion,
    ValidationInsights,
    ValidationPerson,
)


# ── Research pipeline ────────────────────────────────────────────────────

def fallback_variations(problem: str) -> list[ProblemVariation]:
    """The problem itself plus two question forms; a blank problem yields only the questions."""
    lowered = problem.lower()
    original = []
    if problem.strip():
        original.append(ProblemVariation(text=problem, reasoning="Original problem statement", type="statement"))
    return original + [
        ProblemVariation(
            text=f"How to solve {lowered}",
            reasoning="Question format for user searches",
            type="question",
        ),
        ProblemVariation(
            text=f"Why is {lowered} a problem",
            reasoning="Understanding the root cause",
            type="question",
        ),
    ]


def fallback_insights() -> ResearchInsights:
    return ResearchInsights(
        overview="Analysis of user discussions reveals common patterns and pain points related to the problem.",
        pain_points=["Current solutions are inadequate", "Process is time-consuming", "Lack of proper tools"],
        segments=["Early adopters", "Professional users", "Casual users"],
        opportunities=["Streamline the process", "Provide better tools"],
        sentiment="negative",
        key_insights=["Users are actively seeking solutions", "Market demand exists", "Competition is limited"],
    )


# ── Market analysis ──────────────────────────────────────────────────────

def default_hypothesis(context: ConversationContext) -> str:
    return (
        f"{context.target_audience or 'Target users'} experience significant pain with "
        f"{context.problem_description or 'the current problem'} and would be willing to try "
        f"{context.product_idea or 'a new solution'} if it addresses their core needs effectively."
    )


def mock_market_analysis(context: ConversationContext) -> MarketAnalysis:
    return MarketAnalysis(
        icps=[
            ICP(
                title="Early Adopter Segment",
                description="Tech-savvy users experiencing the core problem you're solving",
                pain_points=[
                    "Struggling with current solutions",
                    "Actively seeking alternatives",
                    "Willing to try new approaches",
                ],
                channels=["LinkedIn", "Reddit", "Twitter", "Industry Forums"],
            ),
            ICP(
                title="Professional Users",
                description="Business professionals who need this solution for work",
                pain_points=[
                    "Current tools are inefficient",
                    "Need better workflow integration",
                    "Looking for time-saving solutions",
                ],
                channels=["LinkedIn", "Slack Communities", "Industry Events"],
            ),
        ],
        discussions=[
            Discussion(
                platform="LinkedIn",
                title="Anyone else frustrated with current solutions for this problem?",
                url="https://linkedin.com/posts/example-post",
                engagement="45 comments, 120 likes",
                relevance=8,
                profile_url="https://linkedin.com/in/potential-user",
                profile_name="Sarah Chen",
            ),
            Discussion(
                platform="Reddit",
                title="What tools do you use for [related problem]?",
                url="https://reddit.com/r/productivity/comments/example",
                engagement="67 upvotes, 34 comments",
                relevance=9,
                profile_url="https://reddit.com/user/productivityguru",
                profile_name="ProductivityGuru",
            ),
        ],
        inbound_content=[
            InboundContent(
                type="LinkedIn Post",
                platform="LinkedIn",
                content=(
                    "I'm researching a problem a lot of us run into...\n\n"
                    "How do you currently handle [specific problem]? What's your biggest frustration?\n\n"
                    "I'm building something to fix it and would love your take! 👇"
                ),
                cta="Comment with your experience",
            )
        ],
        outreach_messages=[
            OutreachMessage(
                type="LinkedIn Comment",
                platform="LinkedIn",
                message=(
                    "Great point about {specificPain}! I'm researching this exact problem right now. "
                    "I'd love to hear more about your experience. Mind if I DM you a few quick questions?"
                ),
                personalization=["{specificPain}", "{firstName}"],
            )
        ],
        hypothesis=default_hypothesis(context),
    )


# ── Validator proxy endpoints ────────────────────────────────────────────

def mock_validation() -> ValidateResponse:
    return ValidateResponse(
        discussions=[
            ValidationDiscussion(
                platform="reddit",
                title="Struggling to validate my SaaS idea",
                url="https://reddit.com/r/startups/example",
                author="founder123",
                author_context="Solo founder",
                content="I have this idea for a SaaS tool but I'm not sure how to validate it properly...",
                date="2024-01-15",
                relevance=95,
                problem="Need systematic approach to validate ideas",
                solution="Your product could help by providing structured validation framework",
            )
        ],
        people=[
            ValidationPerson(
                name="Sarah Chen",
                platform="linkedin",
                context="Product Manager at Startup",
                problem="Struggling with product validation",
                original_post="Looking for better ways to validate product ideas...",
                url="https://linkedin.com/example",
                engagement="15 likes, 8 comments",
            )
        ],
        insights=ValidationInsights(
            market_demand="Strong demand for validation tools among founders",
            common_pain_points=["Time constraints", "Lack of systematic approach", "Uncertainty"],
            best_channels=["Reddit r/startups", "LinkedIn", "Twitter"],
            next_steps=["Direct outreach", "Landing page", "MVP development"],
        ),
    )


MOCK_OUTREACH_MESSAGE = (
    "Hi there! I noticed your post about product validation challenges and thought our "
    "AI-powered validation tool might be exactly what you're looking for. Would love to "
    "show you a quick demo if you're interested!"
)


def mock_contacts() -> ContactInfo:
    return ContactInfo(
        email="person@company.com",
        linkedin="https://linkedin.com/in/username",
        twitter="@username",
        company="Example Company",
        website="https://company.com",
    )


def mock_inbound_content(product_idea: Optional[str] = None) -> list[InboundContent]:
    idea = (product_idea or "your product").strip()
    short_idea = idea if len(idea) <= 60 else idea[:60] + "..."
    return [
        InboundContent(
            type="LinkedIn Post",
            platform="LinkedIn",
            title="The hidden cost nobody talks about",
            content=(
                f"We talked to dozens of people working on {short_idea}.\n\n"
                "The same frustration came up again and again: the tools they rely on today "
                "cost them hours every week.\n\nHow are you handling it right now?"
            ),
            cta="Share how you handle this in the comments",
            target_audience="Early Adopter Segment",
            pain_point="Current tools are inefficient",
            estimated_engagement="High",
        ),
        InboundContent(
            type="Twitter Thread",
            platform="Twitter",
            title="5 signs your current workflow is broken",
            content="1/ You repeat the same manual steps every week\n2/ ...",
            cta="Follow for the full breakdown",
            target_audience="Professional Users",
            pain_point="Process is time-consuming",
            estimated_engagement="Medium",
        ),
        InboundContent(
            type="Reddit Post",
            platform="Reddit",
            title="How do you deal with this problem?",
            content="Curious how others in this community approach it. What have you tried so far?",
            cta="Tell us what worked for you",
            target_audience="Early Adopter Segment",
            pain_point="Struggling with current solutions",
            estimated_engagement="Medium",
        ),
    ]


# ── Contact enrichment ───────────────────────────────────────────────────

def _slug(text: str, sep: str = "") -> str:
    words = re.findall(r"[a-z0-9]+", text.lower())
    return sep.join(words)


def mock_enriched_contact(prospect: Prospect) -> EnrichedContact:
    """Plausible, stable contact details derived from the prospect itself."""
    seed = zlib.crc32(prospect.key().encode("utf-8"))
    first, _, last = prospect.name.strip().partition(" ")
    domain = f"{_slug(prospect.company) or 'example'}.com"

    email = prospect.email or f"{_slug(first) or 'contact'}{'.' + _slug(last) if last else ''}@{domain}"
    return EnrichedContact(
        email=email,
        phone=f"+1-555-{seed % 10000:04d}",
        company_email=f"contact@{domain}",
        company_website=f"https://{domain}",
        linkedin_url=prospect.linkedin or f"https://linkedin.com/in/{_slug(prospect.name, '-') or 'member'}",
        confidence_score=70 + seed % 26,
    )
