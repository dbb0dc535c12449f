# Schemas package
from .analysis_schema import ICP, Discussion, InboundContent, MarketAnalysis, OutreachMessage
from .conversation_schema import ConversationContext, ConversationTurn
from .enrichment_schema import EnrichedContact, EnrichmentStatusResponse, Prospect
from .research_schema import (
    DiscussionResult,
    ProblemVariation,
    ResearchInsights,
    ResearchResult,
    SerpResponse,
    SerpResult,
)

__all__ = [
    "ICP",
    "Discussion",
    "InboundContent",
    "OutreachMessage",
    "MarketAnalysis",
    "ConversationContext",
    "ConversationTurn",
    "Prospect",
    "EnrichedContact",
    "EnrichmentStatusResponse",
    "ProblemVariation",
    "SerpResult",
    "SerpResponse",
    "DiscussionResult",
    "ResearchInsights",
    "ResearchResult",
]
