from typing import Literal, Optional

from pydantic import Field

from .analysis_schema import CamelModel


class ConversationContext(CamelModel):
    """What the chat phase has learned about the user's product so far."""

    stage: Literal["initial", "gathering", "ready_for_analysis"] = "initial"
    message_count: int = Field(default=0, ge=0)
    product_idea: Optional[str] = None
    target_audience: Optional[str] = None
    problem_description: Optional[str] = None
    business_model: Optional[str] = None
    resources: Optional[list[str]] = None


class ChatRequest(CamelModel):
    message: Optional[str] = Field(default=None, max_length=4000)
    context: ConversationContext = Field(default_factory=ConversationContext)
    has_resources: bool = False


class ConversationTurn(CamelModel):
    """Assistant reply plus the context the client should send next time."""

    response: str
    updated_context: ConversationContext
    should_proceed_to_analysis: bool = False


class AnalysisRequest(CamelModel):
    context: Optional[ConversationContext] = None
