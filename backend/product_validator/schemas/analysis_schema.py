"""Dashboard display records: ICPs, discussions, inbound content, outreach.

The UI consumes camelCase JSON (``painPoints``, ``profileUrl`` ...). Models use
snake_case attributes with camelCase aliases and accept either form.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising to camelCase and accepting both spellings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ICP(CamelModel):
    """Ideal Customer Profile: one target-audience segment."""

    title: str
    description: str = ""
    pain_points: list[str] = Field(default_factory=list)
    channels: list[str] = Field(default_factory=list)


class Discussion(CamelModel):
    """A public discussion shown on the dashboard, relevance on a 0-10 scale."""

    platform: str
    title: str
    url: str = ""
    engagement: str = ""
    relevance: int = Field(default=0, ge=0, le=10)
    profile_url: str = ""
    profile_name: str = ""


class InboundContent(CamelModel):
    type: str
    platform: str
    content: str
    cta: str = ""
    title: Optional[str] = None
    target_audience: Optional[str] = None
    pain_point: Optional[str] = None
    estimated_engagement: Optional[str] = None


class OutreachMessage(CamelModel):
    type: str
    platform: str
    message: str
    personalization: list[str] = Field(default_factory=list)


class MarketAnalysis(CamelModel):
    """Everything the dashboard renders after the conversation phase."""

    icps: list[ICP] = Field(default_factory=list)
    discussions: list[Discussion] = Field(default_factory=list)
    inbound_content: list[InboundContent] = Field(default_factory=list)
    outreach_messages: list[OutreachMessage] = Field(default_factory=list)
    hypothesis: str = ""
