"""Request/response bodies of the product-validator proxy endpoints.

Fields named ``...JSON`` carry JSON produced by an earlier call. Clients send
them either as a JSON string (as the web frontend does) or as the
decoded value; `as_json_text` normalises both into prompt-ready text.
"""

from __future__ import annotations

import json
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .analysis_schema import CamelModel, InboundContent

JsonLike = Union[str, dict, list, None]


def as_json_text(value: JsonLike) -> str:
    """Return *value* as prompt text; strings pass through, other values are dumped."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return json.dumps(value, indent=2, ensure_ascii=False)


# ── /validate ────────────────────────────────────────────────────────────

class ValidateRequest(BaseModel):
    productIdea: Optional[str] = Field(
        default=None,
        max_length=4000,
        examples=["An AI assistant that turns meeting notes into Jira tickets"],
    )
    context: Optional[str] = None
    resourcesJSON: JsonLike = None


class ValidationDiscussion(CamelModel):
    model_config = ConfigDict(extra="allow")

    platform: str = ""
    title: str = ""
    url: str = ""
    author: str = ""
    author_context: str = ""
    content: str = ""
    date: str = ""
    relevance: Union[int, float, str] = 0
    problem: str = ""
    solution: str = ""


class ValidationPerson(CamelModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    platform: str = ""
    context: str = ""
    problem: str = ""
    original_post: str = ""
    url: str = ""
    engagement: str = ""


class ValidationInsights(CamelModel):
    model_config = ConfigDict(extra="allow")

    market_demand: str = ""
    common_pain_points: list[str] = Field(default_factory=list)
    best_channels: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)


class ValidateResponse(CamelModel):
    model_config = ConfigDict(extra="allow")

    discussions: list[ValidationDiscussion] = Field(default_factory=list)
    people: list[ValidationPerson] = Field(default_factory=list)
    insights: ValidationInsights = Field(default_factory=ValidationInsights)


# ── /outreach ────────────────────────────────────────────────────────────

class OutreachRequest(BaseModel):
    productIdea: Optional[str] = None
    searchResultsJSON: JsonLike = None
    targetPersonJSON: JsonLike = None


class OutreachResponse(BaseModel):
    message: str


# ── /contacts ────────────────────────────────────────────────────────────

class ContactsRequest(BaseModel):
    targetPersonJSON: JsonLike = None


class ContactInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    company: Optional[str] = None
    website: Optional[str] = None
    other: Optional[str] = None


class ContactsResponse(BaseModel):
    contacts: ContactInfo


# ── /inbound-content ─────────────────────────────────────────────────────

class InboundContentRequest(BaseModel):
    productIdea: Optional[str] = None
    insightsJSON: JsonLike = None
    icpsJSON: JsonLike = None


class InboundContentResponse(CamelModel):
    inbound_content: list[InboundContent] = Field(default_factory=list)
