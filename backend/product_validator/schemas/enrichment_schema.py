from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .analysis_schema import CamelModel

EnrichmentStatus = Literal["pending", "in_progress", "completed", "failed"]


class EnrichedContact(BaseModel):
    """Fields discovered by the enrichment provider (snake_case on the wire)."""

    email: Optional[str] = None
    phone: Optional[str] = None
    company_email: Optional[str] = None
    company_phone: Optional[str] = None
    company_website: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    confidence_score: Optional[int] = Field(default=None, ge=0, le=100)


class Prospect(CamelModel):
    """A potential customer surfaced by research, optionally enriched."""

    id: Optional[str] = None
    name: str
    title: str = ""
    company: str = ""
    email: str = ""
    linkedin: str = ""
    source: str = ""
    relevance_score: int = Field(default=0, ge=0, le=10)
    enriched: Optional[EnrichedContact] = None

    def key(self) -> str:
        """Stable identifier used to match provider results back to this prospect."""
        return self.id or self.email or self.linkedin or self.name


class EnrichContactsRequest(BaseModel):
    prospects: list[Prospect] = Field(default_factory=list)


class EnrichmentStatusResponse(CamelModel):
    enrichment_id: str
    status: EnrichmentStatus
    provider: str
    prospects: list[Prospect] = Field(default_factory=list)
    error: Optional[str] = None


class FullEnrichWebhookPayload(BaseModel):
    """Body FullEnrich posts to the webhook once a bulk enrichment finishes.

    Only ``id`` and ``status`` are relied on; ``datas`` is parsed leniently.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    enrichment_id: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    datas: list[dict[str, Any]] = Field(default_factory=list)

    def provider_id(self) -> Optional[str]:
        return self.id or self.enrichment_id
