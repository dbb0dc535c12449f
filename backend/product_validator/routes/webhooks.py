"""Inbound webhooks from third-party providers.

Endpoints:
  POST /api/webhook/fullenrich   FullEnrich bulk enrichment finished
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.enrichment_schema import FullEnrichWebhookPayload
from ..services.enrichment_service import apply_webhook

router = APIRouter(
    prefix="/api/webhook",
    tags=["Webhooks"],
)


@router.post("/fullenrich", summary="FullEnrich Webhook")
def fullenrich_webhook(
    payload: FullEnrichWebhookPayload,
    job_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Always acknowledges so FullEnrich does not retry unknown ids."""
    job = apply_webhook(db, payload, job_id=job_id)
    return {"received": True, "matched": job is not None}
