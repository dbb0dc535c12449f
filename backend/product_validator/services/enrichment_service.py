"""Contact enrichment orchestration.

start_enrichment  -> persists an EnrichmentJob, submits it to FullEnrich
                     (or completes it at once with mock data)
apply_webhook     -> FullEnrich callback, matched on provider_enrichment_id or,
                     before that id is stored, on the job id in the webhook URL
get_status        -> stored state; polls FullEnrich while still running
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..config import public_base_url
from ..models.enrichment_job import EnrichmentJob
from ..schemas.enrichment_schema import (
    EnrichedContact,
    EnrichmentStatusResponse,
    FullEnrichWebhookPayload,
    Prospect,
)
from .errors import EnrichmentError
from .fullenrich_client import (
    FullEnrichClient,
    fullenrich_configured,
    map_provider_status,
    parse_enrichment_results,
)
from .mock_data import mock_enriched_contact

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/api/webhook/fullenrich"
_PENDING_STATUSES = ("pending", "in_progress")


def webhook_url(job_id: Optional[str] = None) -> str:
    url = f"{public_base_url()}{WEBHOOK_PATH}"
    return f"{url}?job_id={job_id}" if job_id else url


def _with_ids(prospects: List[Prospect]) -> List[Prospect]:
    # Provider results are matched on prospect id, so every prospect needs one.
    return [p if p.id else p.model_copy(update={"id": uuid.uuid4().hex[:12]}) for p in prospects]


def _load_prospects(job: EnrichmentJob) -> List[Prospect]:
    return [Prospect.model_validate(item) for item in json.loads(job.prospects_json or "[]")]


def _load_results(job: EnrichmentJob) -> Dict[str, EnrichedContact]:
    raw = json.loads(job.results_json) if job.results_json else {}
    return {key: EnrichedContact.model_validate(value) for key, value in raw.items()}


def _dump_results(results: Dict[str, EnrichedContact]) -> str:
    return json.dumps({key: contact.model_dump(exclude_none=True) for key, contact in results.items()})


def build_status_response(job: EnrichmentJob) -> EnrichmentStatusResponse:
    results = _load_results(job)
    prospects = [
        p.model_copy(update={"enriched": results[p.key()]}) if p.key() in results else p
        for p in _load_prospects(job)
    ]
    return EnrichmentStatusResponse(
        enrichment_id=str(job.id),
        status=job.status,
        provider=job.provider,
        prospects=prospects,
        error=job.error,
    )


def _apply_provider_payload(job: EnrichmentJob, payload: Dict[str, Any]) -> None:
    status = map_provider_status(payload.get("status"))
    job.status = status
    if status == "completed":
        job.results_json = _dump_results(parse_enrichment_results(payload))
        job.error = None
    elif status == "failed":
        job.error = f"FullEnrich enrichment ended with status {payload.get('status')}"


async def start_enrichment(db: Session, prospects: List[Prospect]) -> EnrichmentStatusResponse:
    prospects = _with_ids(prospects)
    job = EnrichmentJob(
        prospects_json=json.dumps([p.model_dump(by_alias=True, exclude_none=True) for p in prospects]),
    )

    if not fullenrich_configured():
        print("⚠️  [ENRICH] Using mock enrichment (no FULLENRICH_API_KEY)")
        job.provider = "mock"
        job.status = "completed"
        job.results_json = _dump_results({p.key(): mock_enriched_contact(p) for p in prospects})
        db.add(job)
        db.commit()
        db.refresh(job)
        return build_status_response(job)

    # Committed before submission so a fast webhook finds the row.
    job.provider = "fullenrich"
    job.status = "pending"
    db.add(job)
    db.commit()
    db.refresh(job)

    try:
        provider_id = await FullEnrichClient().start_bulk_enrichment(prospects, webhook_url(str(job.id)))
    except EnrichmentError as e:
        logger.warning("[ENRICH] FullEnrich submission failed: %s", e)
        db.refresh(job)
        job.status = "failed"
        job.error = str(e)
    else:
        db.refresh(job)
        job.provider_enrichment_id = provider_id
        if job.status == "pending":
            job.status = "in_progress"

    db.commit()
    db.refresh(job)
    return build_status_response(job)


def _find_job(db: Session, job_id: str) -> Optional[EnrichmentJob]:
    try:
        key = uuid.UUID(job_id)
    except (ValueError, TypeError):
        return None
    return db.query(EnrichmentJob).filter(EnrichmentJob.id == key).first()


async def get_status(db: Session, job_id: str) -> Optional[EnrichmentStatusResponse]:
    """Stored job state, refreshed from FullEnrich if the job is still running.

    Returns None when no job has this id.
    """
    job = _find_job(db, job_id)
    if job is None:
        return None

    if job.status in _PENDING_STATUSES and job.provider == "fullenrich" and job.provider_enrichment_id:
        try:
            payload = await FullEnrichClient().get_enrichment(job.provider_enrichment_id)
        except EnrichmentError as e:
            # Keep the stored state; the webhook may still deliver results.
            logger.warning("[ENRICH] Polling %s failed: %s", job.provider_enrichment_id, e)
        else:
            _apply_provider_payload(job, payload)
            db.commit()
            db.refresh(job)

    return build_status_response(job)


def apply_webhook(
    db: Session, payload: FullEnrichWebhookPayload, job_id: Optional[str] = None
) -> Optional[EnrichmentJob]:
    """Store results delivered by FullEnrich. Returns the matched job, if any.

    *job_id* comes from the webhook URL. It matches a job whose submission has
    not returned yet, so its provider_enrichment_id is still unset.
    """
    provider_id = payload.provider_id()
    if not provider_id:
        logger.warning("[ENRICH] Webhook without enrichment id ignored")
        return None

    job = (
        db.query(EnrichmentJob)
        .filter(EnrichmentJob.provider_enrichment_id == provider_id)
        .first()
    )
    if job is None and job_id:
        job = _find_job(db, job_id)
        if job is not None and job.provider_enrichment_id not in (None, provider_id):
            job = None
    if job is None:
        logger.warning("[ENRICH] Webhook for unknown enrichment %s", provider_id)
        return None

    job.provider_enrichment_id = provider_id

    _apply_provider_payload(job, payload.model_dump())
    db.commit()
    db.refresh(job)
    print(f"📇 [ENRICH] Webhook stored results for job {job.id} (status={job.status})")
    return job
