"""FullEnrich contact-enrichment client.

Bulk enrichment is asynchronous on FullEnrich's side: ``start_bulk_enrichment``
returns an enrichment id immediately, and results arrive later either on the
webhook we pass in or by polling ``get_enrichment``.

Each submitted contact carries ``custom.prospect_id`` so results can be
matched back to the prospect they belong to.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from ..config import get_secret
from ..schemas.enrichment_schema import EnrichedContact, Prospect
from .errors import EnrichmentError
from .http_client import request_with_retry

logger = logging.getLogger(__name__)

FULLENRICH_BASE_URL = "https://app.fullenrich.com/api/v1"
ENRICH_FIELDS = ["contact.emails", "contact.phones"]

# FullEnrich status -> EnrichmentJob.status
_STATUS_MAP = {
    "CREATED": "pending",
    "IN_PROGRESS": "in_progress",
    "FINISHED": "completed",
    "CANCELED": "failed",
    "CREDITS_INSUFFICIENT": "failed",
    "RATE_LIMIT": "failed",
}

# most_probable_email_status -> confidence_score
_EMAIL_CONFIDENCE = {
    "DELIVERABLE": 95,
    "HIGH_PROBABILITY": 80,
    "CATCH_ALL": 60,
}

# Webmail domains say nothing about the prospect's company.
_FREE_MAIL_DOMAINS = frozenset({
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "icloud.com",
    "aol.com", "proton.me", "protonmail.com", "live.com",
})


def fullenrich_configured() -> bool:
    return bool(get_secret("FULLENRICH_API_KEY"))


def map_provider_status(status: Optional[str]) -> str:
    if not status:
        return "in_progress"
    return _STATUS_MAP.get(status.upper(), "in_progress")


def split_name(full_name: str) -> Tuple[str, str]:
    parts = full_name.strip().split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def company_domain(prospect: Prospect) -> str:
    """Best guess at the company domain: work email domain, else empty."""
    if "@" in prospect.email:
        domain = prospect.email.rsplit("@", 1)[1].strip().lower()
        if domain and domain not in _FREE_MAIL_DOMAINS:
            return domain
    return ""


def build_contact_payload(prospect: Prospect) -> Dict[str, Any]:
    firstname, lastname = split_name(prospect.name)
    payload: Dict[str, Any] = {
        "firstname": firstname,
        "lastname": lastname,
        "enrich_fields": ENRICH_FIELDS,
        "custom": {"prospect_id": prospect.key()},
    }
    domain = company_domain(prospect)
    if domain:
        payload["domain"] = domain
    if prospect.company:
        payload["company_name"] = prospect.company
    if prospect.linkedin:
        payload["linkedin_url"] = prospect.linkedin
    return payload


def _first_value(items: Any, key: str) -> Optional[str]:
    if not isinstance(items, list):
        return None
    for item in items:
        if isinstance(item, dict) and item.get(key):
            return str(item[key])
    return None


def _parse_contact(item: Dict[str, Any]) -> EnrichedContact:
    contact = item.get("contact") or {}
    profile = contact.get("profile") or {}

    email = contact.get("most_probable_email") or _first_value(contact.get("emails"), "email")
    phone = contact.get("most_probable_phone") or _first_value(contact.get("phones"), "number")
    linkedin_url = profile.get("linkedin_url") or contact.get("linkedin_url") or item.get("linkedin_url")
    domain = item.get("domain")

    confidence = None
    if email:
        status = str(contact.get("most_probable_email_status") or "").upper()
        confidence = _EMAIL_CONFIDENCE.get(status, 50)

    return EnrichedContact(
        email=email,
        phone=phone,
        company_website=f"https://{domain}" if domain else None,
        linkedin_url=linkedin_url,
        confidence_score=confidence,
    )


def parse_enrichment_results(payload: Dict[str, Any]) -> Dict[str, EnrichedContact]:
    """Map ``custom.prospect_id`` to the contact FullEnrich found for it."""
    results: Dict[str, EnrichedContact] = {}
    for item in payload.get("datas") or []:
        if not isinstance(item, dict):
            continue
        prospect_id = (item.get("custom") or {}).get("prospect_id")
        if not prospect_id:
            continue
        results[str(prospect_id)] = _parse_contact(item)
    return results


class FullEnrichClient:
    """Thin async wrapper over the FullEnrich bulk enrichment endpoints."""

    def __init__(self, api_key: Optional[str] = None, base_url: str = FULLENRICH_BASE_URL) -> None:
        self._api_key = api_key or get_secret("FULLENRICH_API_KEY")
        if not self._api_key:
            raise EnrichmentError("FULLENRICH_API_KEY environment variable not set")
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            resp = await request_with_retry(
                method,
                f"{self._base_url}{path}",
                service="fullenrich",
                headers=self._headers,
                **kwargs,
            )
        except httpx.HTTPError as exc:
            raise EnrichmentError(f"FullEnrich request failed: {exc}") from exc

        if resp.status_code not in (200, 201):
            logger.warning("[FULLENRICH] HTTP %d: %s", resp.status_code, resp.text[:200])
            raise EnrichmentError(f"FullEnrich API error: {resp.status_code}", status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise EnrichmentError("FullEnrich returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise EnrichmentError("FullEnrich returned an unexpected body")
        return data

    async def start_bulk_enrichment(
        self,
        prospects: Iterable[Prospect],
        webhook_url: str,
        name: str = "product-validator",
    ) -> str:
        """Submit *prospects* and return FullEnrich's enrichment id."""
        datas: List[Dict[str, Any]] = [build_contact_payload(p) for p in prospects]
        body = {"name": name, "webhook_url": webhook_url, "datas": datas}

        print(f"📇 [FULLENRICH] Submitting {len(datas)} contacts")
        data = await self._request("POST", "/contact/enrich/bulk", json=body)
        enrichment_id = data.get("enrichment_id")
        if not enrichment_id:
            raise EnrichmentError("FullEnrich response is missing enrichment_id")
        return str(enrichment_id)

    async def get_enrichment(self, enrichment_id: str) -> Dict[str, Any]:
        """Current state (and results, once finished) of a bulk enrichment."""
        return await self._request("GET", f"/contact/enrich/bulk/{enrichment_id}")
