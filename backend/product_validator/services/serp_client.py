"""Google search via RapidAPI (google-search74).

Used by the research pipeline to run "Google Dork" queries such as
``site:reddit.com "invoice reminders"``. The API key comes from
``RAPIDAPI_KEY``; the host is overridable with ``SERP_API_HOST``.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ..config import get_secret, serp_api_host
from ..schemas.research_schema import SerpResponse
from .errors import SearchAPIError
from .http_client import request_with_retry

logger = logging.getLogger(__name__)


def serp_configured() -> bool:
    return bool(get_secret("RAPIDAPI_KEY"))


def _headers() -> dict[str, str]:
    api_key = get_secret("RAPIDAPI_KEY")
    if not api_key:
        raise SearchAPIError("RAPIDAPI_KEY environment variable not set")
    return {
        "x-rapidapi-host": serp_api_host(),
        "x-rapidapi-key": api_key,
    }


async def search_with_google_dorks(query: str, limit: int = 10) -> SerpResponse:
    """Run *query* against the SERP API and return up to *limit* results.

    Raises
    ------
    SearchAPIError
        Missing key, non-200 status, transport failure or malformed body.
    """
    headers = _headers()
    params = {"query": query, "limit": limit, "related_keywords": "true"}

    try:
        response = await request_with_retry(
            "GET",
            f"https://{serp_api_host()}/",
            service="serp",
            headers=headers,
            params=params,
        )
    except httpx.HTTPError as exc:
        raise SearchAPIError(f"SERP API request failed: {exc}") from exc

    if response.status_code != 200:
        logger.warning("[SERP] HTTP %d for query=%r: %s", response.status_code, query, response.text[:200])
        raise SearchAPIError(f"SERP API error: {response.status_code}", status_code=response.status_code)

    try:
        data = response.json()
        serp = SerpResponse.model_validate(data)
    except (ValueError, ValidationError) as exc:
        raise SearchAPIError(f"SERP API returned an unexpected body: {exc}") from exc

    serp.results = serp.results[:limit]
    return serp
