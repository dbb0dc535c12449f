"""
Shared async HTTP transport for the SERP and FullEnrich clients.

One pooled httpx.AsyncClient per process (closed by the app lifespan), a
timeout per external service and `request_with_retry`, which retries
throttling, 5xx answers and transport failures with capped exponential
backoff.
"""

import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5.0

# Read timeouts in seconds, keyed by the ``service`` argument of request_with_retry
SERVICE_TIMEOUTS = {
    "serp": 10.0,        # google-search74 on RapidAPI
    "fullenrich": 15.0,  # bulk enrichment submit / poll
}
DEFAULT_TIMEOUT = 10.0


class RetryConfig:
    """Retry budget: a few fast attempts, never more than a couple of seconds of waiting."""
    MAX_RETRIES = 2
    INITIAL_BACKOFF = 0.5  # seconds
    MAX_BACKOFF = 2.0      # seconds, also caps Retry-After

    RETRYABLE_CODES = frozenset({429, 500, 502, 503, 504})


_client: Optional[httpx.AsyncClient] = None


async def get_client() -> httpx.AsyncClient:
    """Return the process-wide client, creating it on first use."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(
            timeout=httpx.Timeout(DEFAULT_TIMEOUT, connect=CONNECT_TIMEOUT),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=50),
            follow_redirects=True,
        )
    return _client


async def close_client():
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def get_timeout(service: str) -> httpx.Timeout:
    seconds = SERVICE_TIMEOUTS.get(service.lower(), DEFAULT_TIMEOUT)
    return httpx.Timeout(seconds, connect=CONNECT_TIMEOUT)


def is_retryable_error(status_code: int) -> bool:
    return status_code in RetryConfig.RETRYABLE_CODES


def _backoff(attempt: int, response: Optional[httpx.Response] = None) -> float:
    """Seconds to wait before retry number *attempt* + 1.

    A numeric Retry-After header wins over the exponential schedule.
    """
    if response is not None:
        retry_after = response.headers.get("retry-after", "")
        try:
            return min(max(float(retry_after), 0.0), RetryConfig.MAX_BACKOFF)
        except ValueError:
            pass
    return min(RetryConfig.INITIAL_BACKOFF * (2 ** attempt), RetryConfig.MAX_BACKOFF)


async def request_with_retry(
    method: str,
    url: str,
    *,
    service: str,
    **kwargs,
) -> httpx.Response:
    """Send *method* *url* through the shared client.

    Returns the first non-retryable response, or the last response once the
    retry budget is spent; callers check the status themselves. A transport
    error (timeout, connection failure) on the final attempt is re-raised.
    """
    client = await get_client()
    kwargs.setdefault("timeout", get_timeout(service))

    attempt = 0
    while True:
        response: Optional[httpx.Response] = None
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            if attempt >= RetryConfig.MAX_RETRIES:
                raise
            logger.warning("[HTTP] %s %s failed: %s (attempt %d)", service, method, exc, attempt + 1)
        else:
            if not is_retryable_error(response.status_code) or attempt >= RetryConfig.MAX_RETRIES:
                return response
            logger.warning("[HTTP] %s answered %d (attempt %d)", service, response.status_code, attempt + 1)

        await asyncio.sleep(_backoff(attempt, response))
        attempt += 1
