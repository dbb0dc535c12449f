"""Exception types raised by the external-API clients.

Agents catch these to fall back to mock data; routes translate them into
HTTP 500 responses with a user-facing message.
"""

from __future__ import annotations

from typing import Optional


class LLMError(RuntimeError):
    """Base class for every LLM provider failure."""

    def __init__(self, message: str, *, provider: str = "llm", status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class LLMNotConfiguredError(LLMError):
    """No provider has an API key configured (mock mode)."""


class LLMAuthenticationError(LLMError):
    """The provider rejected the API key (HTTP 401/403)."""


class LLMRateLimitError(LLMError):
    """The provider throttled the request (HTTP 429)."""


class LLMConnectionError(LLMError):
    """Network failure or timeout while reaching the provider."""


class LLMResponseError(LLMError):
    """The provider answered, but with an empty or unparseable body."""


class SearchAPIError(RuntimeError):
    """SERP API call failed or is not configured."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EnrichmentError(RuntimeError):
    """Contact enrichment provider call failed."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def llm_error_message(exc: LLMError) -> str:
    """Map an LLM failure to the message shown to API callers."""
    provider = exc.provider.capitalize() if exc.provider != "openai" else "OpenAI"
    if isinstance(exc, LLMAuthenticationError):
        return f"{provider} API key is invalid. Please check your .env file."
    if isinstance(exc, LLMRateLimitError):
        return f"{provider} API rate limit exceeded. Please try again later."
    if isinstance(exc, LLMConnectionError):
        return "Network error. Please check your internet connection."
    if isinstance(exc, LLMResponseError):
        return f"No valid response from {provider}"
    return "Internal server error"
