"""LLM Providers.

Defines the ``LLMProvider`` abstract interface and concrete implementations.
Agents interact only with ``complete_json`` / ``complete_text``, making the
model vendor swappable without touching prompt or business logic.

Providers
---------
- ``OpenAIProvider``:    chat completions with JSON mode.
- ``AnthropicProvider``: Claude Messages API.

Selection
---------
``LLM_PROVIDER`` (``openai`` | ``anthropic``) wins when its key is set.
Otherwise the first provider with a configured key is used. With no key at
all, ``get_provider()`` returns ``None`` and callers serve mock data.
"""

from __future__ import annotations

import abc
import logging
import os
from typing import Any, Dict, Optional, Union

from ..config import anthropic_key_set, openai_key_set
from ..constants import LLM_TIERS
from .anthropic_client import call_anthropic_async
from .errors import LLMNotConfiguredError, LLMResponseError
from .openai_client import call_openai_chat_async

logger = logging.getLogger(__name__)


# ===================================================================== #
#  Abstract interface                                                     #
# ===================================================================== #

class LLMProvider(abc.ABC):
    """Interface that every LLM vendor must implement.

    ``complete`` returns a dict when ``json_mode`` is set and plain text
    otherwise. Failures raise ``LLMError`` subclasses; never return None.
    """

    name: str = "llm"

    @abc.abstractmethod
    async def complete(
        self,
        *,
        prompt: str,
        system: Optional[str] = None,
        tier: str = "balanced",
        max_tokens: int = 0,
        temperature: float = 0.7,
        json_mode: bool = True,
    ) -> Union[Dict[str, Any], str]:
        ...


class OpenAIProvider(LLMProvider):
    name = "openai"

    async def complete(
        self,
        *,
        prompt: str,
        system: Optional[str] = None,
        tier: str = "balanced",
        max_tokens: int = 0,
        temperature: float = 0.7,
        json_mode: bool = True,
    ) -> Union[Dict[str, Any], str]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return await call_openai_chat_async(
            messages=messages,
            tier=tier,
            max_completion_tokens=max_tokens,
            temperature=temperature,
            json_mode=json_mode,
        )


class AnthropicProvider(LLMProvider):
    name = "anthropic"

    async def complete(
        self,
        *,
        prompt: str,
        system: Optional[str] = None,
        tier: str = "balanced",
        max_tokens: int = 0,
        temperature: float = 0.7,
        json_mode: bool = True,
    ) -> Union[Dict[str, Any], str]:
        return await call_anthropic_async(
            messages=[{"role": "user", "content": prompt}],
            system=system,
            tier=tier,
            max_tokens=max_tokens,
            temperature=temperature,
            json_mode=json_mode,
        )


# ===================================================================== #
#  Provider factory                                                       #
# ===================================================================== #

_PROVIDERS = {
    "openai": (OpenAIProvider, openai_key_set),
    "anthropic": (AnthropicProvider, anthropic_key_set),
}


def get_provider() -> Optional[LLMProvider]:
    """Return the configured ``LLMProvider``, or ``None`` in mock mode."""
    preferred = os.getenv("LLM_PROVIDER", "").strip().lower()

    if preferred:
        entry = _PROVIDERS.get(preferred)
        if entry is None:
            logger.warning("Unknown LLM_PROVIDER=%r, falling back to auto-detection.", preferred)
        elif entry[1]():
            return entry[0]()
        else:
            logger.warning("LLM_PROVIDER=%s but its API key is not set, trying others.", preferred)

    for provider_cls, has_key in _PROVIDERS.values():
        if has_key():
            return provider_cls()
    return None


def provider_name() -> str:
    """Name of the active provider, or ``"mock"``."""
    provider = get_provider()
    return provider.name if provider is not None else "mock"


def llm_available() -> bool:
    return get_provider() is not None


def _require_provider() -> LLMProvider:
    provider = get_provider()
    if provider is None:
        raise LLMNotConfiguredError("No LLM API key configured (OPENAI_API_KEY / ANTHROPIC_API_KEY)")
    return provider


def _check_tier(tier: str) -> str:
    if tier not in LLM_TIERS:
        logger.warning("Unknown model tier %r, using 'balanced'", tier)
        return "balanced"
    return tier


async def complete_json(
    prompt: str,
    *,
    system: Optional[str] = None,
    tier: str = "balanced",
    max_tokens: int = 0,
    temperature: float = 0.7,
) -> Dict[str, Any]:
    """Run *prompt* on the active provider and return the parsed JSON object."""
    provider = _require_provider()
    result = await provider.complete(
        prompt=prompt,
        system=system,
        tier=_check_tier(tier),
        max_tokens=max_tokens,
        temperature=temperature,
        json_mode=True,
    )
    if not isinstance(result, dict):
        raise LLMResponseError("Expected a JSON object", provider=provider.name)
    return result


async def complete_text(
    prompt: str,
    *,
    system: Optional[str] = None,
    tier: str = "balanced",
    max_tokens: int = 0,
    temperature: float = 0.7,
) -> str:
    """Run *prompt* on the active provider and return the reply text."""
    provider = _require_provider()
    result = await provider.complete(
        prompt=prompt,
        system=system,
        tier=_check_tier(tier),
        max_tokens=max_tokens,
        temperature=temperature,
        json_mode=False,
    )
    return str(result)
