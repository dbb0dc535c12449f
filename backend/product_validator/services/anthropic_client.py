"""Anthropic (Claude) client.

Mirrors `openai_client.call_openai_chat_async()` for the Messages API:
same tiers, same single retry, same typed errors. Claude has no server-side
JSON mode, so JSON responses are extracted with the shared sanitizer.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Optional, Union

import anthropic
from anthropic import AsyncAnthropic

from ..config import get_secret, llm_request_timeout
from ..constants import ANTHROPIC_MODELS
from .errors import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMNotConfiguredError,
    LLMRateLimitError,
    LLMResponseError,
)
from .openai_client import parse_llm_content

logger = logging.getLogger(__name__)

_MAX_RETRIES = 1
_DEFAULT_MAX_TOKENS = 2000


def get_anthropic_key() -> str:
    key = get_secret("ANTHROPIC_API_KEY")
    if not key:
        raise LLMNotConfiguredError("ANTHROPIC_API_KEY environment variable not set", provider="anthropic")
    return key


def get_anthropic_model(tier: str = "balanced") -> str:
    """Model for *tier*, overridable with ANTHROPIC_MODEL_<TIER>."""
    default = ANTHROPIC_MODELS.get(tier, ANTHROPIC_MODELS["balanced"])
    return os.getenv(f"ANTHROPIC_MODEL_{tier.upper()}", default).strip() or default


def _translate_error(exc: Exception) -> LLMError:
    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return LLMAuthenticationError(str(exc), provider="anthropic", status_code=exc.status_code)
    if isinstance(exc, anthropic.RateLimitError):
        return LLMRateLimitError(str(exc), provider="anthropic", status_code=429)
    if isinstance(exc, (anthropic.APITimeoutError, anthropic.APIConnectionError)):
        return LLMConnectionError(str(exc), provider="anthropic")
    if isinstance(exc, anthropic.APIStatusError):
        return LLMError(str(exc), provider="anthropic", status_code=exc.status_code)
    return LLMError(str(exc), provider="anthropic")


def _is_retryable(err: LLMError) -> bool:
    if isinstance(err, (LLMConnectionError, LLMRateLimitError, LLMResponseError)):
        return True
    return err.status_code is not None and err.status_code >= 500


def _first_text_block(message: Any) -> str:
    for block in getattr(message, "content", None) or []:
        if getattr(block, "type", None) == "text":
            return block.text
    return ""


async def call_anthropic_async(
    *,
    messages: List[Dict[str, str]],
    system: Optional[str] = None,
    tier: str = "balanced",
    max_tokens: int = 0,
    temperature: float = 0.7,
    json_mode: bool = True,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> Union[Dict[str, Any], str]:
    """Call the Claude Messages API and return parsed JSON (or text).

    Raises a typed LLMError subclass once retries are exhausted.
    """
    if api_key is None:
        api_key = get_anthropic_key()
    if model is None:
        model = get_anthropic_model(tier)
    if max_tokens <= 0:
        max_tokens = _DEFAULT_MAX_TOKENS

    kwargs: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    if system:
        kwargs["system"] = system

    client = AsyncAnthropic(api_key=api_key, timeout=llm_request_timeout(), max_retries=0)
    last_error: Optional[LLMError] = None

    for attempt in range(_MAX_RETRIES + 1):
        t0 = time.time()
        print(f"🧠 [ANTHROPIC] Calling {model} (attempt {attempt + 1}/{_MAX_RETRIES + 1})")
        try:
            message = await client.messages.create(**kwargs)
            usage = getattr(message, "usage", None)
            if usage is not None:
                print(
                    f"🧠 [ANTHROPIC] {time.time() - t0:.1f}s, tokens: "
                    f"input={usage.input_tokens}, output={usage.output_tokens}"
                )

            result = parse_llm_content(_first_text_block(message), json_mode=json_mode, provider="anthropic")
            print("🧠 [ANTHROPIC] Success")
            return result

        except LLMResponseError as exc:
            last_error = exc
            logger.warning("[ANTHROPIC] %s (attempt %d)", exc, attempt + 1)
        except anthropic.AnthropicError as exc:
            last_error = _translate_error(exc)
            logger.warning("[ANTHROPIC] %s: %s", type(last_error).__name__, exc)

        if not _is_retryable(last_error) or attempt >= _MAX_RETRIES:
            break
        print("🔄 [ANTHROPIC] Retrying...")

    raise last_error
