"""Centralized OpenAI client.

All OpenAI traffic goes through `call_openai_chat_async()`. This ensures:
  - Model tier, timeout and token limits are read from env.
  - JSON mode is enforced via response_format when requested.
  - 1 retry on transient failure (timeout, 5xx, 429, invalid JSON).
  - Failures surface as typed `LLMError` subclasses.

`sanitize_json()` and `parse_llm_content()` are shared with the Anthropic
client, which has no server-side JSON mode.
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from typing import Any, Dict, List, Optional, Union

import openai
from openai import AsyncOpenAI

from ..config import get_secret, llm_request_timeout
from ..constants import OPENAI_MODELS
from .errors import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMNotConfiguredError,
    LLMRateLimitError,
    LLMResponseError,
)

logger = logging.getLogger(__name__)

_MAX_RETRIES = 1  # 2 attempts total
_DEFAULT_MAX_TOKENS = 2000


def get_openai_key() -> str:
    """Read OPENAI_API_KEY from the environment. Raises LLMNotConfiguredError if missing."""
    key = get_secret("OPENAI_API_KEY")
    if not key:
        raise LLMNotConfiguredError("OPENAI_API_KEY environment variable not set", provider="openai")
    return key


def get_openai_model(tier: str = "balanced") -> str:
    """Model for *tier*, overridable with OPENAI_MODEL_<TIER>."""
    default = OPENAI_MODELS.get(tier, OPENAI_MODELS["balanced"])
    return os.getenv(f"OPENAI_MODEL_{tier.upper()}", default).strip() or default


# Fenced reply: ```json {...} ``` or ``` {...} ```
_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def sanitize_json(raw: str) -> str:
    """Cut the JSON object out of a model reply.

    Copes with a markdown fence, a leading BOM, prose around the object and
    trailing commas. Raises ValueError when the reply holds no object.
    """
    text = raw.strip().lstrip("\ufeff")

    fenced = _FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1)

    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        raise ValueError("LLM did not return a JSON object")
    return _TRAILING_COMMA_RE.sub(r"\1", text[start:end + 1])


def parse_llm_content(raw: str, *, json_mode: bool, provider: str) -> Union[Dict[str, Any], str]:
    """Turn raw completion text into a dict (json_mode) or stripped text.

    Raises LLMResponseError on empty output or unparseable JSON.
    """
    content = (raw or "").strip()
    if not content:
        raise LLMResponseError(f"Empty response from {provider}", provider=provider)
    if not json_mode:
        return content
    try:
        parsed = json.loads(sanitize_json(content))
    except (ValueError, json.JSONDecodeError) as exc:
        logger.warning("[%s] Raw (first 300 chars): %s", provider.upper(), content[:300])
        raise LLMResponseError(f"Invalid JSON from {provider}: {exc}", provider=provider) from exc
    if not isinstance(parsed, dict):
        raise LLMResponseError(f"{provider} returned JSON that is not an object", provider=provider)
    return parsed


def _translate_error(exc: Exception) -> LLMError:
    """Map an openai SDK exception onto the shared error taxonomy."""
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return LLMAuthenticationError(str(exc), provider="openai", status_code=exc.status_code)
    if isinstance(exc, openai.RateLimitError):
        return LLMRateLimitError(str(exc), provider="openai", status_code=429)
    if isinstance(exc, (openai.APITimeoutError, openai.APIConnectionError)):
        return LLMConnectionError(str(exc), provider="openai")
    if isinstance(exc, openai.APIStatusError):
        return LLMError(str(exc), provider="openai", status_code=exc.status_code)
    return LLMError(str(exc), provider="openai")


def _is_retryable(err: LLMError) -> bool:
    if isinstance(err, (LLMConnectionError, LLMRateLimitError, LLMResponseError)):
        return True
    return err.status_code is not None and err.status_code >= 500


async def call_openai_chat_async(
    *,
    messages: List[Dict[str, str]],
    tier: str = "balanced",
    max_completion_tokens: int = 0,
    temperature: float = 0.7,
    json_mode: bool = True,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> Union[Dict[str, Any], str]:
    """One chat completion: a dict when *json_mode* is set, stripped text otherwise.

    *tier* (fast | balanced | advanced) picks the model unless *model* is
    given; *max_completion_tokens* <= 0 means the module default. Raises the
    typed LLMError of the last attempt once the retry is spent.
    """
    if api_key is None:
        api_key = get_openai_key()
    if model is None:
        model = get_openai_model(tier)
    if max_completion_tokens <= 0:
        max_completion_tokens = _DEFAULT_MAX_TOKENS

    kwargs: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "max_tokens": max_completion_tokens,
        "temperature": temperature,
    }
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    client = AsyncOpenAI(api_key=api_key, timeout=llm_request_timeout(), max_retries=0)
    last_error: Optional[LLMError] = None

    for attempt in range(_MAX_RETRIES + 1):
        t0 = time.time()
        print(f"🧠 [OPENAI] Calling {model} (attempt {attempt + 1}/{_MAX_RETRIES + 1})")
        try:
            completion = await client.chat.completions.create(**kwargs)
            duration = time.time() - t0

            usage = getattr(completion, "usage", None)
            if usage is not None:
                print(
                    f"🧠 [OPENAI] {duration:.1f}s, tokens: prompt={usage.prompt_tokens}, "
                    f"completion={usage.completion_tokens}, total={usage.total_tokens}"
                )

            raw_content = completion.choices[0].message.content if completion.choices else ""
            result = parse_llm_content(raw_content or "", json_mode=json_mode, provider="openai")
            print("🧠 [OPENAI] Success")
            return result

        except LLMResponseError as exc:
            last_error = exc
            logger.warning("[OPENAI] %s (attempt %d)", exc, attempt + 1)
        except openai.OpenAIError as exc:
            last_error = _translate_error(exc)
            logger.warning("[OPENAI] %s: %s", type(last_error).__name__, exc)

        if not _is_retryable(last_error) or attempt >= _MAX_RETRIES:
            break
        print("🔄 [OPENAI] Retrying...")

    raise last_error
