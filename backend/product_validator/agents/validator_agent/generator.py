"""Product Validator generators: deep search, outreach, contacts, inbound content.

Each generator uses the active LLM provider through `llm_router`. With no
provider configured they return the fixed mock payloads so the API stays
usable for demos. Provider failures propagate as `LLMError` for the route
to translate.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from ...schemas.analysis_schema import InboundContent
from ...schemas.validator_schema import ContactInfo, ValidateResponse
from ...services.errors import LLMResponseError
from ...services.llm_router import complete_json, complete_text, llm_available, provider_name
from ...services.mock_data import (
    MOCK_OUTREACH_MESSAGE,
    mock_contacts,
    mock_inbound_content,
    mock_validation,
)
from ...services.openai_client import sanitize_json
from .prompts import (
    build_contacts_prompt,
    build_deep_search_prompt,
    build_inbound_content_prompt,
    build_outreach_prompt,
)

logger = logging.getLogger(__name__)

# Low temperature keeps generated "research" close to the prompt's structure.
_TEMPERATURE = 0.2
_DEEP_SEARCH_MAX_TOKENS = 3000
_INBOUND_MAX_TOKENS = 3000


def _using_mock(endpoint: str) -> bool:
    if llm_available():
        return False
    print(f"⚠️  [{endpoint.upper()}] Using mock data (no LLM API key)")
    return True


def _try_parse_object(text: str) -> Optional[dict[str, Any]]:
    try:
        parsed = json.loads(sanitize_json(text))
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


async def run_deep_search(
    product_idea: str,
    context: Optional[str] = None,
    resources_json: Optional[str] = None,
) -> Union[ValidateResponse, dict[str, str]]:
    """Simulated market research for *product_idea*.

    Returns the structured findings, or ``{"raw": text}`` when the model's
    answer is not the expected JSON.
    """
    if _using_mock("validate"):
        return mock_validation()

    print(f"🔍 [VALIDATE] Validating product idea: {product_idea[:100]}...")
    text = await complete_text(
        build_deep_search_prompt(product_idea, context, resources_json),
        tier="advanced",
        max_tokens=_DEEP_SEARCH_MAX_TOKENS,
        temperature=_TEMPERATURE,
    )
    print(f"✅ [VALIDATE] Received response from {provider_name()}")

    parsed = _try_parse_object(text)
    if parsed is None:
        print("⚠️ [VALIDATE] Response was not valid JSON, returning as raw")
        return {"raw": text}
    try:
        return ValidateResponse.model_validate(parsed)
    except ValidationError as e:
        logger.warning("[VALIDATE] Unexpected findings shape: %s", e)
        return {"raw": text}


async def generate_outreach_message(
    product_idea: str,
    search_results_json: str,
    target_person_json: str,
) -> str:
    if _using_mock("outreach"):
        return MOCK_OUTREACH_MESSAGE

    print("📤 [OUTREACH] Generating outreach message...")
    message = await complete_text(
        build_outreach_prompt(product_idea, search_results_json, target_person_json),
        tier="balanced",
        max_tokens=600,
        temperature=_TEMPERATURE,
    )
    print("✅ [OUTREACH] Generated outreach message")
    return message


async def find_contacts(target_person_json: str) -> ContactInfo:
    if _using_mock("contacts"):
        return mock_contacts()

    print("🔍 [CONTACTS] Finding contact information...")
    data = await complete_json(
        build_contacts_prompt(target_person_json),
        tier="balanced",
        max_tokens=800,
        temperature=_TEMPERATURE,
    )
    # Models sometimes answer with JSON null for fields they could not find.
    cleaned = {key: value for key, value in data.items() if value not in (None, "")}
    try:
        contacts = ContactInfo.model_validate(cleaned)
    except ValidationError as e:
        raise LLMResponseError(f"Invalid contacts JSON: {e}", provider=provider_name()) from e
    print("✅ [CONTACTS] Found contact information")
    return contacts


async def generate_inbound_content(
    product_idea: str,
    insights_json: str = "",
    icps_json: str = "",
) -> list[InboundContent]:
    if _using_mock("inbound-content"):
        return mock_inbound_content(product_idea)

    print("✍️ [INBOUND] Generating inbound content...")
    data = await complete_json(
        build_inbound_content_prompt(product_idea, insights_json, icps_json),
        tier="balanced",
        max_tokens=_INBOUND_MAX_TOKENS,
        temperature=0.7,
    )

    raw_items = data.get("inboundContent") or data.get("inbound_content") or []
    pieces: list[InboundContent] = []
    for item in raw_items if isinstance(raw_items, list) else []:
        try:
            pieces.append(InboundContent.model_validate(item))
        except ValidationError as e:
            logger.warning("[INBOUND] Skipping malformed content piece: %s", e)

    if not pieces:
        raise LLMResponseError("No inbound content returned", provider=provider_name())
    print(f"✅ [INBOUND] {len(pieces)} content pieces")
    return pieces
