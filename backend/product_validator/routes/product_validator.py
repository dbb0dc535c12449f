"""Product Validator routes: LLM proxy, conversation, analysis, research, enrichment.

Endpoints:
  POST /api/product_validator/validate              Simulated deep market search
  POST /api/product_validator/outreach              Personalised outreach message
  POST /api/product_validator/contacts              Contact details for a person
  POST /api/product_validator/inbound-content       Inbound content pieces
  POST /api/product_validator/enrich-contacts       Start contact enrichment
  GET  /api/product_validator/enrichment-status/{id} Enrichment job state
  POST /api/product_validator/chat                  One conversation turn
  POST /api/product_validator/analysis              Full market analysis
  POST /api/product_validator/research              Research pipeline only

Missing required fields return 400 ``{"error": ...}``. LLM failures return
500 with a user-facing message.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..agents.market_analysis_agent.agent import generate_market_analysis
from ..agents.market_analysis_agent.icp_builder import detect_b2b
from ..agents.research_pipeline import run_complete_research_pipeline
from ..agents.validator_agent.generator import (
    find_contacts,
    generate_inbound_content,
    generate_outreach_message,
    run_deep_search,
)
from ..database import get_db
from ..schemas.analysis_schema import MarketAnalysis
from ..schemas.conversation_schema import AnalysisRequest, ChatRequest, ConversationTurn
from ..schemas.enrichment_schema import EnrichContactsRequest, EnrichmentStatusResponse
from ..schemas.research_schema import ResearchRequest, ResearchResult
from ..schemas.validator_schema import (
    ContactsRequest,
    ContactsResponse,
    InboundContentRequest,
    InboundContentResponse,
    OutreachRequest,
    OutreachResponse,
    ValidateRequest,
    as_json_text,
)
from ..services import enrichment_service
from ..services.conversation_service import analyze_user_input
from ..services.errors import LLMError, llm_error_message

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/product_validator",
    tags=["Product Validator"],
)


# ── Helpers ──────────────────────────────────────────────────────────────

def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def _llm_failure(endpoint: str, exc: LLMError) -> JSONResponse:
    print(f"❌ [{endpoint.upper()}] endpoint error: {exc}")
    message = llm_error_message(exc)
    content = {"error": message}
    if message == "Internal server error":
        content["details"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# ── LLM proxy endpoints ──────────────────────────────────────────────────

@router.post("/validate", summary="Deep Search Validation")
async def validate_product(body: ValidateRequest):
    """Simulated market research: discussions, people and insights.

    Returns ``{"raw": text}`` when the model did not answer with the
    expected JSON.
    """
    if _is_blank(body.productIdea):
        return _bad_request("productIdea is required")

    try:
        result = await run_deep_search(
            body.productIdea.strip(),
            context=body.context,
            resources_json=as_json_text(body.resourcesJSON) or None,
        )
    except LLMError as exc:
        return _llm_failure("validate", exc)

    if isinstance(result, dict):
        return result
    return result.model_dump(by_alias=True)


@router.post("/outreach", response_model=OutreachResponse, summary="Generate Outreach Message")
async def outreach(body: OutreachRequest):
    if _is_blank(body.productIdea) or _is_blank(body.searchResultsJSON) or _is_blank(body.targetPersonJSON):
        return _bad_request("productIdea, searchResultsJSON, and targetPersonJSON are required")

    try:
        message = await generate_outreach_message(
            body.productIdea.strip(),
            as_json_text(body.searchResultsJSON),
            as_json_text(body.targetPersonJSON),
        )
    except LLMError as exc:
        return _llm_failure("outreach", exc)

    return OutreachResponse(message=message)


@router.post("/contacts", response_model=ContactsResponse, response_model_exclude_none=True, summary="Find Contacts")
async def contacts(body: ContactsRequest):
    if _is_blank(body.targetPersonJSON):
        return _bad_request("targetPersonJSON is required")

    try:
        found = await find_contacts(as_json_text(body.targetPersonJSON))
    except LLMError as exc:
        return _llm_failure("contacts", exc)

    return ContactsResponse(contacts=found)


@router.post("/inbound-content", response_model=InboundContentResponse, summary="Generate Inbound Content")
async def inbound_content(body: InboundContentRequest):
    if _is_blank(body.productIdea):
        return _bad_request("productIdea is required")

    try:
        pieces = await generate_inbound_content(
            body.productIdea.strip(),
            as_json_text(body.insightsJSON),
            as_json_text(body.icpsJSON),
        )
    except LLMError as exc:
        return _llm_failure("inbound-content", exc)

    return InboundContentResponse(inbound_content=pieces)


# ── Contact enrichment ───────────────────────────────────────────────────

@router.post("/enrich-contacts", response_model=EnrichmentStatusResponse, summary="Enrich Prospects")
async def enrich_contacts(body: EnrichContactsRequest, db: Session = Depends(get_db)):
    if not body.prospects:
        return _bad_request("prospects is required")

    print(f"📇 [ENRICH] Enriching {len(body.prospects)} prospects")
    return await enrichment_service.start_enrichment(db, body.prospects)


@router.get(
    "/enrichment-status/{enrichment_id}",
    response_model=EnrichmentStatusResponse,
    summary="Enrichment Status",
)
async def enrichment_status(enrichment_id: str, db: Session = Depends(get_db)):
    result = await enrichment_service.get_status(db, enrichment_id)
    if result is None:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Enrichment not found"})
    return result


# ── Conversation / analysis / research ───────────────────────────────────

@router.post("/chat", response_model=ConversationTurn, summary="Conversation Turn")
async def chat(body: ChatRequest):
    if _is_blank(body.message):
        return _bad_request("message is required")

    return await analyze_user_input(body.message.strip(), body.context, body.has_resources)


@router.post("/analysis", response_model=MarketAnalysis, summary="Market Analysis")
async def analysis(body: AnalysisRequest):
    """Research pipeline + LLM analysis. Falls back to mock data, never 500s on LLM errors."""
    if body.context is None:
        return _bad_request("context is required")

    return await generate_market_analysis(body.context)


@router.post("/research", response_model=ResearchResult, summary="Research Pipeline")
async def research(body: ResearchRequest):
    if _is_blank(body.problem):
        return _bad_request("problem is required")

    problem = body.problem.strip()
    target = (body.target_audience or "").strip()
    is_b2b = body.is_b2b if body.is_b2b is not None else detect_b2b(target, problem)

    return await run_complete_research_pipeline(
        problem,
        target,
        is_b2b=is_b2b,
        max_results=body.max_results,
    )
