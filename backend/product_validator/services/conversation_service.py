"""Conversation phase: gather product idea, audience and problem before analysis.

Flow:
  1. Build a system prompt describing what is already known
  2. Ask the fast-tier model for the next assistant message
  3. Update the context from keywords in the user's message
  4. Proceed to analysis once the model says it is ready, or after
     MAX_CONVERSATION_EXCHANGES user messages

LLM Config:
  - tier: fast
  - temperature: 0.7
  - max_tokens: 500
  - NO json mode
"""

from __future__ import annotations

import json
import logging

from ..constants import (
    AUDIENCE_MARKERS,
    MAX_CONVERSATION_EXCHANGES,
    PROBLEM_MARKERS,
    PRODUCT_MARKERS,
    READY_PHRASES,
)
from ..schemas.conversation_schema import ConversationContext, ConversationTurn
from .errors import LLMError
from .llm_router import complete_text, llm_available

logger = logging.getLogger(__name__)

_CHAT_TEMPERATURE = 0.7
_CHAT_MAX_TOKENS = 500

_APOLOGY = "I'm having trouble connecting to my analysis engine. Could you try again in a moment?"


def _build_system_prompt(context: ConversationContext, has_resources: bool) -> str:
    return f"""\
You are an AI product validation expert helping entrepreneurs refine their product ideas. Your goal is to gather enough information through MAXIMUM {MAX_CONVERSATION_EXCHANGES} messages before proceeding to deep analysis.

Current context:
- Message count: {context.message_count}
- Stage: {context.stage}
- Has product idea: {bool(context.product_idea)}
- Has resources: {has_resources}
- Has target audience: {bool(context.target_audience)}
- Has problem description: {bool(context.problem_description)}

Guidelines:
1. MAXIMUM {MAX_CONVERSATION_EXCHANGES} question-answer exchanges allowed
2. If message count >= {MAX_CONVERSATION_EXCHANGES}, ALWAYS proceed to analysis regardless of information completeness
3. If user only provides a vague product idea, ask for target audience and problem details
4. If user only provides resources, ask about their product concept and target market
5. Be conversational and focused on gathering the most critical insights quickly
6. Don't ask more than 2 questions per response
7. After {MAX_CONVERSATION_EXCHANGES} exchanges OR when you have enough info, ALWAYS end with: "{READY_PHRASES[0]}"

Respond in a helpful, conversational tone, in the user's language."""


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


def extract_context_updates(message: str, context: ConversationContext) -> ConversationContext:
    """Count the message and copy it into whichever fields its keywords suggest."""
    lowered = message.lower()
    update: dict = {"message_count": context.message_count + 1}

    if _contains_any(lowered, AUDIENCE_MARKERS):
        update["target_audience"] = message
    if _contains_any(lowered, PROBLEM_MARKERS):
        update["problem_description"] = message
    if not context.product_idea and _contains_any(lowered, PRODUCT_MARKERS):
        update["product_idea"] = message

    return context.model_copy(update=update)


def _guiding_question(context: ConversationContext, has_resources: bool) -> str:
    """Deterministic reply used when no LLM provider is configured."""
    missing = []
    if not context.product_idea and not has_resources:
        missing.append("what your product does")
    if not context.target_audience:
        missing.append("who your target customers are")
    if not context.problem_description:
        missing.append("which problem it solves for them")

    if not missing:
        return f"Thanks, that's a clear picture. {READY_PHRASES[0]}"
    if len(missing) == 1:
        return f"Thanks! Could you tell me {missing[0]}?"
    return f"Thanks! Could you tell me {', '.join(missing[:-1])} and {missing[-1]}?"


def should_proceed(response: str, context: ConversationContext) -> bool:
    return any(phrase in response for phrase in READY_PHRASES) or (
        context.message_count >= MAX_CONVERSATION_EXCHANGES
    )


async def analyze_user_input(
    message: str,
    context: ConversationContext,
    has_resources: bool = False,
) -> ConversationTurn:
    """Produce the next assistant message and the updated conversation context."""
    updated = extract_context_updates(message, context)

    if not llm_available():
        response = _guiding_question(updated, has_resources)
    else:
        user_prompt = (
            f'User message: "{message}"\n\n'
            f"Context: {json.dumps(context.model_dump(by_alias=True, exclude_none=True), indent=2)}"
        )
        try:
            response = await complete_text(
                user_prompt,
                system=_build_system_prompt(context, has_resources),
                tier="fast",
                max_tokens=_CHAT_MAX_TOKENS,
                temperature=_CHAT_TEMPERATURE,
            )
        except LLMError as e:
            logger.warning("[CHAT] LLM call failed: %s", e)
            return ConversationTurn(
                response=_APOLOGY,
                updated_context=context.model_copy(update={"message_count": context.message_count + 1}),
                should_proceed_to_analysis=False,
            )

    proceed = should_proceed(response, updated)
    updated = updated.model_copy(update={"stage": "ready_for_analysis" if proceed else "gathering"})

    return ConversationTurn(
        response=response,
        updated_context=updated,
        should_proceed_to_analysis=proceed,
    )
