"""Prompt templates for the research pipeline LLM steps."""

from __future__ import annotations

from ...schemas.research_schema import DiscussionResult

VARIATION_COUNT = 20

# Keep insights prompts bounded when the search returns long snippets.
_MAX_SNIPPET_CHARS = 600


# ── Step 1: problem variations ───────────────────────────────────────────

VARIATIONS_SYSTEM_INSTRUCTION = """\
You are a user-research assistant who rewrites a problem statement the way real
people would type it into a search engine or a forum post.
Output valid JSON ONLY. No markdown, no explanation.
"""


def build_variations_prompt(problem: str) -> str:
    return f"""\
Generate {VARIATION_COUNT} VERY DIFFERENT variations of this problem for user research:

Original problem: "{problem}"

Instructions:
- Use technical synonyms and domain vocabulary
- Write user questions ("How to...", "Why...", "What tool...")
- Explore related problems and sub-problems
- Vary the expertise level (beginner to expert)
- Include both negative and positive phrasings
- Think about different angles of approach

Required JSON format:
{{
  "variations": [
    {{
      "text": "variation of the problem",
      "reasoning": "why this variation is relevant",
      "type": "question|statement|pain_point"
    }}
  ]
}}

Return ONLY the JSON, no other text."""


# ── Step 3: research insights ────────────────────────────────────────────

def _format_discussion(discussion: DiscussionResult) -> str:
    content = discussion.content
    if len(content) > _MAX_SNIPPET_CHARS:
        content = content[:_MAX_SNIPPET_CHARS] + "..."
    return f"[{discussion.platform}] {discussion.title}\n{content}"


def build_insights_prompt(discussions: list[DiscussionResult], problem: str) -> str:
    if discussions:
        found = "\n\n".join(_format_discussion(d) for d in discussions)
    else:
        found = "(no public discussions were found; rely on your knowledge of this market)"

    return f"""\
Analyse these user discussions and produce insights for user research:

Problem: "{problem}"

Discussions found:
{found}

Return a JSON object:
{{
  "overview": "General summary (2-3 sentences)",
  "painPoints": ["Pain point 1", "Pain point 2", "Pain point 3"],
  "segments": ["User segment 1", "User segment 2", "User segment 3"],
  "opportunities": ["Business opportunity 1", "Business opportunity 2"],
  "sentiment": "negative|positive|neutral",
  "keyInsights": ["Key insight 1", "Key insight 2", "Key insight 3"]
}}

Return ONLY the JSON, no other text."""
