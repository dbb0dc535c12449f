"""Centralized constants shared across the research pipeline and routes.

Platform lists, scoring weights and conversation markers live here so the
pipeline, the market analysis agent and the tests read the same values.
"""

from __future__ import annotations

# ── Search platforms ───────────────────────────────────────────────────
# score_boost is added to the base relevance score of every result found on
# that platform. Platforms missing from this map use DEFAULT_SCORE_BOOST.

PLATFORM_CONFIG: dict[str, dict[str, int]] = {
    "reddit.com": {"score_boost": 25},
    "linkedin.com": {"score_boost": 30},
    "quora.com": {"score_boost": 20},
    "medium.com": {"score_boost": 15},
    "news.ycombinator.com": {"score_boost": 20},
    "stackoverflow.com": {"score_boost": 25},
}

DEFAULT_SCORE_BOOST: int = 15

B2B_PLATFORMS: list[str] = [
    "reddit.com",
    "linkedin.com",
    "quora.com",
    "medium.com",
    "news.ycombinator.com",
    "stackoverflow.com",
    "github.com",
    "producthunt.com",
    "indiehackers.com",
]

B2C_PLATFORMS: list[str] = [
    "reddit.com",
    "quora.com",
    "commentcamarche.net",
    "doctissimo.fr",
    "aufeminin.com",
    "marmiton.org",
    "psychologies.com",
    "tomsguide.fr",
]

# ── Research pipeline limits ───────────────────────────────────────────
MAX_VARIATIONS_SEARCHED: int = 5
MAX_PLATFORMS_SEARCHED: int = 4
SERP_RESULTS_PER_QUERY: int = 10
MIN_RELEVANCE_SCORE: int = 45
PIPELINE_MAX_DISCUSSIONS: int = 20
DEFAULT_SEARCH_MAX_RESULTS: int = 50

# ── Relevance scoring ──────────────────────────────────────────────────
BASE_RELEVANCE_SCORE: int = 35
KEYWORD_POINTS_PER_HIT: int = 5
KEYWORD_POINTS_CAP: int = 20
FRUSTRATION_POINTS: int = 3
ENGAGEMENT_MENTION_POINTS: int = 5

FRUSTRATION_WORDS: tuple[str, ...] = (
    "frustrated",
    "annoying",
    "difficult",
    "problem",
    "issue",
    "struggle",
    "hard",
    "impossible",
    "hate",
    "terrible",
)

ENGAGEMENT_MARKERS: tuple[str, ...] = ("upvotes", "likes", "comments")

VARIATION_TYPES: frozenset[str] = frozenset({"question", "statement", "pain_point"})
INSIGHT_SENTIMENTS: frozenset[str] = frozenset({"negative", "positive", "neutral"})

# ── B2B detection ──────────────────────────────────────────────────────
B2B_AUDIENCE_MARKERS: tuple[str, ...] = ("business", "professional", "company")
B2B_PROBLEM_MARKERS: tuple[str, ...] = ("saas", "enterprise", "b2b")

B2B_CHANNELS: list[str] = ["LinkedIn", "Reddit", "Industry Forums"]
B2C_CHANNELS: list[str] = ["Reddit", "Facebook", "Twitter"]

# ── Conversation ───────────────────────────────────────────────────────
MAX_CONVERSATION_EXCHANGES: int = 3

READY_PHRASES: tuple[str, ...] = (
    "I have enough information to start the analysis!",
    "I think we have enough to start the analysis!",
    "J'ai assez d'informations pour commencer l'analyse!",
)

AUDIENCE_MARKERS: tuple[str, ...] = ("target", "audience", "customer", "client", "utilisateur")
PROBLEM_MARKERS: tuple[str, ...] = ("problem", "pain", "solve", "problème", "douleur", "résoudre")
PRODUCT_MARKERS: tuple[str, ...] = ("product", "app", "service", "solution", "produit")

# ── LLM model tiers ────────────────────────────────────────────────────
# Overridable with OPENAI_MODEL_<TIER> / ANTHROPIC_MODEL_<TIER>.
OPENAI_MODELS: dict[str, str] = {
    "fast": "gpt-4.1-mini",
    "balanced": "gpt-4.1",
    "advanced": "gpt-4.1",
}

ANTHROPIC_MODELS: dict[str, str] = {
    "fast": "claude-3-5-haiku-latest",
    "balanced": "claude-sonnet-4-0",
    "advanced": "claude-opus-4-0",
}

LLM_TIERS: frozenset[str] = frozenset(OPENAI_MODELS)
