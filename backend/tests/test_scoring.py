"""Relevance scoring, dork building and profile extraction (pure functions)."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import re

from product_validator.agents.research_pipeline.scoring import (
    build_google_dork,
    calculate_advanced_score,
    estimate_engagement,
    extract_profile_name,
    generate_profile_url,
)
from product_validator.schemas.research_schema import SerpResult


class TestCalculateAdvancedScore:
    def test_base_plus_platform_boost(self):
        assert calculate_advanced_score("", "anything", "reddit.com") == 60
        assert calculate_advanced_score("", "anything", "linkedin.com") == 65
        assert calculate_advanced_score("", "anything", "quora.com") == 55

    def test_unknown_platform_uses_default_boost(self):
        assert calculate_advanced_score("", "anything", "indiehackers.com") == 50

    def test_keyword_points_are_capped_per_word(self):
        content = "invoice " * 10
        # 10 occurrences -> 50 points, capped at 20
        assert calculate_advanced_score(content, "invoice", "reddit.com") == 80

    def test_keyword_points_per_occurrence(self):
        content = "one invoice here, another invoice there"
        assert calculate_advanced_score(content, "invoice", "reddit.com") == 70

    def test_short_query_words_are_ignored(self):
        assert calculate_advanced_score("how to fix it", "how to fix it", "reddit.com") == 60

    def test_keyword_match_is_case_insensitive(self):
        assert calculate_advanced_score("INVOICE", "Invoice", "reddit.com") == 65

    def test_query_words_are_matched_literally(self):
        # "." must not act as a regex wildcard
        assert calculate_advanced_score("nodexjs", "node.js", "reddit.com") == 60
        assert calculate_advanced_score("node.js", "node.js", "reddit.com") == 65

    def test_length_bonuses(self):
        assert calculate_advanced_score("x" * 201, "zzzz", "reddit.com") == 70
        assert calculate_advanced_score("x" * 501, "zzzz", "reddit.com") == 75

    def test_frustration_words(self):
        content = "so frustrated, annoying problem"
        assert calculate_advanced_score(content, "zzzz", "reddit.com") == 69

    def test_engagement_mention(self):
        assert calculate_advanced_score("120 upvotes", "zzzz", "reddit.com") == 65
        assert calculate_advanced_score("12 likes", "zzzz", "reddit.com") == 65

    def test_engagement_mention_is_case_sensitive(self):
        assert calculate_advanced_score("120 Upvotes", "zzzz", "reddit.com") == 60
        assert calculate_advanced_score("COMMENTS", "zzzz", "reddit.com") == 60

    def test_score_is_clamped_to_100(self):
        content = (
            "frustrated annoying difficult problem issue struggle hard impossible "
            "hate terrible invoice reminders "
        ) * 6 + "likes"
        assert calculate_advanced_score(content, "invoice reminders", "linkedin.com") == 100


class TestGoogleDork:
    def test_site_and_quoted_phrase(self):
        assert build_google_dork("reddit.com", "invoice reminders") == 'site:reddit.com "invoice reminders"'

    def test_embedded_quotes_are_stripped(self):
        assert build_google_dork("quora.com", 'the "best" tool') == 'site:quora.com "the best tool"'


class TestProfileExtraction:
    def test_reddit_user_from_url(self):
        url = "https://reddit.com/u/jane_doe/comments/abc"
        assert extract_profile_name(url, "A title", "reddit.com") == "jane_doe"
        assert generate_profile_url(url, "reddit.com") == "https://reddit.com/u/jane_doe"

    def test_reddit_without_user(self):
        url = "https://reddit.com/r/freelance/comments/abc"
        assert extract_profile_name(url, "A title", "reddit.com") == "RedditUser"
        assert generate_profile_url(url, "reddit.com") == url

    def test_linkedin_name_from_title(self):
        title = "Jane Doe on LinkedIn: chasing invoices again"
        assert extract_profile_name("https://linkedin.com/posts/x", title, "linkedin.com") == "Jane Doe"
        assert extract_profile_name("https://linkedin.com/posts/x", "Post", "linkedin.com") == "LinkedIn Professional"

    def test_linkedin_profile_url_is_discussion(self):
        url = "https://linkedin.com/posts/x"
        assert generate_profile_url(url, "linkedin.com") == url

    def test_quora_name_from_title(self):
        assert extract_profile_name("https://quora.com/q", "John Smith - Quora", "quora.com") == "John Smith"
        assert extract_profile_name("https://quora.com/q", "Question", "quora.com") == "Quora Expert"

    def test_generic_platform(self):
        assert extract_profile_name("https://medium.com/p", "Post", "medium.com") == "mediumUser"


class TestEstimateEngagement:
    def test_counts_from_snippet_win(self):
        hit = SerpResult(title="Post", url="https://reddit.com/r/x/1", description="1,204 upvotes and 37 comments")
        assert estimate_engagement(hit).startswith("1204 likes, 37 comments")

    def test_derived_counts_are_stable_and_in_range(self):
        for i in range(20):
            hit = SerpResult(title="Post", url=f"https://example.com/thread/{i}", description="No numbers here")
            first = estimate_engagement(hit)
            assert first == estimate_engagement(hit)

            match = re.match(r"^(\d+) likes, (\d+) comments(?:, (\d+) shares)?$", first)
            assert match is not None
            likes, comments, shares = match.groups()
            assert 10 <= int(likes) <= 209
            assert 2 <= int(comments) <= 51
            if shares is not None:
                assert 1 <= int(shares) <= 19
