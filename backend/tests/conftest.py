"""Shared fixtures: every test starts in mock mode with no API keys."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

_API_ENV_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "LLM_PROVIDER",
    "RAPIDAPI_KEY",
    "FULLENRICH_API_KEY",
    "DEBUG",
    "SERP_API_HOST",
    "PUBLIC_BASE_URL",
    "OPENAI_MODEL_FAST",
    "OPENAI_MODEL_BALANCED",
    "OPENAI_MODEL_ADVANCED",
    "ANTHROPIC_MODEL_FAST",
    "ANTHROPIC_MODEL_BALANCED",
    "ANTHROPIC_MODEL_ADVANCED",
)


@pytest.fixture(autouse=True)
def mock_mode_env(monkeypatch):
    """Drop keys a local .env may have loaded; disable the SERP politeness delay."""
    for key in _API_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SERP_REQUEST_DELAY", "0")
    yield
