"""Environment-driven configuration.

Values are read at call time (not import time) so a changed environment,
e.g. in tests, is picked up without reloading modules.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load environment variables from .env file (before anything reads them)
load_dotenv()

# Values shipped in .env.example that must not count as a real key.
_PLACEHOLDER_PREFIX = "your_"


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_bool(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_secret(key: str) -> str:
    """Return the stripped value of *key*, or "" when unset or a placeholder."""
    value = os.getenv(key, "").strip()
    if not value or value.lower().startswith(_PLACEHOLDER_PREFIX):
        return ""
    return value


def openai_key_set() -> bool:
    return bool(get_secret("OPENAI_API_KEY"))


def anthropic_key_set() -> bool:
    return bool(get_secret("ANTHROPIC_API_KEY"))


def llm_request_timeout() -> float:
    return _env_float("LLM_REQUEST_TIMEOUT", 40.0)


def serp_request_delay() -> float:
    """Seconds to wait before each SERP request inside the dork search loop."""
    return max(_env_float("SERP_REQUEST_DELAY", 0.5), 0.0)


def serp_api_host() -> str:
    return os.getenv("SERP_API_HOST", "google-search74.p.rapidapi.com").strip()


def public_base_url() -> str:
    return os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").strip().rstrip("/")


def database_url() -> str:
    return os.getenv("DATABASE_URL", "sqlite:///./product_validator.db")


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "")
    if not raw.strip():
        return [
            "http://localhost:5173",      # Vite dev server
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def debug_enabled() -> bool:
    return _env_bool("DEBUG", False)
