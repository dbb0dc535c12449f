from .conversation_service import analyze_user_input
from .llm_router import complete_json, complete_text, get_provider, llm_available
from .serp_client import search_with_google_dorks

__all__ = [
    "analyze_user_input",
    "complete_json",
    "complete_text",
    "get_provider",
    "llm_available",
    "search_with_google_dorks",
]
