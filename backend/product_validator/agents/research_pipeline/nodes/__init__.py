# Research pipeline nodes package
from .variations import generate_variations
from .discussions import search_discussions
from .insights import generate_insights

__all__ = [
    "generate_variations",
    "search_discussions",
    "generate_insights",
]
