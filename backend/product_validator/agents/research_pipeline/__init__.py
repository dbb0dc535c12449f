from .graph import research_graph, run_complete_research_pipeline
from .nodes.discussions import search_discussions_with_dorks
from .nodes.insights import generate_research_insights
from .nodes.variations import generate_problem_variations

__all__ = [
    "research_graph",
    "run_complete_research_pipeline",
    "generate_problem_variations",
    "search_discussions_with_dorks",
    "generate_research_insights",
]
