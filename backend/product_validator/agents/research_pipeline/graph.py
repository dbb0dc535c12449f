from langgraph.graph import StateGraph, START, END

from ...constants import PIPELINE_MAX_DISCUSSIONS
from ...schemas.research_schema import ResearchResult
from ...services.mock_data import fallback_insights
from .state import ResearchState
from .nodes import (
    generate_variations,
    search_discussions,
    generate_insights,
)
from .timing import log_timing


def create_research_graph() -> StateGraph:
    """
    Create the research pipeline graph.

    Structure:
    START -> generate_variations
          -> search_discussions
          -> generate_insights
          -> END

    Each step consumes the previous step's output, so edges are sequential.
    """
    log_timing("graph", "Creating research graph")

    graph = StateGraph(ResearchState)

    graph.add_node("generate_variations", generate_variations)
    graph.add_node("search_discussions", search_discussions)
    graph.add_node("generate_insights", generate_insights)

    graph.add_edge(START, "generate_variations")
    graph.add_edge("generate_variations", "search_discussions")
    graph.add_edge("search_discussions", "generate_insights")
    graph.add_edge("generate_insights", END)

    return graph


research_graph = create_research_graph().compile()


async def run_complete_research_pipeline(
    problem: str,
    target_audience: str = "",
    is_b2b: bool = True,
    max_results: int = PIPELINE_MAX_DISCUSSIONS,
) -> ResearchResult:
    """Run variations -> dork search -> insights and collect the outputs."""
    print("🔍 [RESEARCH] Starting research pipeline...")

    initial_state: ResearchState = {
        "problem": problem,
        "target_audience": target_audience,
        "is_b2b": is_b2b,
        "max_results": max_results,
        "variations": [],
        "discussions": [],
        "insights": None,
        "processing_errors": [],
    }
    final_state = await research_graph.ainvoke(initial_state)

    print("✅ [RESEARCH] Research pipeline completed!")
    return ResearchResult(
        variations=final_state.get("variations") or [],
        discussions=final_state.get("discussions") or [],
        insights=final_state.get("insights") or fallback_insights(),
        processing_errors=final_state.get("processing_errors") or [],
    )
