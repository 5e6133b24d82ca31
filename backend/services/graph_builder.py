"""
Graph Builder — constructs the LangGraph execution graph for blueprint
generation.

Graph:
    Conversation → Generate → Validate → (invalid & attempts left: back to Generate | otherwise: END)
"""

import asyncio
import logging
from typing import List

from langgraph.graph import StateGraph, END

from agents import generate_blueprint_node, validate_blueprint_node
from agents.errors import BlueprintGenerationError
from state import BlueprintGenerationState

logger = logging.getLogger(__name__)


def route_after_validation(state: BlueprintGenerationState) -> str:
    """
    Conditional edge function: determines next node after validation.

    Returns:
        "generate" if the blueprint was invalid and attempts remain.
        "end" otherwise (success or attempts exhausted).
    """
    if state.get("route_decision") == "retry":
        return "generate"
    return "end"


def build_generation_graph():
    """
    Build and compile the blueprint generation graph.

    Graph topology:
        generate → validate → (conditional) → generate | END

    Returns:
        A compiled LangGraph StateGraph ready for invocation.
    """
    graph = StateGraph(BlueprintGenerationState)

    graph.add_node("generate", generate_blueprint_node)
    graph.add_node("validate", validate_blueprint_node)

    graph.set_entry_point("generate")
    graph.add_edge("generate", "validate")

    # Validation decides whether to try again
    graph.add_conditional_edges(
        "validate",
        route_after_validation,
        {
            "generate": "generate",
            "end": END,
        },
    )

    return graph.compile()


def create_initial_state(conversation: List[dict]) -> BlueprintGenerationState:
    """Create a fresh BlueprintGenerationState for one generation request."""
    return BlueprintGenerationState(
        conversation=conversation,
        raw_response="",
        blueprint=None,
        errors=[],
        attempt=0,
        route_decision="",
    )


async def run_generation_async(conversation: List[dict]) -> dict:
    """
    Generate a validated blueprint from a clarification conversation.

    Returns:
        The {nodes, edges} blueprint dict.

    Raises:
        BlueprintGenerationError: If every attempt failed validation.
    """
    graph = build_generation_graph()
    initial_state = create_initial_state(conversation)

    # LangGraph's invoke is synchronous; run it in a thread pool to avoid
    # blocking the FastAPI event loop
    loop = asyncio.get_event_loop()
    final_state = await loop.run_in_executor(
        None,
        lambda: graph.invoke(initial_state),
    )

    if final_state.get("route_decision") != "done" or not final_state.get("blueprint"):
        errors = final_state.get("errors", [])
        logger.error("Blueprint generation failed after %d attempts: %s", final_state.get("attempt"), errors)
        raise BlueprintGenerationError(errors[-1] if errors else "Unknown error")

    return final_state["blueprint"]
