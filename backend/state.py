"""
BlueprintGenerationState — the data structure passed between the nodes of
the blueprint generation graph in LangGraph.

Nodes must not store state internally; everything passes through
BlueprintGenerationState.
"""

from typing import Annotated, List, Optional
import operator
from typing_extensions import TypedDict


class BlueprintGenerationState(TypedDict):
    """
    The state shared across the generate → validate loop.

    Fields:
        conversation:   The clarification conversation ({role, content} dicts)
                        the blueprint is generated from.
        raw_response:   The latest raw model output.
        blueprint:      The validated {nodes, edges} dict, once one passes.
        errors:         Validation/LLM errors of each failed attempt.
                        Uses operator.add so errors accumulate.
        attempt:        How many generation attempts have been made.
        route_decision: Routing signal for the conditional edge.
                        Values: "done" | "retry" | "fail".
    """

    conversation: list
    raw_response: str
    blueprint: Optional[dict]
    errors: Annotated[List[str], operator.add]
    attempt: int
    route_decision: str


# Upper bound on generation attempts before giving up
MAX_GENERATION_ATTEMPTS = 3

# Pause before a retry, in seconds
RETRY_DELAY_SECONDS = 1.0

# Node types the generator may emit
GENERATED_NODE_TYPES = ("VALUE", "LONG_GOAL", "SHORT_GOAL", "PLAN", "TASK")
