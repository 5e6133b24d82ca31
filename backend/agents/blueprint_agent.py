"""
Blueprint Agent — generates a blueprint graph from a clarification
conversation and validates its structure.

Two LangGraph node functions live here: the generator calls the model in
JSON mode, the validator checks the result and decides whether the graph
loops back for another attempt.
"""

import json
import time

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

import config
from agents.clarification_agent import to_langchain_messages
from agents.errors import AIResponseFormatError
from state import (
    BlueprintGenerationState,
    GENERATED_NODE_TYPES,
    MAX_GENERATION_ATTEMPTS,
    RETRY_DELAY_SECONDS,
)


_SYSTEM_PROMPT = """사용자와의 대화를 바탕으로 구체적인 청사진을 생성합니다.

다음과 같은 정확한 JSON 구조로만 응답하세요:

{
  "nodes": [
    {
      "id": "value-1",
      "type": "VALUE",
      "title": "가치관 제목",
      "description": "가치관 설명",
      "position": { "x": 250, "y": 25 }
    },
    {
      "id": "long-goal-1",
      "type": "LONG_GOAL",
      "title": "장기목표 제목",
      "description": "장기목표 설명",
      "position": { "x": 150, "y": 125 }
    }
  ],
  "edges": [
    {
      "id": "edge-1",
      "source": "value-1",
      "target": "long-goal-1"
    }
  ]
}

노드 타입과 배치:
- VALUE (가치관): 1-2개, y=25, x=200~300
- LONG_GOAL (장기목표): 1-2개, y=125, x=100~400
- SHORT_GOAL (단기목표): 2-3개, y=225, x=50~450
- PLAN (계획): 3-4개, y=325, x=25~475
- TASK (할일): 4-6개, y=425, x=0~500

반드시 nodes 배열과 edges 배열을 포함한 JSON만 응답하세요."""

_FINAL_REQUEST = "지금까지의 대화를 바탕으로 청사진을 생성해주세요."


def parse_blueprint_response(content: str) -> dict:
    """
    Parse and validate a generated blueprint.

    Raises:
        AIResponseFormatError: If the JSON is malformed or a node is invalid.
    """
    try:
        blueprint = json.loads(content)
    except json.JSONDecodeError as exc:
        raise AIResponseFormatError(f"JSON 파싱 실패: {exc}") from exc

    if not isinstance(blueprint, dict):
        raise AIResponseFormatError("청사진은 JSON 객체여야 합니다.")

    nodes = blueprint.get("nodes")
    if not isinstance(nodes, list) or not nodes:
        raise AIResponseFormatError("노드가 없거나 잘못된 형식입니다.")

    if not isinstance(blueprint.get("edges"), list):
        raise AIResponseFormatError("연결 정보가 없거나 잘못된 형식입니다.")

    for node in nodes:
        if not isinstance(node, dict) or not all(
            node.get(field) for field in ("id", "type", "title", "position")
        ):
            node_id = node.get("id") if isinstance(node, dict) else None
            raise AIResponseFormatError(f"노드 {node_id or 'unknown'}의 필수 정보가 누락되었습니다.")
        if node["type"] not in GENERATED_NODE_TYPES:
            raise AIResponseFormatError(f"잘못된 노드 타입: {node['type']}")

    return blueprint


def generate_blueprint_node(state: BlueprintGenerationState) -> dict:
    """
    LangGraph node: ask the model for a blueprint in JSON mode.

    LLM failures are recorded as an empty response so the validator counts
    the attempt and routes to a retry.
    """
    if state.get("attempt", 0) > 0:
        time.sleep(RETRY_DELAY_SECONDS)

    messages = [
        SystemMessage(content=_SYSTEM_PROMPT),
        *to_langchain_messages(state["conversation"]),
        HumanMessage(content=_FINAL_REQUEST),
    ]

    result: dict = {"attempt": state.get("attempt", 0) + 1}
    try:
        llm = ChatOpenAI(
            model="gpt-4o-mini",
            api_key=config.openai_api_key(),
            temperature=0.3,
            max_tokens=2000,
        ).bind(response_format={"type": "json_object"})
        response = llm.invoke(messages)
    except Exception as exc:  # noqa: BLE001
        result["raw_response"] = ""
        result["errors"] = [f"LLM error: {exc}"]
        return result

    result["raw_response"] = response.content or ""
    return result


def validate_blueprint_node(state: BlueprintGenerationState) -> dict:
    """
    LangGraph node: validate the latest response and set route_decision.

    Returns "done" with the blueprint, "retry" while attempts remain, or
    "fail" once MAX_GENERATION_ATTEMPTS is reached.
    """
    try:
        blueprint = parse_blueprint_response(state["raw_response"])
    except AIResponseFormatError as exc:
        exhausted = state.get("attempt", 0) >= MAX_GENERATION_ATTEMPTS
        return {
            "errors": [str(exc)],
            "route_decision": "fail" if exhausted else "retry",
        }

    return {"blueprint": blueprint, "route_decision": "done"}
