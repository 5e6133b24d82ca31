"""
Goal Assistant Agent — a friendly SMART-goal coach for the "new goal" chat.

When the coach considers the goal ready it embeds a JSON block with
``"ready": true``; that block is parsed into a goal suggestion. Without an
OpenAI key the assistant answers from a small set of canned replies so the
chat stays usable in development.
"""

import json
import logging
import random
import re
from typing import List, Optional

from langchain_core.messages import SystemMessage
from langchain_openai import ChatOpenAI

import config
from agents.clarification_agent import to_langchain_messages

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """당신은 사용자가 목표를 설정하고 구체화하는 것을 돕는 친근한 코치입니다.

역할:
1. 사용자가 막연한 목표를 구체적이고 실행 가능한 목표로 만들도록 도와주세요
2. SMART 원칙(구체적, 측정가능, 달성가능, 관련성, 시간제한)을 적용하되 너무 딱딱하지 않게 안내하세요
3. 따뜻하고 격려하는 톤을 유지하세요
4. 이모지를 적절히 사용해서 친근함을 표현하세요

목표 구체화 체크리스트:
✅ 무엇을 달성하고 싶은가? (What)
✅ 왜 이것이 중요한가? (Why)
✅ 언제까지 달성할 것인가? (When)
✅ 어떻게 측정할 것인가? (How to measure)
✅ 첫 번째 작은 단계는 무엇인가? (First step)

대화가 충분히 진행되면, 다음 형식으로 목표를 정리해주세요:
{
  "ready": true,
  "goal": {
    "title": "구체적인 목표 제목",
    "description": "목표에 대한 설명",
    "category": "health|career|learning|hobby|relationship|other",
    "deadline": "YYYY-MM-DD 형식의 날짜",
    "firstSteps": ["첫 번째 단계", "두 번째 단계"]
  }
}

사용자가 복잡한 계획, 여러 목표의 관계, 장기적인 관점을 언급하면 청사진 변환을 제안하세요:
{
  "blueprintSuggestion": true,
  "reason": "제안 이유",
  "benefits": ["청사진의 장점1", "청사진의 장점2"]
}"""

MOCK_RESPONSES = [
    '좋은 목표네요! 더 구체적으로 만들어볼까요? 예를 들어, "운동하기"보다는 "주 3회 30분씩 조깅하기"처럼 구체적으로 정하면 어떨까요?',
    "멋진 목표입니다! 언제까지 이루고 싶으신가요? 그리고 어떻게 진전을 측정할 수 있을까요?",
    "훌륭해요! 이제 첫 번째 작은 단계를 정해볼까요? 내일 당장 시작할 수 있는 것은 무엇일까요?",
]

MOCK_GOAL_SUGGESTION = {
    "ready": True,
    "goal": {
        "title": "매일 30분 운동하기",
        "description": "건강한 생활습관을 만들고 체력을 향상시키기 위해 매일 꾸준히 운동하기",
        "category": "health",
        "deadline": "2025-12-31",
        "firstSteps": ["운동복과 운동화 준비하기", "운동 시간 정하기", "첫 운동 계획 세우기"],
    },
}

# Conversations longer than this get a goal suggestion from the mock coach
MOCK_SUGGESTION_AFTER = 4

_SUGGESTION_PATTERN = re.compile(r'\{[\s\S]*"ready"[\s\S]*\}')


def extract_goal_suggestion(content: Optional[str]) -> Optional[dict]:
    """Parse the embedded ``"ready": true`` JSON block, if any."""
    if not content or '"ready": true' not in content:
        return None
    match = _SUGGESTION_PATTERN.search(content)
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        logger.warning("Failed to parse goal suggestion from assistant reply")
        return None


def mock_reply(messages: List[dict]) -> dict:
    if len(messages) > MOCK_SUGGESTION_AFTER:
        return {
            "content": "좋아요! 충분히 구체화된 것 같네요. 이제 목표를 만들어볼까요? 🎯",
            "goalSuggestion": MOCK_GOAL_SUGGESTION,
        }
    return {"content": random.choice(MOCK_RESPONSES)}


def assist(messages: List[dict]) -> dict:
    """Answer the latest turn of the goal chat."""
    if not config.is_openai_configured():
        return mock_reply(messages)

    llm = ChatOpenAI(
        model="gpt-4",
        api_key=config.openai_api_key(),
        temperature=0.7,
        max_tokens=500,
    )

    response = llm.invoke([SystemMessage(content=_SYSTEM_PROMPT), *to_langchain_messages(messages)])
    return {
        "content": response.content,
        "goalSuggestion": extract_goal_suggestion(response.content),
    }
