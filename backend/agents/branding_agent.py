"""
Branding Agent — writes three short personal-branding statements from the
identities, achievements and activities found in a user's blueprints.

Chain: ChatPromptTemplate → ChatOpenAI → JsonOutputParser.
"""

import logging

from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

import config
from agents.errors import AIConfigurationError, AIResponseFormatError
from services.branding_analysis import BrandingData

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """당신은 간결한 퍼스널 브랜딩 문장을 만드는 전문가입니다.
사용자의 정체성과 핵심 성취를 조합하여 한 문장으로 표현해주세요.

예시:
- "심리학을 전공한 현직 스타트업 PM"
- "SQLD 자격증을 보유한 데이터 분석가"
- "부업으로 월 500만원 달성한 마케터"
- "비전공자 출신 풀스택 개발자"

가이드라인:
1. 10-20자 내외의 매우 간결한 문장
2. [성취/특징] + [정체성] 구조
3. 구체적이고 팩트 기반
4. 불필요한 수식어 제거

항상 유효한 JSON 형식으로 응답하세요."""

_HUMAN_PROMPT = """사용자 데이터:
- 주요 정체성: {identities}
- 핵심 성취: {achievements}
- 현재 활동: {currentActivities}
- 특별한 특징: {uniqueTraits}

3가지 다른 브랜딩 문장을 생성해주세요.

응답 형식(JSON):
{{
  "statements": [
    {{
      "text": "간결한 브랜딩 문장",
      "style": "성취 중심",
      "reasoning": "주요 성취를 강조"
    }},
    {{
      "text": "간결한 브랜딩 문장",
      "style": "현재 활동 중심",
      "reasoning": "현재 진행 중인 활동 강조"
    }},
    {{
      "text": "간결한 브랜딩 문장",
      "style": "복합형",
      "reasoning": "정체성과 성취를 균형있게 표현"
    }}
  ]
}}"""

BRANDING_PROMPT = ChatPromptTemplate.from_messages(
    [("system", _SYSTEM_PROMPT), ("human", _HUMAN_PROMPT)]
)


def create_branding_chain():
    llm = ChatOpenAI(
        model=config.OPENAI_MODEL,
        api_key=config.openai_api_key(),
        temperature=config.CHAIN_TEMPERATURE,
        max_tokens=config.CHAIN_MAX_TOKENS,
    )
    return BRANDING_PROMPT | llm | JsonOutputParser()


def format_branding_data(data: BrandingData) -> dict:
    return {
        "identities": ", ".join(data.identities) or "없음",
        "achievements": ", ".join(data.achievements) or "없음",
        "currentActivities": ", ".join(data.current_activities) or "없음",
        "uniqueTraits": ", ".join(data.unique_traits) or "없음",
    }


def generate_branding_statements(data: BrandingData) -> dict:
    """
    Generate {"statements": [{text, style, reasoning}, ...]}.

    OpenAI errors (authentication, rate limit) propagate unchanged so the
    route can map them to a status code.
    """
    if not config.is_openai_configured():
        raise AIConfigurationError("OpenAI API key is not configured")

    if config.is_tracing_enabled():
        logger.info(
            "Executing branding chain with LangSmith tracing (project: %s)",
            config.LANGCHAIN_PROJECT,
        )

    result = create_branding_chain().invoke(format_branding_data(data))

    if not isinstance(result, dict) or not isinstance(result.get("statements"), list):
        raise AIResponseFormatError("Invalid response format")

    return result
