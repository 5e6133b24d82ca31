"""
Analysis Agent — turns the rule-based blueprint statistics into a narrative
AI report (overview, deep insights, strategy, risks, personalised advice).

Chain: ChatPromptTemplate → ChatOpenAI → JsonOutputParser.
"""

import logging

from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

import config
from agents.errors import AIConfigurationError, AIResponseFormatError

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """당신은 목표 관리와 행동 심리학 전문가입니다.
사용자의 청사진 데이터를 종합적으로 분석하여 깊이 있는 인사이트와 맞춤형 조언을 제공해주세요.

분석 관점:
1. 행동 패턴과 목표 설정 성향
2. 동기 부여 요인과 성취 스타일
3. 개인적 강점과 개선 영역
4. 목표 달성을 위한 최적화 전략

한국어로 응답하며, 구체적이고 실행 가능한 조언을 포함해주세요."""

# Literal braces in the JSON example are doubled for the prompt template
_HUMAN_PROMPT = """사용자 청사진 분석 데이터:

📊 기본 통계:
- 총 청사진: {totalBlueprints}개
- 총 목표/노드: {totalNodes}개
- 완료된 목표: {completedGoals}개
- 달성률: {completionRate}%

🎯 목표 유형별 분석:
{goalTypeAnalysis}

📂 카테고리별 현황:
{categoryAnalysis}

🔗 목표 연결성:
- 고립된 목표: {isolatedNodes}개
- 평균 연결도: {averageConnections}
- 연결 밀도: {connectionDensity}%

📈 성장 지표:
- 성장 모멘텀: {momentum}
- 일관성 점수: {consistencyScore}/100
- 도전 수준: {challengeLevel}
- 집중도: {focusScore}/100

🎨 주요 강점: {strengths}
🔧 개선 영역: {improvements}
⚠️ 위험 요소: {riskFactors}

위 데이터를 바탕으로 종합적인 분석을 수행해주세요.

응답 형식(JSON):
{{
  "overview": {{
    "title": "분석 제목",
    "summary": "전체적인 요약",
    "keyFindings": ["핵심 발견사항들"]
  }},
  "deepInsights": {{
    "behaviorPatterns": ["행동 패턴들"],
    "motivationDrivers": ["동기 요인들"],
    "personalityTraits": ["성격 특성들"],
    "workStyle": ["작업 스타일들"]
  }},
  "strategicRecommendations": {{
    "shortTerm": [{{
      "action": "단기 행동",
      "rationale": "근거",
      "expectedOutcome": "예상 결과"
    }}],
    "longTerm": [{{
      "strategy": "장기 전략",
      "rationale": "근거",
      "milestones": ["마일스톤들"]
    }}]
  }},
  "riskAssessment": {{
    "potentialChallenges": ["잠재적 도전들"],
    "mitigationStrategies": ["완화 전략들"],
    "warningSignals": ["경고 신호들"]
  }},
  "personalization": {{
    "customizedAdvice": ["맞춤형 조언들"],
    "strengthAmplification": ["강점 활용법들"],
    "weaknessAddressing": ["약점 보완법들"]
  }}
}}"""

ANALYSIS_PROMPT = ChatPromptTemplate.from_messages(
    [("system", _SYSTEM_PROMPT), ("human", _HUMAN_PROMPT)]
)

REQUIRED_SECTIONS = ("overview", "deepInsights", "strategicRecommendations")

_MOMENTUM_LABELS = {"increasing": "증가", "steady": "안정"}
_CHALLENGE_LABELS = {"ambitious": "도전적", "balanced": "균형적"}


def create_analysis_chain():
    llm = ChatOpenAI(
        model=config.OPENAI_MODEL,
        api_key=config.openai_api_key(),
        temperature=0.3,
        max_tokens=2000,
    )
    return ANALYSIS_PROMPT | llm | JsonOutputParser()


def _joined(items) -> str:
    return ", ".join(items) or "없음"


def format_analysis_data(analysis: dict) -> dict:
    """Flatten a detailed analysis into the prompt variables."""
    summary = analysis["summary"]
    connectivity = analysis["connectivityAnalysis"]
    growth = analysis["growthMetrics"]
    insights = analysis["insights"]

    return {
        "totalBlueprints": summary["totalBlueprints"],
        "totalNodes": summary["totalNodes"],
        "completedGoals": summary["completedGoals"],
        "completionRate": round(summary["completionRate"], 1),
        "goalTypeAnalysis": ", ".join(
            f"{gt['type']}: {gt['count']}개 (달성률 {round(gt['completionRate'])}%)"
            for gt in analysis["goalTypeAnalysis"]
        ),
        "categoryAnalysis": ", ".join(
            f"{ca['category']}: {ca['nodeCount']}개 노드 (완료 {ca['completedCount']}개)"
            for ca in analysis["categoryAnalysis"]
        ),
        "isolatedNodes": connectivity["isolatedNodes"],
        "averageConnections": round(connectivity["averageConnections"], 1),
        "connectionDensity": round(connectivity["connectionDensity"], 1),
        "momentum": _MOMENTUM_LABELS.get(growth["momentum"], "감소"),
        "consistencyScore": growth["consistencyScore"],
        "challengeLevel": _CHALLENGE_LABELS.get(growth["challengeLevel"], "보수적"),
        "focusScore": growth["focusScore"],
        "strengths": _joined(insights["strengths"]),
        "improvements": _joined(insights["improvements"]),
        "riskFactors": _joined(insights["riskFactors"]),
    }


def generate_ai_analysis(analysis: dict) -> dict:
    """
    Run the analysis chain over a detailed analysis result.

    Raises:
        AIConfigurationError:  If no OpenAI key is configured.
        AIResponseFormatError: If the reply lacks a required section.
    """
    if not config.is_openai_configured():
        raise AIConfigurationError("OpenAI API key is not configured")

    if config.is_tracing_enabled():
        logger.info(
            "Executing analysis chain with LangSmith tracing (project: %s)",
            config.LANGCHAIN_PROJECT,
        )

    result = create_analysis_chain().invoke(format_analysis_data(analysis))

    if not isinstance(result, dict) or not all(result.get(key) for key in REQUIRED_SECTIONS):
        raise AIResponseFormatError("Invalid AI analysis response format")

    return result
