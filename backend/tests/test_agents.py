"""
Tests for the AI agents: clarification coach, goal assistant, analysis
chain and branding chain.

All LLM calls are mocked — no real API calls are made in these tests.
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import patch, MagicMock
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from agents.errors import AIConfigurationError, AIResponseFormatError
from services.branding_analysis import BrandingData
from services.detailed_analysis import perform_detailed_analysis


@pytest.fixture
def openai_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
    monkeypatch.delenv("LANGCHAIN_TRACING_V2", raising=False)


@pytest.fixture
def no_openai_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def _response(content: str) -> MagicMock:
    mock_response = MagicMock()
    mock_response.content = content
    return mock_response


SAMPLE_BLUEPRINTS = [
    {
        "title": "커리어",
        "category": "career",
        "nodes": [
            {"id": "1", "data": {"label": "시니어 개발자", "nodeType": "long_goal", "completed": True, "progress": 100}},
            {"id": "2", "data": {"label": "사이드 프로젝트", "nodeType": "plan", "progress": 50}},
        ],
        "edges": [{"id": "e1-2", "source": "1", "target": "2"}],
    }
]


# ---------------------------------------------------------------------------
# Clarification coach
# ---------------------------------------------------------------------------

class TestClarificationAgent:
    def test_completion_marker_detected(self):
        from agents.clarification_agent import parse_clarification_response

        result = parse_clarification_response("충분히 파악했어요! **[구체화완료]**")
        assert result.is_complete is True
        assert result.response == "충분히 파악했어요! **[구체화완료]**"

    def test_without_marker_is_incomplete(self):
        from agents.clarification_agent import parse_clarification_response

        assert parse_clarification_response("언제까지 달성하고 싶으신가요?").is_complete is False

    def test_to_langchain_messages(self):
        from agents.clarification_agent import to_langchain_messages

        messages = to_langchain_messages([
            {"role": "user", "content": "a"},
            {"role": "assistant", "content": "b"},
            {"role": "system", "content": "c"},
            {"role": "narrator", "content": "d"},
        ])
        assert [type(m) for m in messages] == [HumanMessage, AIMessage, SystemMessage, HumanMessage]
        assert [m.content for m in messages] == ["a", "b", "c", "d"]

    def test_first_turn_wraps_goal(self):
        from agents.clarification_agent import build_clarification_messages

        messages = build_clarification_messages("마라톤 완주", [])
        assert isinstance(messages[0], SystemMessage)
        assert len(messages) == 2
        assert '"마라톤 완주"' in messages[-1].content

    def test_follow_up_turn_sends_answer_as_is(self):
        from agents.clarification_agent import build_clarification_messages

        conversation = [
            {"role": "user", "content": "마라톤 완주"},
            {"role": "assistant", "content": "언제까지요?"},
        ]
        messages = build_clarification_messages("올해 안에요", conversation)
        assert len(messages) == 4
        assert messages[-1].content == "올해 안에요"

    def test_analyze_goal_calls_model(self, openai_key):
        from agents.clarification_agent import analyze_goal

        with patch("agents.clarification_agent.ChatOpenAI") as MockLLM:
            MockLLM.return_value.invoke.return_value = _response("좋아요 **[구체화완료]**")
            result = analyze_goal("마라톤 완주", [])

        assert result.is_complete is True
        assert MockLLM.call_args.kwargs["temperature"] == 0.7


# ---------------------------------------------------------------------------
# Goal assistant
# ---------------------------------------------------------------------------

class TestGoalAssistant:
    def test_extract_goal_suggestion(self):
        from agents.goal_assistant_agent import extract_goal_suggestion

        content = (
            "멋져요! 정리해볼게요.\n"
            '{\n  "ready": true,\n  "goal": {"title": "주 3회 조깅", "category": "health"}\n}\n'
            "화이팅!"
        )
        suggestion = extract_goal_suggestion(content)
        assert suggestion == {"ready": True, "goal": {"title": "주 3회 조깅", "category": "health"}}

    def test_no_suggestion_without_ready_flag(self):
        from agents.goal_assistant_agent import extract_goal_suggestion

        assert extract_goal_suggestion("언제까지 이루고 싶으신가요?") is None
        assert extract_goal_suggestion(None) is None

    def test_malformed_suggestion_is_ignored(self):
        from agents.goal_assistant_agent import extract_goal_suggestion

        assert extract_goal_suggestion('{"ready": true, "goal": }') is None

    def test_mock_reply_short_conversation(self):
        from agents.goal_assistant_agent import MOCK_RESPONSES, mock_reply

        reply = mock_reply([{"role": "user", "content": "운동"}])
        assert reply["content"] in MOCK_RESPONSES
        assert "goalSuggestion" not in reply

    def test_mock_reply_long_conversation_suggests_goal(self):
        from agents.goal_assistant_agent import MOCK_GOAL_SUGGESTION, mock_reply

        messages = [{"role": "user", "content": str(i)} for i in range(5)]
        assert mock_reply(messages)["goalSuggestion"] == MOCK_GOAL_SUGGESTION

    def test_assist_without_key_uses_mock(self, no_openai_key):
        from agents.goal_assistant_agent import MOCK_RESPONSES, assist

        with patch("agents.goal_assistant_agent.ChatOpenAI") as MockLLM:
            reply = assist([{"role": "user", "content": "운동"}])

        MockLLM.assert_not_called()
        assert reply["content"] in MOCK_RESPONSES

    def test_assist_with_key_calls_model(self, openai_key):
        from agents.goal_assistant_agent import assist

        with patch("agents.goal_assistant_agent.ChatOpenAI") as MockLLM:
            MockLLM.return_value.invoke.return_value = _response("언제까지요? 📅")
            reply = assist([{"role": "user", "content": "운동"}])

        assert reply == {"content": "언제까지요? 📅", "goalSuggestion": None}


# ---------------------------------------------------------------------------
# Analysis chain
# ---------------------------------------------------------------------------

FULL_AI_ANALYSIS = {
    "overview": {"title": "성장형", "summary": "요약", "keyFindings": ["발견"]},
    "deepInsights": {"behaviorPatterns": ["패턴"]},
    "strategicRecommendations": {"shortTerm": [], "longTerm": []},
    "riskAssessment": {},
    "personalization": {},
}


class TestAnalysisAgent:
    def test_format_analysis_data(self):
        from agents.analysis_agent import format_analysis_data

        data = format_analysis_data(perform_detailed_analysis(SAMPLE_BLUEPRINTS))
        assert data["totalBlueprints"] == 1
        assert data["totalNodes"] == 2
        assert data["completedGoals"] == 1
        assert data["completionRate"] == 50.0
        assert data["goalTypeAnalysis"] == "long_goal: 1개 (달성률 100%), plan: 1개 (달성률 0%)"
        assert data["categoryAnalysis"] == "career: 2개 노드 (완료 1개)"
        assert data["momentum"] == "안정"
        assert data["challengeLevel"] == "보수적"
        assert data["strengths"] == "없음"
        assert data["improvements"] == "목표 달성률 향상 필요"

    def test_prompt_renders_with_formatted_data(self):
        from agents.analysis_agent import ANALYSIS_PROMPT, format_analysis_data

        data = format_analysis_data(perform_detailed_analysis(SAMPLE_BLUEPRINTS))
        messages = ANALYSIS_PROMPT.format_messages(**data)
        assert "총 청사진: 1개" in messages[1].content
        assert '"overview"' in messages[1].content

    def test_requires_api_key(self, no_openai_key):
        from agents.analysis_agent import generate_ai_analysis

        with pytest.raises(AIConfigurationError):
            generate_ai_analysis(perform_detailed_analysis(SAMPLE_BLUEPRINTS))

    def test_returns_chain_result(self, openai_key):
        from agents.analysis_agent import generate_ai_analysis

        with patch("agents.analysis_agent.create_analysis_chain") as mock_chain:
            mock_chain.return_value.invoke.return_value = FULL_AI_ANALYSIS
            result = generate_ai_analysis(perform_detailed_analysis(SAMPLE_BLUEPRINTS))

        assert result == FULL_AI_ANALYSIS

    def test_missing_section_is_rejected(self, openai_key):
        from agents.analysis_agent import generate_ai_analysis

        partial = {"overview": {"title": "x"}}
        with patch("agents.analysis_agent.create_analysis_chain") as mock_chain:
            mock_chain.return_value.invoke.return_value = partial
            with pytest.raises(AIResponseFormatError):
                generate_ai_analysis(perform_detailed_analysis(SAMPLE_BLUEPRINTS))


# ---------------------------------------------------------------------------
# Branding chain
# ---------------------------------------------------------------------------

class TestBrandingAgent:
    def test_format_branding_data(self):
        from agents.branding_agent import format_branding_data

        data = BrandingData(identities=["백엔드 개발자", "컴퓨터공학전공"])
        assert format_branding_data(data) == {
            "identities": "백엔드 개발자, 컴퓨터공학전공",
            "achievements": "없음",
            "currentActivities": "없음",
            "uniqueTraits": "없음",
        }

    def test_requires_api_key(self, no_openai_key):
        from agents.branding_agent import generate_branding_statements

        with pytest.raises(AIConfigurationError):
            generate_branding_statements(BrandingData())

    def test_returns_statements(self, openai_key):
        from agents.branding_agent import generate_branding_statements

        statements = {"statements": [{"text": "창업을 준비하는 개발자", "style": "복합형", "reasoning": "r"}]}
        with patch("agents.branding_agent.create_branding_chain") as mock_chain:
            mock_chain.return_value.invoke.return_value = statements
            result = generate_branding_statements(BrandingData(identities=["개발자"]))

        assert result == statements
        mock_chain.return_value.invoke.assert_called_once()
        assert mock_chain.return_value.invoke.call_args.args[0]["identities"] == "개발자"

    def test_statements_must_be_a_list(self, openai_key):
        from agents.branding_agent import generate_branding_statements

        with patch("agents.branding_agent.create_branding_chain") as mock_chain:
            mock_chain.return_value.invoke.return_value = {"statements": "one"}
            with pytest.raises(AIResponseFormatError):
                generate_branding_statements(BrandingData())
