"""
REST API routes for the AI features of Blueprint Factory.

Endpoints:
    POST /api/ai/analyze-goal                 — One goal-clarification turn
    POST /api/ai/goal-assistant               — SMART-goal coaching chat
    POST /api/ai/generate-blueprint           — Blueprint from a clarification conversation
    POST /api/detailed-analysis               — Statistics + AI insights over blueprints
    POST /api/branding/extract                — Branding data from blueprints
    POST /api/generate-branding-langchain     — Branding statements from branding data
    POST /api/admin/migrate                   — Seed the gallery with sample blueprints
    GET  /api/health                          — Health check
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import openai
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

import config
from agents.analysis_agent import generate_ai_analysis
from agents.branding_agent import generate_branding_statements
from agents.clarification_agent import analyze_goal
from agents.errors import BlueprintGenerationError
from agents.goal_assistant_agent import assist
from api.errors import ApiError
from database import get_admin_session
from services.branding_analysis import BrandingData, extract_branding_data
from services.detailed_analysis import perform_detailed_analysis
from services.graph_builder import run_generation_async
from services.migration_service import migrate_sample_blueprints

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------

class ConversationTurn(BaseModel):
    role: str
    content: str


class AnalyzeGoalRequest(BaseModel):
    goal: Optional[str] = None
    conversation: List[ConversationTurn] = Field(default_factory=list)


class AnalyzeGoalResponse(BaseModel):
    response: str
    isComplete: bool


class GoalAssistantRequest(BaseModel):
    messages: Any = None


class GenerateBlueprintRequest(BaseModel):
    conversation: List[ConversationTurn] = Field(default_factory=list)


class BlueprintsRequest(BaseModel):
    blueprints: Any = None


class BrandingRequest(BaseModel):
    brandingData: Optional[BrandingData] = None


class BrandingStatement(BaseModel):
    text: str
    style: str = ""
    reasoning: str = ""


class BrandingResponse(BaseModel):
    statements: List[BrandingStatement]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "Blueprint Factory API"}


@router.post("/ai/analyze-goal", response_model=AnalyzeGoalResponse)
async def analyze_goal_turn(request: AnalyzeGoalRequest):
    """
    Ask the clarification coach for the next questions about a goal.

    isComplete turns true once the coach includes the completion marker.
    """
    if not request.goal:
        raise ApiError(400, "Goal is required")

    conversation = [turn.model_dump() for turn in request.conversation]
    loop = asyncio.get_event_loop()
    try:
        result = await loop.run_in_executor(
            None,
            lambda: analyze_goal(request.goal, conversation),
        )
    except Exception:  # noqa: BLE001
        logger.exception("AI analysis error")
        raise ApiError(500, "AI 분석 중 오류가 발생했습니다.")

    return AnalyzeGoalResponse(response=result.response, isComplete=result.is_complete)


@router.post("/ai/goal-assistant")
async def goal_assistant(request: GoalAssistantRequest):
    """Answer the latest turn of the goal-setting chat."""
    if not isinstance(request.messages, list):
        raise ApiError(400, "Messages array is required")

    loop = asyncio.get_event_loop()
    try:
        return await loop.run_in_executor(None, lambda: assist(request.messages))
    except Exception:  # noqa: BLE001
        logger.exception("Goal assistant error")
        raise ApiError(500, "Internal server error")


@router.post("/ai/generate-blueprint")
async def generate_blueprint(request: GenerateBlueprintRequest):
    """Generate a {nodes, edges} blueprint from a clarification conversation."""
    if not request.conversation:
        raise ApiError(400, "Conversation history is required")

    try:
        return await run_generation_async([turn.model_dump() for turn in request.conversation])
    except BlueprintGenerationError as exc:
        raise ApiError(500, "청사진 생성 중 오류가 발생했습니다.", details=str(exc))


@router.post("/detailed-analysis")
async def detailed_analysis(request: BlueprintsRequest):
    """
    Rule-based analysis of the caller's blueprints, augmented with AI
    insights when the model is available.
    """
    if not isinstance(request.blueprints, list):
        raise ApiError(400, "청사진 데이터가 필요합니다.")
    if not request.blueprints:
        raise ApiError(400, "분석할 청사진이 없습니다.")

    try:
        analysis = perform_detailed_analysis(request.blueprints)

        ai_insights = None
        loop = asyncio.get_event_loop()
        try:
            logger.info("Generating AI insights...")
            ai_insights = await loop.run_in_executor(
                None,
                lambda: generate_ai_analysis(analysis),
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("AI analysis failed, continuing with basic analysis: %s", exc)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Detailed analysis error")
        raise ApiError(500, f"분석 중 오류가 발생했습니다: {exc}")

    return {
        "success": True,
        "data": {
            "basicAnalysis": analysis,
            "aiInsights": ai_insights,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "hasAIInsights": bool(ai_insights),
        },
    }


@router.post("/branding/extract")
async def extract_branding(request: BlueprintsRequest):
    """Collect identities, achievements and activities from blueprint nodes."""
    if not isinstance(request.blueprints, list):
        raise ApiError(400, "청사진 데이터가 필요합니다.")
    return {"brandingData": extract_branding_data(request.blueprints).model_dump(by_alias=True)}


@router.post("/generate-branding-langchain", response_model=BrandingResponse)
async def generate_branding(request: BrandingRequest):
    """
    Generate three branding statements.

    OpenAI authentication failures map to 401 and rate limiting to 429.
    """
    if not config.is_openai_configured():
        raise ApiError(500, "OpenAI API 키가 설정되지 않았습니다.")
    if request.brandingData is None:
        raise ApiError(400, "브랜딩 데이터가 필요합니다.")

    loop = asyncio.get_event_loop()
    try:
        result = await loop.run_in_executor(
            None,
            lambda: generate_branding_statements(request.brandingData),
        )
    except openai.AuthenticationError:
        logger.error("Branding generation rejected: invalid OpenAI API key")
        raise ApiError(401, "OpenAI API 키가 유효하지 않습니다.")
    except openai.RateLimitError:
        logger.warning("Branding generation rate limited")
        raise ApiError(429, "API 요청 한도를 초과했습니다. 잠시 후 다시 시도해주세요.")
    except Exception:  # noqa: BLE001
        logger.exception("Branding generation error")
        raise ApiError(500, "브랜딩 문장 생성 중 오류가 발생했습니다.")

    return {"statements": result["statements"]}


@router.post("/admin/migrate")
async def run_sample_migration(
    session: AsyncSession = Depends(get_admin_session),
):
    """Seed the public gallery with the sample users and blueprints."""
    try:
        await migrate_sample_blueprints(session)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Migration error")
        raise ApiError(500, str(exc) or "마이그레이션 중 오류가 발생했습니다.", success=False)

    return {"success": True, "message": "마이그레이션이 성공적으로 완료되었습니다."}
