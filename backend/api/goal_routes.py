"""
REST API routes for goals and their journals.

Endpoints:
    POST   /api/goals                               — Create a goal
    GET    /api/goals/{id}                          — Goal with journals (owner or public)
    PATCH  /api/goals/{id}                          — Update an owned goal
    DELETE /api/goals/{id}                          — Delete an owned goal
    POST   /api/goals/{id}/convert-to-blueprint     — Turn a goal into a blueprint
    POST   /api/journals                            — Add a journal entry to an owned goal
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.auth import get_current_user_id
from api.errors import ApiError
from database import get_session
from services.goal_service import (
    convert_goal_to_blueprint,
    create_goal,
    create_journal,
    delete_goal,
    get_goal,
    get_owned_goal,
    list_journals,
    update_goal,
)

logger = logging.getLogger(__name__)

goal_router = APIRouter()


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------

class GoalCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    deadline: Optional[str] = None
    isPublic: bool = False


class GoalUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    deadline: Optional[str] = None
    isPublic: Optional[bool] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    status: Optional[str] = None

    @field_validator("title", "isPublic", "progress", "status")
    @classmethod
    def _not_null(cls, value, info):
        # Omit a field to leave it unchanged; these columns are NOT NULL.
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class JournalCreateRequest(BaseModel):
    goalId: Optional[str] = None
    content: Optional[str] = None
    mood: Optional[str] = None
    progressUpdate: Optional[int] = Field(None, ge=0, le=100)


# Request field → goals column
_GOAL_COLUMNS = {
    "title": "title",
    "description": "description",
    "category": "category",
    "deadline": "deadline",
    "isPublic": "is_public",
    "progress": "progress",
    "status": "status",
}


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@goal_router.post("/goals", status_code=201)
async def create_new_goal(
    request: GoalCreateRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Create a goal owned by the caller."""
    goal = await create_goal(
        session,
        user_id=user_id,
        title=request.title,
        description=request.description,
        category=request.category,
        deadline=request.deadline,
        is_public=request.isPublic,
    )
    return {"goal": goal.to_dict()}


@goal_router.get("/goals/{goal_id}")
async def get_single_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Fetch a goal with its journals. Only the owner may read a private goal."""
    goal = await get_goal(session, goal_id)
    if goal is None:
        raise ApiError(404, "Goal not found")
    if goal.user_id != user_id and not goal.is_public:
        raise ApiError(403, "Forbidden")

    journals = await list_journals(session, goal.id)
    return {"goal": {**goal.to_dict(), "journals": [j.to_dict() for j in journals]}}


@goal_router.patch("/goals/{goal_id}")
async def update_existing_goal(
    goal_id: str,
    request: GoalUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Update the supplied fields of an owned goal."""
    updates = {
        _GOAL_COLUMNS[field]: value
        for field, value in request.model_dump(exclude_unset=True).items()
    }
    try:
        goal = await update_goal(session, goal_id, user_id, updates)
    except SQLAlchemyError:
        logger.exception("Error updating goal %s", goal_id)
        raise ApiError(500, "Failed to update goal")

    if goal is None:
        raise ApiError(404, "Goal not found or unauthorized")
    return {"goal": goal.to_dict()}


@goal_router.delete("/goals/{goal_id}")
async def delete_existing_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Delete an owned goal together with its journals and reactions."""
    try:
        deleted = await delete_goal(session, goal_id, user_id)
    except SQLAlchemyError:
        logger.exception("Error deleting goal %s", goal_id)
        raise ApiError(500, "Failed to delete goal")

    if not deleted:
        raise ApiError(404, "Goal not found or unauthorized")
    return {"message": "Goal deleted successfully"}


@goal_router.post("/goals/{goal_id}/convert-to-blueprint")
async def convert_to_blueprint(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Create a blueprint from an owned goal, its journals and related goals."""
    goal = await get_owned_goal(session, goal_id, user_id)
    if goal is None:
        raise ApiError(404, "Goal not found")

    try:
        blueprint = await convert_goal_to_blueprint(session, goal, user_id)
    except SQLAlchemyError:
        logger.exception("Error creating blueprint from goal %s", goal_id)
        raise ApiError(500, "Failed to create blueprint")

    return {
        "blueprintId": blueprint.id,
        "message": "Successfully converted goal to blueprint",
    }


@goal_router.post("/journals", status_code=201)
async def create_journal_entry(
    request: JournalCreateRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Add a journal entry; progressUpdate also sets the goal's progress."""
    if not request.goalId or not request.content:
        raise ApiError(400, "Goal ID and content are required")

    goal = await get_owned_goal(session, request.goalId, user_id)
    if goal is None:
        raise ApiError(404, "Goal not found or unauthorized")

    try:
        journal = await create_journal(
            session,
            goal,
            user_id=user_id,
            content=request.content,
            mood=request.mood,
            progress_update=request.progressUpdate,
        )
    except SQLAlchemyError:
        logger.exception("Error creating journal entry")
        raise ApiError(500, "Failed to create journal entry")

    return {"journal": journal.to_dict()}
