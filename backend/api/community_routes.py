"""
REST API routes for the community feed.

Endpoints:
    GET    /api/community/goals        — Public goals feed (filter, sort, paginate)
    POST   /api/community/reactions    — React to a public goal
    DELETE /api/community/reactions    — Remove a reaction
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.auth import get_current_user_id
from api.errors import ApiError
from database import get_session
from services.goal_service import (
    REACTION_TYPES,
    delete_reaction,
    get_public_goal,
    list_public_goals,
    upsert_reaction,
)

logger = logging.getLogger(__name__)

community_router = APIRouter()


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------

class CommunityGoal(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    progress: int
    category: Optional[str] = None
    createdAt: Optional[str] = None
    authorName: str
    journalCount: int
    reactionCount: int


class CommunityGoalsResponse(BaseModel):
    goals: List[CommunityGoal]
    hasMore: bool


class ReactionRequest(BaseModel):
    goalId: Optional[str] = None
    type: Optional[str] = None
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@community_router.get("/community/goals", response_model=CommunityGoalsResponse)
async def list_community_goals(
    category: Optional[str] = None,
    sort: str = "recent",
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """
    Public, active goals with author and activity counts.

    hasMore is true when the page is full; a final empty page is possible
    when the total is an exact multiple of limit.
    """
    try:
        rows = await list_public_goals(
            session,
            category=category,
            sort=sort,
            limit=limit,
            offset=offset,
        )
    except SQLAlchemyError:
        logger.exception("Error fetching public goals")
        raise ApiError(500, "Failed to fetch goals")

    return {
        "goals": [row.to_dict() for row in rows],
        "hasMore": len(rows) == limit,
    }


@community_router.post("/community/reactions", status_code=201)
async def add_reaction(
    request: ReactionRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """React to a public goal; repeating a reaction updates its message."""
    if not request.goalId or not request.type:
        raise ApiError(400, "Goal ID and reaction type are required")
    if request.type not in REACTION_TYPES:
        raise ApiError(400, "Invalid reaction type")

    goal = await get_public_goal(session, request.goalId)
    if goal is None:
        raise ApiError(404, "Goal not found or not public")

    try:
        reaction = await upsert_reaction(
            session,
            goal_id=goal.id,
            user_id=user_id,
            reaction_type=request.type,
            message=request.message,
        )
    except SQLAlchemyError:
        logger.exception("Error creating reaction")
        raise ApiError(500, "Failed to create reaction")

    return {"reaction": reaction.to_dict()}


@community_router.delete("/community/reactions")
async def remove_reaction(
    request: ReactionRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Remove the caller's reaction of the given type."""
    if not request.goalId or not request.type:
        raise ApiError(400, "Goal ID and reaction type are required")

    try:
        await delete_reaction(session, request.goalId, user_id, request.type)
    except SQLAlchemyError:
        logger.exception("Error deleting reaction")
        raise ApiError(500, "Failed to delete reaction")

    return {"message": "Reaction deleted successfully"}
