"""
REST API routes for blueprint CRUD and the public gallery.

Endpoints:
    GET    /api/blueprints/          — List the caller's blueprints
    POST   /api/blueprints/          — Create a new blueprint
    GET    /api/blueprints/{id}      — Get a blueprint (owner or public)
    PUT    /api/blueprints/{id}      — Update an owned blueprint
    DELETE /api/blueprints/{id}      — Delete an owned blueprint
    GET    /api/gallery              — Public blueprints, newest first
    GET    /api/gallery/{id}         — A public blueprint (counts a view)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.auth import get_current_user_id
from api.errors import ApiError
from database import get_session
from models.domain import Privacy, find_dangling_edges
from services.blueprint_service import (
    create_blueprint,
    delete_blueprint,
    get_blueprint,
    increment_view_count,
    list_blueprints,
    list_public_blueprints,
    update_blueprint,
)

logger = logging.getLogger(__name__)

blueprint_router = APIRouter()


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------

class CanvasNodeSchema(BaseModel):
    """A canvas node; extra keys (style, width, ...) are kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str = "default"
    position: dict = Field(default_factory=lambda: {"x": 0, "y": 0})
    data: dict = Field(default_factory=dict)


class CanvasEdgeSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    source: str
    target: str


def _check_edges(nodes, edges) -> None:
    if nodes is None or edges is None:
        return
    dangling = find_dangling_edges(nodes, edges)
    if dangling:
        raise ValueError(f"Edges reference unknown nodes: {', '.join(dangling)}")


class BlueprintCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    nodes: List[CanvasNodeSchema] = []
    edges: List[CanvasEdgeSchema] = []
    privacy: Privacy = "private"
    category: str = "기타"
    thumbnail: Optional[str] = None
    id: Optional[str] = None

    @model_validator(mode="after")
    def _edges_reference_nodes(self) -> "BlueprintCreateRequest":
        _check_edges(self.nodes, self.edges)
        return self


class BlueprintUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    nodes: Optional[List[CanvasNodeSchema]] = None
    edges: Optional[List[CanvasEdgeSchema]] = None
    privacy: Optional[Privacy] = None
    category: Optional[str] = None
    thumbnail: Optional[str] = None

    @model_validator(mode="after")
    def _edges_reference_nodes(self) -> "BlueprintUpdateRequest":
        _check_edges(self.nodes, self.edges)
        return self


class BlueprintResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    nodes: list
    edges: list
    authorId: str
    privacy: str
    isPublic: bool
    category: str
    thumbnail: Optional[str] = None
    viewCount: int
    likeCount: int
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


def _dump(items) -> Optional[list]:
    return [item.model_dump() for item in items] if items is not None else None


async def _owned_blueprint(session: AsyncSession, blueprint_id: str, user_id: str):
    bp = await get_blueprint(session, blueprint_id)
    if bp is None:
        raise ApiError(404, f"Blueprint '{blueprint_id}' not found.")
    if bp.author_id != user_id:
        raise ApiError(403, "Forbidden")
    return bp


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@blueprint_router.get("/blueprints/", response_model=List[BlueprintResponse])
async def list_my_blueprints(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """List the caller's blueprints."""
    blueprints = await list_blueprints(session, author_id=user_id)
    return [bp.to_dict() for bp in blueprints]


@blueprint_router.post(
    "/blueprints/",
    response_model=BlueprintResponse,
    status_code=201,
)
async def create_new_blueprint(
    request: BlueprintCreateRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Create a new blueprint owned by the caller."""
    try:
        bp = await create_blueprint(
            session=session,
            title=request.title,
            description=request.description,
            author_id=user_id,
            nodes=_dump(request.nodes),
            edges=_dump(request.edges),
            privacy=request.privacy,
            category=request.category,
            thumbnail=request.thumbnail,
            blueprint_id=request.id,
        )
    except IntegrityError:
        await session.rollback()
        logger.info("Rejected duplicate blueprint id %s", request.id)
        raise ApiError(409, f"Blueprint '{request.id}' already exists.")
    return bp.to_dict()


@blueprint_router.get("/blueprints/{blueprint_id}", response_model=BlueprintResponse)
async def get_single_blueprint(
    blueprint_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Retrieve a blueprint the caller owns, or any public one."""
    bp = await get_blueprint(session, blueprint_id)
    if bp is None:
        raise ApiError(404, f"Blueprint '{blueprint_id}' not found.")
    if bp.author_id != user_id and not bp.is_public:
        raise ApiError(403, "Forbidden")
    return bp.to_dict()


@blueprint_router.put("/blueprints/{blueprint_id}", response_model=BlueprintResponse)
async def update_existing_blueprint(
    blueprint_id: str,
    request: BlueprintUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Update an owned blueprint.

    A partial update is checked against the stored half of the graph, so
    replacing only the nodes cannot strand the existing edges.
    """
    bp = await _owned_blueprint(session, blueprint_id, user_id)
    if request.nodes is not None or request.edges is not None:
        nodes = request.nodes
        if nodes is None:
            nodes = [CanvasNodeSchema.model_validate(n) for n in bp.nodes or []]
        edges = request.edges
        if edges is None:
            edges = [CanvasEdgeSchema.model_validate(e) for e in bp.edges or []]
        dangling = find_dangling_edges(nodes, edges)
        if dangling:
            raise ApiError(422, f"Edges reference unknown nodes: {', '.join(dangling)}")

    bp = await update_blueprint(
        session=session,
        blueprint_id=blueprint_id,
        title=request.title,
        description=request.description,
        nodes=_dump(request.nodes),
        edges=_dump(request.edges),
        privacy=request.privacy,
        category=request.category,
        thumbnail=request.thumbnail,
    )
    return bp.to_dict()


@blueprint_router.delete("/blueprints/{blueprint_id}", status_code=204)
async def delete_existing_blueprint(
    blueprint_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Delete an owned blueprint."""
    await _owned_blueprint(session, blueprint_id, user_id)
    await delete_blueprint(session, blueprint_id)


@blueprint_router.get("/gallery", response_model=List[BlueprintResponse])
async def list_gallery(
    category: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """Public blueprints, newest first."""
    blueprints = await list_public_blueprints(session, category=category, limit=limit, offset=offset)
    return [bp.to_dict() for bp in blueprints]


@blueprint_router.get("/gallery/{blueprint_id}", response_model=BlueprintResponse)
async def view_gallery_blueprint(
    blueprint_id: str,
    session: AsyncSession = Depends(get_session),
):
    """Open a public blueprint and count the view."""
    bp = await increment_view_count(session, blueprint_id)
    if bp is None:
        raise ApiError(404, f"Blueprint '{blueprint_id}' not found.")
    return bp.to_dict()
