"""
Blueprint Service — CRUD operations for goal blueprints and the public
gallery.

Handles persistence of blueprints to PostgreSQL via SQLAlchemy async sessions.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.blueprint import Blueprint


async def create_blueprint(
    session: AsyncSession,
    title: str,
    author_id: str,
    nodes: list,
    edges: list,
    description: Optional[str] = None,
    privacy: str = "private",
    category: str = "기타",
    thumbnail: Optional[str] = None,
    blueprint_id: Optional[str] = None,
) -> Blueprint:
    """Create and persist a new blueprint."""
    bp = Blueprint(
        title=title,
        description=description,
        author_id=author_id,
        nodes=nodes,
        edges=edges,
        privacy=privacy,
        category=category,
        thumbnail=thumbnail,
    )
    if blueprint_id:
        bp.id = blueprint_id

    session.add(bp)
    await session.commit()
    await session.refresh(bp)
    return bp


async def get_blueprint(
    session: AsyncSession,
    blueprint_id: str,
) -> Optional[Blueprint]:
    """Retrieve a blueprint by ID."""
    result = await session.execute(
        select(Blueprint).where(Blueprint.id == blueprint_id)
    )
    return result.scalar_one_or_none()


async def list_blueprints(
    session: AsyncSession,
    author_id: Optional[str] = None,
) -> List[Blueprint]:
    """Retrieve blueprints, ordered by most recently updated."""
    query = select(Blueprint).order_by(Blueprint.updated_at.desc())
    if author_id is not None:
        query = query.where(Blueprint.author_id == author_id)
    result = await session.execute(query)
    return list(result.scalars().all())


async def list_public_blueprints(
    session: AsyncSession,
    category: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> List[Blueprint]:
    """Gallery listing: public blueprints, newest first."""
    query = select(Blueprint).where(Blueprint.privacy == "public")
    if category and category != "all":
        query = query.where(Blueprint.category == category)
    query = query.order_by(Blueprint.created_at.desc()).offset(offset).limit(limit)
    result = await session.execute(query)
    return list(result.scalars().all())


async def increment_view_count(
    session: AsyncSession,
    blueprint_id: str,
) -> Optional[Blueprint]:
    """Record one gallery view. Returns None if the blueprint is not public."""
    bp = await get_blueprint(session, blueprint_id)
    if bp is None or not bp.is_public:
        return None

    bp.view_count = (bp.view_count or 0) + 1
    await session.commit()
    await session.refresh(bp)
    return bp


async def update_blueprint(
    session: AsyncSession,
    blueprint_id: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    nodes: Optional[list] = None,
    edges: Optional[list] = None,
    privacy: Optional[str] = None,
    category: Optional[str] = None,
    thumbnail: Optional[str] = None,
) -> Optional[Blueprint]:
    """Update an existing blueprint. Returns None if not found."""
    bp = await get_blueprint(session, blueprint_id)
    if bp is None:
        return None

    if title is not None:
        bp.title = title
    if description is not None:
        bp.description = description
    if nodes is not None:
        bp.nodes = nodes
    if edges is not None:
        bp.edges = edges
    if privacy is not None:
        bp.privacy = privacy
    if category is not None:
        bp.category = category
    if thumbnail is not None:
        bp.thumbnail = thumbnail
    bp.updated_at = datetime.now(timezone.utc)

    await session.commit()
    await session.refresh(bp)
    return bp


async def delete_blueprint(
    session: AsyncSession,
    blueprint_id: str,
) -> bool:
    """Delete a blueprint by ID. Returns True if deleted, False if not found."""
    bp = await get_blueprint(session, blueprint_id)
    if bp is None:
        return False

    await session.delete(bp)
    await session.commit()
    return True
