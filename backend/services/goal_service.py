"""
Goal Service — the community feed, goal CRUD, journals, reactions and the
goal → blueprint conversion.

Handles persistence via SQLAlchemy async sessions.
"""

import logging
from datetime import date, datetime
from typing import List, NamedTuple, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.domain import NodeType
from models.goal import Goal, GoalReaction, GoalRelationship, Journal
from models.user import User
from services.blueprint_service import create_blueprint

logger = logging.getLogger(__name__)

REACTION_TYPES = ("like", "support", "celebrate", "advice")
COMMUNITY_SORTS = ("recent", "progress", "popular")

# Journals beyond this many are left out of a converted blueprint
MAX_JOURNAL_NODES = 5


class PublicGoalRow(NamedTuple):
    """One row of the community feed query."""

    id: str
    title: str
    description: Optional[str]
    progress: int
    category: Optional[str]
    created_at: datetime
    author_name: Optional[str]
    journal_count: int
    reaction_count: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "progress": self.progress,
            "category": self.category,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "authorName": self.author_name or "Anonymous",
            "journalCount": self.journal_count or 0,
            "reactionCount": self.reaction_count or 0,
        }


# ---------------------------------------------------------------------------
# Community feed
# ---------------------------------------------------------------------------


async def list_public_goals(
    session: AsyncSession,
    category: Optional[str] = None,
    sort: str = "recent",
    limit: int = 20,
    offset: int = 0,
) -> List[PublicGoalRow]:
    """
    Public, active goals with author name and journal/reaction counts.

    Sorts: "progress" (highest first), "popular" (most reactions first),
    anything else is "recent".
    """
    journal_count = (
        select(func.count(Journal.id))
        .where(Journal.goal_id == Goal.id)
        .correlate(Goal)
        .scalar_subquery()
    )
    reaction_count = (
        select(func.count(GoalReaction.id))
        .where(GoalReaction.goal_id == Goal.id)
        .correlate(Goal)
        .scalar_subquery()
    )

    query = (
        select(
            Goal.id,
            Goal.title,
            Goal.description,
            Goal.progress,
            Goal.category,
            Goal.created_at,
            User.username.label("author_name"),
            journal_count.label("journal_count"),
            reaction_count.label("reaction_count"),
        )
        .outerjoin(User, User.id == Goal.user_id)
        .where(Goal.is_public.is_(True), Goal.status == "active")
    )

    if category and category != "all":
        query = query.where(Goal.category == category)

    if sort == "progress":
        query = query.order_by(Goal.progress.desc(), Goal.created_at.desc())
    elif sort == "popular":
        query = query.order_by(reaction_count.desc(), Goal.created_at.desc())
    else:
        query = query.order_by(Goal.created_at.desc())

    result = await session.execute(query.offset(offset).limit(limit))
    return [PublicGoalRow(*row) for row in result.all()]


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


async def create_goal(
    session: AsyncSession,
    user_id: str,
    title: str,
    description: Optional[str] = None,
    category: Optional[str] = None,
    deadline: Optional[str] = None,
    is_public: bool = False,
    progress: int = 0,
    status: str = "active",
) -> Goal:
    goal = Goal(
        user_id=user_id,
        title=title,
        description=description,
        category=category,
        deadline=deadline,
        is_public=is_public,
        progress=progress,
        status=status,
    )
    session.add(goal)
    await session.commit()
    await session.refresh(goal)
    return goal


async def get_goal(session: AsyncSession, goal_id: str) -> Optional[Goal]:
    result = await session.execute(select(Goal).where(Goal.id == goal_id))
    return result.scalar_one_or_none()


async def get_owned_goal(session: AsyncSession, goal_id: str, user_id: str) -> Optional[Goal]:
    result = await session.execute(
        select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_journals(session: AsyncSession, goal_id: str) -> List[Journal]:
    """Journal entries of a goal, oldest first."""
    result = await session.execute(
        select(Journal).where(Journal.goal_id == goal_id).order_by(Journal.created_at)
    )
    return list(result.scalars().all())


async def update_goal(
    session: AsyncSession,
    goal_id: str,
    user_id: str,
    updates: dict,
) -> Optional[Goal]:
    """
    Apply column updates to a goal owned by user_id.

    Returns None if the goal does not exist or belongs to someone else.
    """
    goal = await get_owned_goal(session, goal_id, user_id)
    if goal is None:
        return None

    for column, value in updates.items():
        setattr(goal, column, value)

    await session.commit()
    await session.refresh(goal)
    return goal


async def delete_goal(session: AsyncSession, goal_id: str, user_id: str) -> bool:
    goal = await get_owned_goal(session, goal_id, user_id)
    if goal is None:
        return False

    await session.execute(delete(Journal).where(Journal.goal_id == goal_id))
    await session.execute(delete(GoalReaction).where(GoalReaction.goal_id == goal_id))
    await session.execute(
        delete(GoalRelationship).where(
            (GoalRelationship.from_goal_id == goal_id) | (GoalRelationship.to_goal_id == goal_id)
        )
    )
    await session.delete(goal)
    await session.commit()
    return True


# ---------------------------------------------------------------------------
# Journals
# ---------------------------------------------------------------------------


async def create_journal(
    session: AsyncSession,
    goal: Goal,
    user_id: str,
    content: str,
    mood: Optional[str] = None,
    progress_update: Optional[int] = None,
) -> Journal:
    """Add a journal entry; a progress update also moves the goal's progress."""
    journal = Journal(
        goal_id=goal.id,
        user_id=user_id,
        content=content,
        mood=mood,
        progress_update=progress_update,
    )
    session.add(journal)

    if progress_update is not None:
        goal.progress = progress_update

    await session.commit()
    await session.refresh(journal)
    return journal


# ---------------------------------------------------------------------------
# Reactions
# ---------------------------------------------------------------------------


async def get_public_goal(session: AsyncSession, goal_id: str) -> Optional[Goal]:
    result = await session.execute(
        select(Goal).where(Goal.id == goal_id, Goal.is_public.is_(True))
    )
    return result.scalar_one_or_none()


async def upsert_reaction(
    session: AsyncSession,
    goal_id: str,
    user_id: str,
    reaction_type: str,
    message: Optional[str] = None,
) -> GoalReaction:
    """Create the reaction, or update its message if (goal, user, type) exists."""
    result = await session.execute(
        select(GoalReaction).where(
            GoalReaction.goal_id == goal_id,
            GoalReaction.user_id == user_id,
            GoalReaction.type == reaction_type,
        )
    )
    reaction = result.scalar_one_or_none()
    if reaction is None:
        reaction = GoalReaction(
            goal_id=goal_id,
            user_id=user_id,
            type=reaction_type,
        )
        session.add(reaction)
    reaction.message = message

    await session.commit()
    await session.refresh(reaction)
    return reaction


async def delete_reaction(
    session: AsyncSession,
    goal_id: str,
    user_id: str,
    reaction_type: str,
) -> None:
    await session.execute(
        delete(GoalReaction).where(
            GoalReaction.goal_id == goal_id,
            GoalReaction.user_id == user_id,
            GoalReaction.type == reaction_type,
        )
    )
    await session.commit()


# ---------------------------------------------------------------------------
# Goal → blueprint conversion
# ---------------------------------------------------------------------------


def determine_goal_priority(goal: Goal, today: Optional[date] = None) -> str:
    """A close deadline wins; otherwise priority follows progress."""
    if goal.deadline:
        today = today or date.today()
        try:
            days_left = (date.fromisoformat(goal.deadline) - today).days
        except ValueError:
            days_left = None
        if days_left is not None:
            if days_left <= 7:
                return "high"
            if days_left <= 30:
                return "medium"

    progress = goal.progress or 0
    if progress > 70:
        return "high"
    if progress > 30:
        return "medium"
    return "low"


_MOOD_PRIORITY = {
    "excited": "high",
    "happy": "high",
    "neutral": "medium",
    "frustrated": "low",
    "sad": "low",
}


def determine_mood_priority(mood: Optional[str]) -> str:
    return _MOOD_PRIORITY.get(mood, "medium")


def build_goal_graph(
    goal: Goal,
    journals: List[Journal],
    related: List[tuple],
    today: Optional[date] = None,
):
    """
    Lay out a goal as canvas nodes and edges.

    Args:
        goal:     The goal; becomes the SHORT_GOAL root node.
        journals: Its journal entries; the first few become TASK nodes.
        related:  (relationship_type, Goal) pairs; each becomes a PLAN node.

    Returns:
        (nodes, edges) lists in the canvas shape.
    """
    main_id = f"goal-{goal.id}"
    y = 100
    spacing = 150

    nodes = [
        {
            "id": main_id,
            "type": "default",
            "position": {"x": 300, "y": y},
            "data": {
                "label": goal.title,
                "originalLabel": goal.title,
                "description": goal.description or "",
                "nodeType": NodeType.SHORT_GOAL.value,
                "progress": goal.progress or 0,
                "priority": determine_goal_priority(goal, today),
                "completed": goal.status == "completed",
                "dueDate": goal.deadline,
                "category": goal.category,
            },
        }
    ]
    edges = []
    y += spacing

    shown = journals[:MAX_JOURNAL_NODES]
    for index, journal in enumerate(shown):
        node_id = f"journal-{journal.id}"
        nodes.append(
            {
                "id": node_id,
                "type": "default",
                "position": {"x": 150 + index * 100, "y": y},
                "data": {
                    "label": f"일기 {index + 1}",
                    "originalLabel": f"일기 {index + 1}",
                    "description": journal.content,
                    "nodeType": NodeType.TASK.value,
                    "progress": journal.progress_update or 0,
                    "priority": determine_mood_priority(journal.mood),
                    "completed": False,
                    "createdDate": journal.created_at.isoformat() if journal.created_at else None,
                },
            }
        )
        edges.append(
            {
                "id": f"edge-{main_id}-journal-{journal.id}",
                "source": main_id,
                "target": node_id,
                "type": "smoothstep",
                "animated": False,
            }
        )
    if shown:
        y += spacing

    for index, (relationship_type, other) in enumerate(related):
        node_id = f"related-{other.id}"
        nodes.append(
            {
                "id": node_id,
                "type": "default",
                "position": {"x": 450 + index * 120, "y": y},
                "data": {
                    "label": other.title,
                    "originalLabel": other.title,
                    "description": other.description or "",
                    "nodeType": NodeType.PLAN.value,
                    "progress": 0,
                    "priority": "medium",
                    "completed": False,
                    "relationshipType": relationship_type,
                },
            }
        )
        supports = relationship_type == "supports"
        edges.append(
            {
                "id": f"edge-{main_id}-related-{other.id}",
                "source": main_id,
                "target": node_id,
                "type": "smoothstep" if supports else "straight",
                "animated": supports,
            }
        )

    return nodes, edges


async def list_related_goals(session: AsyncSession, goal_id: str) -> List[tuple]:
    """(relationship_type, Goal) for every goal this goal points to."""
    result = await session.execute(
        select(GoalRelationship.relationship_type, Goal)
        .join(Goal, Goal.id == GoalRelationship.to_goal_id)
        .where(GoalRelationship.from_goal_id == goal_id)
        .order_by(GoalRelationship.created_at)
    )
    return [(row[0], row[1]) for row in result.all()]


async def convert_goal_to_blueprint(session: AsyncSession, goal: Goal, user_id: str):
    """Create a blueprint from a goal, its journals and its related goals."""
    journals = await list_journals(session, goal.id)
    related = await list_related_goals(session, goal.id)
    nodes, edges = build_goal_graph(goal, journals, related)

    blueprint = await create_blueprint(
        session,
        title=f"{goal.title} - 청사진",
        description=f"{goal.description or ''}\n\n목표에서 변환된 청사진입니다.",
        author_id=user_id,
        nodes=nodes,
        edges=edges,
        privacy="public" if goal.is_public else "private",
        category=goal.category or "기타",
    )
    logger.info("Converted goal %s to blueprint %s", goal.id, blueprint.id)
    return blueprint
