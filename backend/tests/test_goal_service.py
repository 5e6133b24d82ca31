"""
Tests for the goal service: community feed query, journals, reactions and
the goal → blueprint conversion.

Uses an in-memory SQLite database for isolation.
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date, datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from models.blueprint import Base
from models.goal import Goal, GoalRelationship, Journal
from models.user import User
from services.blueprint_service import get_blueprint
from services.goal_service import (
    build_goal_graph,
    convert_goal_to_blueprint,
    create_goal,
    create_journal,
    delete_goal,
    determine_goal_priority,
    determine_mood_priority,
    list_journals,
    list_public_goals,
    update_goal,
    upsert_reaction,
)


# ---------------------------------------------------------------------------
# Test database setup (in-memory SQLite)
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session():
    """Create tables and yield a fresh session for each test."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as sess:
        sess.add_all([
            User(id="user-1", username="runner"),
            User(id="user-2", username="reader"),
        ])
        await sess.commit()
        yield sess

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


def _at(minutes: int) -> datetime:
    return datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes)


async def _public_goal(session, title, minutes=0, **kwargs):
    goal = await create_goal(session, user_id="user-1", title=title, is_public=True, **kwargs)
    goal.created_at = _at(minutes)
    await session.commit()
    return goal


# ---------------------------------------------------------------------------
# Community feed
# ---------------------------------------------------------------------------

class TestListPublicGoals:
    @pytest.mark.asyncio
    async def test_only_public_active_goals(self, session):
        await _public_goal(session, "Public")
        await create_goal(session, user_id="user-1", title="Private")
        await _public_goal(session, "Done", status="completed")

        rows = await list_public_goals(session)
        assert [row.title for row in rows] == ["Public"]

    @pytest.mark.asyncio
    async def test_row_contract(self, session):
        goal = await _public_goal(session, "Run a marathon", category="health", progress=30)
        await create_journal(session, goal, "user-1", "First run")
        await upsert_reaction(session, goal.id, "user-2", "like")

        row = (await list_public_goals(session))[0]
        data = row.to_dict()
        assert data["id"] == goal.id
        assert data["authorName"] == "runner"
        assert data["journalCount"] == 1
        assert data["reactionCount"] == 1
        assert data["category"] == "health"
        assert data["createdAt"] is not None

    @pytest.mark.asyncio
    async def test_missing_author_is_anonymous(self, session):
        goal = await create_goal(session, user_id="ghost-user", title="Orphan", is_public=True)
        rows = await list_public_goals(session)
        assert rows[0].id == goal.id
        assert rows[0].to_dict()["authorName"] == "Anonymous"

    @pytest.mark.asyncio
    async def test_recent_sort_is_newest_first(self, session):
        await _public_goal(session, "Old", minutes=0)
        await _public_goal(session, "New", minutes=10)

        rows = await list_public_goals(session, sort="recent")
        assert [row.title for row in rows] == ["New", "Old"]

    @pytest.mark.asyncio
    async def test_unknown_sort_falls_back_to_recent(self, session):
        await _public_goal(session, "Old", minutes=0)
        await _public_goal(session, "New", minutes=10)

        rows = await list_public_goals(session, sort="bogus")
        assert [row.title for row in rows] == ["New", "Old"]

    @pytest.mark.asyncio
    async def test_progress_sort(self, session):
        await _public_goal(session, "Low", progress=10)
        await _public_goal(session, "High", progress=90)

        rows = await list_public_goals(session, sort="progress")
        assert [row.title for row in rows] == ["High", "Low"]

    @pytest.mark.asyncio
    async def test_popular_sort_orders_by_reaction_count(self, session):
        quiet = await _public_goal(session, "Quiet", minutes=10)
        loved = await _public_goal(session, "Loved", minutes=0)
        await upsert_reaction(session, loved.id, "user-1", "like")
        await upsert_reaction(session, loved.id, "user-2", "celebrate")
        await upsert_reaction(session, quiet.id, "user-2", "like")

        rows = await list_public_goals(session, sort="popular")
        assert [row.title for row in rows] == ["Loved", "Quiet"]
        assert [row.reaction_count for row in rows] == [2, 1]

    @pytest.mark.asyncio
    async def test_category_filter(self, session):
        await _public_goal(session, "Health", category="health")
        await _public_goal(session, "Career", category="career")

        rows = await list_public_goals(session, category="career")
        assert [row.title for row in rows] == ["Career"]

        rows = await list_public_goals(session, category="all")
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_limit_and_offset(self, session):
        for i in range(5):
            await _public_goal(session, f"G{i}", minutes=i)

        first = await list_public_goals(session, limit=2)
        assert [row.title for row in first] == ["G4", "G3"]
        last = await list_public_goals(session, limit=2, offset=4)
        assert [row.title for row in last] == ["G0"]


# ---------------------------------------------------------------------------
# Goals, journals, reactions
# ---------------------------------------------------------------------------

class TestGoalCrud:
    @pytest.mark.asyncio
    async def test_update_requires_owner(self, session):
        goal = await create_goal(session, user_id="user-1", title="Mine")
        assert await update_goal(session, goal.id, "user-2", {"title": "Stolen"}) is None

        updated = await update_goal(session, goal.id, "user-1", {"title": "Renamed", "is_public": True})
        assert updated.title == "Renamed"
        assert updated.is_public is True

    @pytest.mark.asyncio
    async def test_delete_removes_journals(self, session):
        goal = await create_goal(session, user_id="user-1", title="Mine")
        await create_journal(session, goal, "user-1", "entry")

        assert await delete_goal(session, goal.id, "user-2") is False
        assert await delete_goal(session, goal.id, "user-1") is True
        assert await list_journals(session, goal.id) == []

    @pytest.mark.asyncio
    async def test_journal_progress_update_moves_goal(self, session):
        goal = await create_goal(session, user_id="user-1", title="Mine")
        journal = await create_journal(session, goal, "user-1", "Halfway", mood="happy", progress_update=50)

        assert journal.progress_update == 50
        assert goal.progress == 50

    @pytest.mark.asyncio
    async def test_journal_without_progress_keeps_goal(self, session):
        goal = await create_goal(session, user_id="user-1", title="Mine", progress=20)
        await create_journal(session, goal, "user-1", "Note")
        assert goal.progress == 20

    @pytest.mark.asyncio
    async def test_reaction_upsert_updates_message(self, session):
        goal = await _public_goal(session, "Goal")
        first = await upsert_reaction(session, goal.id, "user-2", "advice", message="Try mornings")
        second = await upsert_reaction(session, goal.id, "user-2", "advice", message="Try evenings")

        assert first.id == second.id
        assert second.message == "Try evenings"
        rows = await list_public_goals(session)
        assert rows[0].reaction_count == 1


# ---------------------------------------------------------------------------
# Goal → blueprint conversion
# ---------------------------------------------------------------------------

class TestPriorities:
    def test_close_deadline_is_high(self):
        goal = Goal(title="g", deadline="2025-01-05", progress=0)
        assert determine_goal_priority(goal, today=date(2025, 1, 1)) == "high"

    def test_month_deadline_is_medium(self):
        goal = Goal(title="g", deadline="2025-01-25", progress=0)
        assert determine_goal_priority(goal, today=date(2025, 1, 1)) == "medium"

    def test_far_deadline_falls_back_to_progress(self):
        goal = Goal(title="g", deadline="2025-12-31", progress=80)
        assert determine_goal_priority(goal, today=date(2025, 1, 1)) == "high"

    def test_progress_thresholds(self):
        assert determine_goal_priority(Goal(title="g", progress=71)) == "high"
        assert determine_goal_priority(Goal(title="g", progress=31)) == "medium"
        assert determine_goal_priority(Goal(title="g", progress=30)) == "low"

    def test_mood_priority(self):
        assert determine_mood_priority("excited") == "high"
        assert determine_mood_priority("happy") == "high"
        assert determine_mood_priority("neutral") == "medium"
        assert determine_mood_priority("sad") == "low"
        assert determine_mood_priority("frustrated") == "low"
        assert determine_mood_priority(None) == "medium"


class TestGoalConversion:
    def test_graph_layout(self):
        goal = Goal(id="g1", title="Marathon", progress=40, status="active")
        journals = [
            Journal(id=f"j{i}", content=f"day {i}", mood="happy", progress_update=i * 10)
            for i in range(7)
        ]
        related = [("supports", Goal(id="g2", title="Diet")), ("blocks", Goal(id="g3", title="Travel"))]

        nodes, edges = build_goal_graph(goal, journals, related, today=date(2025, 1, 1))

        assert nodes[0]["id"] == "goal-g1"
        assert nodes[0]["data"]["nodeType"] == "short_goal"
        assert nodes[0]["position"] == {"x": 300, "y": 100}

        journal_nodes = [n for n in nodes if n["id"].startswith("journal-")]
        assert len(journal_nodes) == 5
        assert journal_nodes[0]["data"]["label"] == "일기 1"
        assert journal_nodes[0]["data"]["nodeType"] == "task"
        assert journal_nodes[0]["data"]["priority"] == "high"

        related_nodes = [n for n in nodes if n["id"].startswith("related-")]
        assert [n["data"]["nodeType"] for n in related_nodes] == ["plan", "plan"]

        assert len(edges) == 7
        assert all(e["source"] == "goal-g1" for e in edges)
        assert edges[0]["id"] == "edge-goal-g1-journal-j0"
        supports = next(e for e in edges if e["target"] == "related-g2")
        blocks = next(e for e in edges if e["target"] == "related-g3")
        assert supports["type"] == "smoothstep" and supports["animated"] is True
        assert blocks["type"] == "straight" and blocks["animated"] is False

    @pytest.mark.asyncio
    async def test_convert_creates_blueprint(self, session):
        goal = await create_goal(
            session,
            user_id="user-1",
            title="Marathon",
            description="Finish a full marathon",
            category="health",
            is_public=True,
        )
        other = await create_goal(session, user_id="user-1", title="Diet")
        session.add(GoalRelationship(from_goal_id=goal.id, to_goal_id=other.id))
        await session.commit()
        await create_journal(session, goal, "user-1", "First 10k", mood="excited")

        blueprint = await convert_goal_to_blueprint(session, goal, "user-1")

        stored = await get_blueprint(session, blueprint.id)
        assert stored.title == "Marathon - 청사진"
        assert stored.privacy == "public"
        assert stored.category == "health"
        assert stored.author_id == "user-1"
        assert [n["id"] for n in stored.nodes] == [
            f"goal-{goal.id}",
            f"journal-{(await list_journals(session, goal.id))[0].id}",
            f"related-{other.id}",
        ]
        assert len(stored.edges) == 2

    @pytest.mark.asyncio
    async def test_private_goal_without_category(self, session):
        goal = await create_goal(session, user_id="user-1", title="Secret")
        blueprint = await convert_goal_to_blueprint(session, goal, "user-1")
        assert blueprint.privacy == "private"
        assert blueprint.category == "기타"
        assert len(blueprint.nodes) == 1
