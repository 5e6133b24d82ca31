"""
Tests for the blueprint CRUD service and the gallery queries.

Uses an in-memory SQLite database for isolation.
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from models.blueprint import Base
from services.blueprint_service import (
    create_blueprint,
    delete_blueprint,
    get_blueprint,
    increment_view_count,
    list_blueprints,
    list_public_blueprints,
    update_blueprint,
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
        yield sess

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

SAMPLE_NODES = [
    {
        "id": "1",
        "type": "input",
        "position": {"x": 300, "y": 20},
        "data": {"label": "기술로 가치 창출하기", "nodeType": "value", "progress": 100},
    },
    {
        "id": "2",
        "type": "default",
        "position": {"x": 300, "y": 90},
        "data": {"label": "시니어 개발자", "nodeType": "long_goal", "progress": 73},
    },
]

SAMPLE_EDGES = [
    {"id": "e1-2", "source": "1", "target": "2"},
]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestBlueprintService:
    @pytest.mark.asyncio
    async def test_create_and_get(self, session):
        bp = await create_blueprint(
            session,
            title="커리어 청사진",
            author_id="user-1",
            nodes=SAMPLE_NODES,
            edges=SAMPLE_EDGES,
        )
        assert bp.id is not None
        assert bp.privacy == "private"
        assert bp.category == "기타"
        assert bp.view_count == 0

        fetched = await get_blueprint(session, bp.id)
        assert fetched is not None
        assert fetched.title == "커리어 청사진"
        assert fetched.nodes == SAMPLE_NODES

    @pytest.mark.asyncio
    async def test_create_with_explicit_id(self, session):
        bp = await create_blueprint(
            session,
            title="Fixed",
            author_id="user-1",
            nodes=[],
            edges=[],
            blueprint_id="fixed-id-1234",
        )
        assert bp.id == "fixed-id-1234"

    @pytest.mark.asyncio
    async def test_get_nonexistent_returns_none(self, session):
        assert await get_blueprint(session, "ghost") is None

    @pytest.mark.asyncio
    async def test_list_filters_by_author(self, session):
        await create_blueprint(session, title="A", author_id="user-1", nodes=[], edges=[])
        await create_blueprint(session, title="B", author_id="user-2", nodes=[], edges=[])

        assert len(await list_blueprints(session)) == 2
        mine = await list_blueprints(session, author_id="user-1")
        assert [bp.title for bp in mine] == ["A"]

    @pytest.mark.asyncio
    async def test_update_only_supplied_fields(self, session):
        bp = await create_blueprint(
            session,
            title="Original",
            description="desc",
            author_id="user-1",
            nodes=SAMPLE_NODES,
            edges=SAMPLE_EDGES,
        )
        updated = await update_blueprint(session, bp.id, title="Renamed", privacy="public")
        assert updated.title == "Renamed"
        assert updated.privacy == "public"
        assert updated.description == "desc"
        assert updated.nodes == SAMPLE_NODES

    @pytest.mark.asyncio
    async def test_update_nonexistent_returns_none(self, session):
        assert await update_blueprint(session, "ghost", title="x") is None

    @pytest.mark.asyncio
    async def test_delete(self, session):
        bp = await create_blueprint(session, title="Doomed", author_id="user-1", nodes=[], edges=[])
        assert await delete_blueprint(session, bp.id) is True
        assert await get_blueprint(session, bp.id) is None
        assert await delete_blueprint(session, bp.id) is False

    @pytest.mark.asyncio
    async def test_to_dict_uses_camel_case(self, session):
        bp = await create_blueprint(
            session,
            title="Dict",
            author_id="user-1",
            nodes=[],
            edges=[],
            privacy="public",
        )
        data = bp.to_dict()
        assert data["authorId"] == "user-1"
        assert data["isPublic"] is True
        assert data["viewCount"] == 0
        assert data["createdAt"] is not None


class TestGalleryQueries:
    @pytest.mark.asyncio
    async def test_public_listing_excludes_private(self, session):
        await create_blueprint(session, title="Private", author_id="u", nodes=[], edges=[])
        await create_blueprint(
            session, title="Public", author_id="u", nodes=[], edges=[], privacy="public"
        )
        await create_blueprint(
            session, title="Unlisted", author_id="u", nodes=[], edges=[], privacy="unlisted"
        )

        public = await list_public_blueprints(session)
        assert [bp.title for bp in public] == ["Public"]

    @pytest.mark.asyncio
    async def test_public_listing_respects_limit(self, session):
        for i in range(5):
            await create_blueprint(
                session, title=f"P{i}", author_id="u", nodes=[], edges=[], privacy="public"
            )
        assert len(await list_public_blueprints(session, limit=3)) == 3
        assert len(await list_public_blueprints(session, limit=3, offset=3)) == 2

    @pytest.mark.asyncio
    async def test_increment_view_count(self, session):
        bp = await create_blueprint(
            session, title="Viewed", author_id="u", nodes=[], edges=[], privacy="public"
        )
        await increment_view_count(session, bp.id)
        viewed = await increment_view_count(session, bp.id)
        assert viewed.view_count == 2

    @pytest.mark.asyncio
    async def test_increment_view_count_ignores_private(self, session):
        bp = await create_blueprint(session, title="Hidden", author_id="u", nodes=[], edges=[])
        assert await increment_view_count(session, bp.id) is None
