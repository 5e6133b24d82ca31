"""
Tests for the gallery sample-data migration.

Uses an in-memory SQLite database for isolation.
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from models.blueprint import Base
from models.user import User
from services.blueprint_service import list_public_blueprints
from services.migration_service import migrate_sample_blueprints
from services.sample_data import SAMPLE_BLUEPRINTS, SAMPLE_USERS
from services.user_service import get_user

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session():
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as sess:
        yield sess

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


class TestSampleData:
    def test_every_blueprint_is_public_and_well_formed(self):
        user_ids = {u["id"] for u in SAMPLE_USERS}
        assert len(SAMPLE_BLUEPRINTS) == 6
        for blueprint in SAMPLE_BLUEPRINTS:
            assert blueprint["privacy"] == "public"
            assert blueprint["author_id"] in user_ids
            node_ids = {n["id"] for n in blueprint["nodes"]}
            for edge in blueprint["edges"]:
                assert edge["source"] in node_ids
                assert edge["target"] in node_ids

    def test_completed_matches_full_progress(self):
        for blueprint in SAMPLE_BLUEPRINTS:
            for node in blueprint["nodes"]:
                data = node["data"]
                assert data["completed"] == (data["progress"] == 100)


class TestMigrateSampleBlueprints:
    @pytest.mark.asyncio
    async def test_seeds_users_and_public_blueprints(self, session):
        result = await migrate_sample_blueprints(session)

        assert result == {"users": 6, "blueprints": 6}
        assert (await get_user(session, SAMPLE_USERS[0]["id"])).username == "senior_dev"
        gallery = await list_public_blueprints(session, limit=50)
        assert len(gallery) == 6

    @pytest.mark.asyncio
    async def test_rerun_upserts_users_but_duplicates_blueprints(self, session):
        await migrate_sample_blueprints(session)
        result = await migrate_sample_blueprints(session)

        assert result == {"users": 6, "blueprints": 6}
        assert len(await list_public_blueprints(session, limit=50)) == 12

    @pytest.mark.asyncio
    async def test_failing_user_is_skipped(self, session):
        session.add(User(id="someone-else", username="senior_dev"))
        await session.commit()

        result = await migrate_sample_blueprints(session)
        assert result == {"users": 5, "blueprints": 6}

    @pytest.mark.asyncio
    async def test_warns_without_service_role_key(self, session, monkeypatch, caplog):
        monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
        monkeypatch.delenv("NEXT_PUBLIC_SUPABASE_SERVICE_ROLE_KEY", raising=False)

        with caplog.at_level(logging.WARNING, logger="services.migration_service"):
            await migrate_sample_blueprints(session)

        assert "service role key is not set" in caplog.text
