"""
Migration Service — seeds the public gallery with sample users and
blueprints.

Runs on the admin connection so row-level security does not block the
inserts. Users are upserted; blueprints are inserted every run.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from services.blueprint_service import create_blueprint
from services.sample_data import SAMPLE_BLUEPRINTS, SAMPLE_USERS
from services.user_service import upsert_user

logger = logging.getLogger(__name__)


async def migrate_sample_blueprints(session: AsyncSession) -> dict:
    """
    Upsert the sample users, then insert the sample blueprints.

    A failing user or blueprint is logged and skipped.

    Returns:
        {"users": <created or confirmed>, "blueprints": <inserted>}
    """
    logger.info("Starting gallery sample blueprint migration")

    if not config.service_role_key():
        logger.warning(
            "Supabase service role key is not set; migrating with regular credentials"
        )

    users = 0
    for sample in SAMPLE_USERS:
        try:
            await upsert_user(
                session,
                user_id=sample["id"],
                username=sample["username"],
                email=sample["email"],
                role=sample["role"],
            )
        except SQLAlchemyError:
            await session.rollback()
            logger.exception("Failed to create user %s", sample["username"])
            continue
        users += 1
        logger.info("User created/confirmed: %s", sample["username"])

    blueprints = 0
    for sample in SAMPLE_BLUEPRINTS:
        try:
            await create_blueprint(session, **sample)
        except SQLAlchemyError:
            await session.rollback()
            logger.exception("Failed to create blueprint %s", sample["title"])
            continue
        blueprints += 1
        logger.info("Blueprint created: %s", sample["title"])

    logger.info(
        "Gallery sample migration finished: %d users, %d blueprints",
        users,
        blueprints,
    )
    return {"users": users, "blueprints": blueprints}
