"""
User Service — lookups and upserts on the users table.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User

logger = logging.getLogger(__name__)


async def get_user(session: AsyncSession, user_id: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def upsert_user(
    session: AsyncSession,
    user_id: str,
    username: str,
    email: Optional[str] = None,
    role: str = "user",
) -> User:
    """Insert the user, or overwrite username/email/role if the id exists."""
    user = await get_user(session, user_id)
    if user is None:
        user = User(id=user_id)
        session.add(user)
        logger.debug("Creating user %s", user_id)

    user.username = username
    user.email = email
    user.role = role

    await session.commit()
    await session.refresh(user)
    return user
