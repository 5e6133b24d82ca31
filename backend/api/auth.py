"""
Bearer-token authentication for the hosted auth service.

Access tokens are HS256 JWTs signed with SUPABASE_JWT_SECRET for the
"authenticated" audience; the ``sub`` claim is the user id.
"""

import logging
from typing import Optional

import jwt
from fastapi import Header

import config
from api.errors import ApiError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"


def decode_access_token(token: str) -> dict:
    """
    Verify a token and return its claims.

    Raises:
        jwt.InvalidTokenError: On a bad signature, audience, expiry or format.
    """
    return jwt.decode(
        token,
        config.SUPABASE_JWT_SECRET,
        algorithms=["HS256"],
        audience=config.JWT_AUDIENCE,
        options={"require": ["sub", "exp"]},
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_user_id(authorization: Optional[str]) -> Optional[str]:
    """The authenticated user id, or None for a missing or invalid token."""
    token = _bearer_token(authorization)
    if token is None:
        return None
    try:
        return decode_access_token(token)["sub"]
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected access token: %s", exc)
        return None


async def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """Dependency: the caller's user id, or 401."""
    user_id = resolve_user_id(authorization)
    if user_id is None:
        raise ApiError(401, "Unauthorized")
    return user_id
