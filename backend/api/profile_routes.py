"""
REST API routes for the demo profile, follow relations, locally saved
blueprints and the auth-guard session check.

Endpoints:
    GET    /api/auth/session                          — Is the caller signed in?
    GET    /api/profile                               — Current profile (default on first load)
    PATCH  /api/profile                               — Update profile fields
    POST   /api/profile/badges                        — Award a badge (no-op if owned)
    PATCH  /api/profile/stats                         — Update profile statistics
    PUT    /api/profile/blueprints/{id}               — Save a blueprint locally
    GET    /api/profile/blueprints/{id}               — Load a locally saved blueprint
    GET    /api/profile/storage                       — Storage diagnostics
    POST   /api/follows                               — Follow a user
    DELETE /api/follows                               — Unfollow a user
    GET    /api/follows/{user_id}                     — Followers and following
    GET    /api/follows/{follower_id}/{following_id}  — Is follower following?
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, ValidationError, field_validator

import config
from api.auth import LOGIN_PATH, resolve_user_id
from api.errors import ApiError
from models.domain import Blueprint, CamelModel, NewBadge
from services.profile_repository import (
    BlueprintStore,
    FollowStore,
    JsonFileStorage,
    KeyValueStorage,
    UserRepository,
    describe_save_status,
    storage_report,
)

logger = logging.getLogger(__name__)

profile_router = APIRouter()

_storage: Optional[KeyValueStorage] = None


def get_profile_storage() -> KeyValueStorage:
    """Dependency: the process-wide profile storage file."""
    global _storage
    if _storage is None:
        _storage = JsonFileStorage(config.PROFILE_STORAGE_PATH)
    return _storage


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------

class ProfileUpdateRequest(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    interests: Optional[List[str]] = None

    @field_validator("username", "email", "display_name", "interests")
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class StatsUpdateRequest(CamelModel):
    blueprints_count: Optional[int] = None
    completed_blueprints: Optional[int] = None
    followers_count: Optional[int] = None
    following_count: Optional[int] = None
    total_views: Optional[int] = None

    @field_validator("*")
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class FollowRequest(BaseModel):
    followerId: str
    followingId: str


def _profile_json(user) -> dict:
    return user.model_dump(by_alias=True, mode="json")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@profile_router.get("/auth/session")
async def get_auth_session(authorization: Optional[str] = Header(None)):
    """Tell the client-side auth guard whether to render or redirect."""
    user_id = resolve_user_id(authorization)
    if user_id is None:
        raise ApiError(401, "Unauthorized", redirectTo=LOGIN_PATH)
    return {"authenticated": True, "userId": user_id}


@profile_router.get("/profile")
async def get_profile(storage: KeyValueStorage = Depends(get_profile_storage)):
    """Load the profile, creating the default one on first use."""
    return _profile_json(UserRepository(storage).load())


@profile_router.patch("/profile")
async def update_profile(
    request: ProfileUpdateRequest,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    """Update the supplied profile fields."""
    updates = request.model_dump(by_alias=True, exclude_unset=True)
    return _profile_json(UserRepository(storage).update(updates))


@profile_router.post("/profile/badges")
async def award_badge(
    badge: NewBadge,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    """Add a badge; a badge id the profile already has is ignored."""
    return _profile_json(UserRepository(storage).add_badge(badge))


@profile_router.patch("/profile/stats")
async def update_profile_stats(
    request: StatsUpdateRequest,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    updates = request.model_dump(by_alias=True, exclude_unset=True)
    return _profile_json(UserRepository(storage).update_stats(updates))


@profile_router.put("/profile/blueprints/{blueprint_id}")
async def save_local_blueprint(
    blueprint_id: str,
    blueprint: Blueprint,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    """Save a blueprint to profile storage and report the save status."""
    if blueprint.id != blueprint_id:
        raise ApiError(400, "Blueprint id does not match the URL")

    result = BlueprintStore(storage).save(blueprint)
    return {
        "saveStatus": describe_save_status(result.status, result.error, result.last_saved),
    }


@profile_router.get("/profile/blueprints/{blueprint_id}")
async def load_local_blueprint(
    blueprint_id: str,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    try:
        blueprint = BlueprintStore(storage).load(blueprint_id)
    except ValidationError:
        logger.exception("Stored blueprint %s is unreadable", blueprint_id)
        raise ApiError(500, "Stored blueprint is unreadable")

    if blueprint is None:
        raise ApiError(404, f"Blueprint '{blueprint_id}' not found.")
    return blueprint.model_dump(by_alias=True, mode="json")


@profile_router.get("/profile/storage")
async def get_storage_report(storage: KeyValueStorage = Depends(get_profile_storage)):
    """List locally saved blueprints, unreadable keys and total size."""
    return storage_report(storage)


@profile_router.post("/follows")
async def follow_user(
    request: FollowRequest,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    """Follow a user. Following yourself or someone already followed is a no-op."""
    followed = FollowStore(storage).follow(request.followerId, request.followingId)
    return {"followed": followed}


@profile_router.delete("/follows")
async def unfollow_user(
    request: FollowRequest,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    FollowStore(storage).unfollow(request.followerId, request.followingId)
    return {"unfollowed": True}


@profile_router.get("/follows/{user_id}")
async def get_follow_lists(
    user_id: str,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    store = FollowStore(storage)
    followers = store.followers(user_id)
    following = store.following(user_id)
    return {
        "followers": followers,
        "following": following,
        "followersCount": len(followers),
        "followingCount": len(following),
    }


@profile_router.get("/follows/{follower_id}/{following_id}")
async def get_follow_status(
    follower_id: str,
    following_id: str,
    storage: KeyValueStorage = Depends(get_profile_storage),
):
    return {"isFollowing": FollowStore(storage).is_following(follower_id, following_id)}
