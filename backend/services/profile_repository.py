"""
Profile Repository — the demo user's profile, locally saved blueprints and
follow relations.

Everything is kept as JSON text in a key/value storage backend, mirroring
the browser's local storage layout:

    user-profile        serialized UserProfile
    blueprint-<id>      serialized Blueprint
    follow-relations    serialized list of FollowRelation

The backend is injected: InMemoryStorage for tests, JsonFileStorage in
production. Every mutation rewrites the whole record; concurrent writers
from different processes follow last-writer-wins.
"""

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from models.domain import (
    Badge,
    Blueprint,
    FollowRelation,
    NewBadge,
    SaveStatus,
    UserProfile,
    UserStats,
)

logger = logging.getLogger(__name__)

USER_KEY = "user-profile"
BLUEPRINT_PREFIX = "blueprint-"
FOLLOW_KEY = "follow-relations"

_follow_list = TypeAdapter(List[FollowRelation])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Storage backends
# ---------------------------------------------------------------------------

class KeyValueStorage(ABC):
    """String-to-string storage with the local-storage contract."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...

    @abstractmethod
    def keys(self) -> List[str]: ...


class InMemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class JsonFileStorage(KeyValueStorage):
    """
    Persists all keys in a single JSON object on disk.

    The file is re-read on every access so that edits from other processes
    are picked up; writes go through a temp file and an atomic rename.
    A file that is not a JSON object reads as empty; the next write moves it
    aside to ``<path>.corrupt`` before saving.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._unreadable = False

    def _read(self) -> Dict[str, str]:
        self._unreadable = False
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                items = json.load(fh)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.exception("Storage file %s is unreadable, treating it as empty", self.path)
            self._unreadable = True
            return {}
        if not isinstance(items, dict):
            logger.error("Storage file %s does not hold a JSON object, treating it as empty", self.path)
            self._unreadable = True
            return {}
        return items

    def _write(self, items: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        if self._unreadable:
            # Keep the unreadable file for inspection instead of replacing it.
            backup_path = f"{self.path}.corrupt"
            os.replace(self.path, backup_path)
            logger.warning("Moved unreadable storage file to %s", backup_path)
            self._unreadable = False
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(items, fh, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._read()
            items[key] = value
            self._write(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._read()
            if key in items:
                del items[key]
                self._write(items)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._read())


def _dump(model: BaseModel) -> str:
    return model.model_dump_json(by_alias=True)


# ---------------------------------------------------------------------------
# User profile
# ---------------------------------------------------------------------------

def create_default_user() -> UserProfile:
    """The profile created on first load: one blueprint, one milestone badge."""
    now = _utcnow()
    return UserProfile(
        id="default-user",
        username="user123",
        email="user@example.com",
        display_name="익명 사용자",
        bio="목표를 향해 나아가는 중입니다.",
        interests=["창업", "자기계발"],
        created_at=now,
        updated_at=now,
        stats=UserStats(blueprints_count=1),
        badges=[
            Badge(
                id="first-blueprint",
                name="첫 청사진",
                description="첫 번째 청사진을 생성했습니다",
                icon="🌱",
                category="milestone",
                unlocked_at=now,
            )
        ],
    )


class UserRepository:
    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def load(self) -> UserProfile:
        """
        Return the stored profile, creating and persisting the default one
        when storage is empty. An unreadable record yields a default profile
        without overwriting what is stored.
        """
        raw = self.storage.get_item(USER_KEY)
        if raw is None:
            user = create_default_user()
            self.save(user)
            return user

        try:
            return UserProfile.model_validate_json(raw)
        except ValidationError:
            logger.exception("Error loading user profile from storage")
            return create_default_user()

    def save(self, user: UserProfile) -> None:
        self.storage.set_item(USER_KEY, _dump(user))

    def update(self, updates: dict) -> UserProfile:
        """Merge camelCase field updates into the profile and rewrite it."""
        data = self.load().model_dump(by_alias=True)
        data.update(updates)
        data["updatedAt"] = _utcnow()
        user = UserProfile.model_validate(data)
        self.save(user)
        return user

    def add_badge(self, badge: NewBadge) -> UserProfile:
        user = self.load()
        if any(b.id == badge.id for b in user.badges):
            return user

        unlocked = Badge(**badge.model_dump(), unlocked_at=_utcnow())
        badges = [b.model_dump(by_alias=True) for b in user.badges]
        badges.append(unlocked.model_dump(by_alias=True))
        return self.update({"badges": badges})

    def update_stats(self, stat_updates: dict) -> UserProfile:
        stats = self.load().stats.model_dump(by_alias=True)
        stats.update(stat_updates)
        return self.update({"stats": stats})


# ---------------------------------------------------------------------------
# Locally saved blueprints
# ---------------------------------------------------------------------------

class SaveResult(BaseModel):
    status: SaveStatus
    error: Optional[str] = None
    last_saved: Optional[datetime] = None


class BlueprintStore:
    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    @staticmethod
    def key_for(blueprint_id: str) -> str:
        return f"{BLUEPRINT_PREFIX}{blueprint_id}"

    def save(self, blueprint: Blueprint) -> SaveResult:
        try:
            self.storage.set_item(self.key_for(blueprint.id), _dump(blueprint))
        except OSError as exc:
            logger.error("Failed to save blueprint %s: %s", blueprint.id, exc)
            return SaveResult(status=SaveStatus.ERROR, error=str(exc))
        return SaveResult(status=SaveStatus.SAVED, last_saved=_utcnow())

    def load(self, blueprint_id: str) -> Optional[Blueprint]:
        raw = self.storage.get_item(self.key_for(blueprint_id))
        if raw is None:
            return None
        return Blueprint.model_validate_json(raw)

    def keys(self) -> List[str]:
        return [k for k in self.storage.keys() if k.startswith(BLUEPRINT_PREFIX)]


# ---------------------------------------------------------------------------
# Follow relations
# ---------------------------------------------------------------------------

class FollowStore:
    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def relations(self) -> List[FollowRelation]:
        raw = self.storage.get_item(FOLLOW_KEY)
        if raw is None:
            return []
        try:
            return _follow_list.validate_json(raw)
        except ValidationError:
            logger.exception("Error loading follow relations from storage")
            return []

    def _save(self, relations: List[FollowRelation]) -> None:
        self.storage.set_item(
            FOLLOW_KEY,
            _follow_list.dump_json(relations, by_alias=True).decode("utf-8"),
        )

    def follow(self, follower_id: str, following_id: str) -> bool:
        """Returns False for self-follows and relations that already exist."""
        if follower_id == following_id:
            return False
        relations = self.relations()
        if any(
            r.follower_id == follower_id and r.following_id == following_id
            for r in relations
        ):
            return False
        relations.append(FollowRelation(follower_id=follower_id, following_id=following_id))
        self._save(relations)
        return True

    def unfollow(self, follower_id: str, following_id: str) -> bool:
        relations = [
            r for r in self.relations()
            if not (r.follower_id == follower_id and r.following_id == following_id)
        ]
        self._save(relations)
        return True

    def is_following(self, follower_id: str, following_id: str) -> bool:
        return any(
            r.follower_id == follower_id and r.following_id == following_id
            for r in self.relations()
        )

    def followers(self, user_id: str) -> List[str]:
        return [r.follower_id for r in self.relations() if r.following_id == user_id]

    def following(self, user_id: str) -> List[str]:
        return [r.following_id for r in self.relations() if r.follower_id == user_id]


# ---------------------------------------------------------------------------
# Save-status display and storage diagnostics
# ---------------------------------------------------------------------------

def format_last_saved(last_saved: datetime, now: Optional[datetime] = None) -> str:
    now = now or _utcnow()
    diff = int((now - last_saved).total_seconds())
    if diff < 60:
        return "방금 전"
    if diff < 3600:
        return f"{diff // 60}분 전"
    if diff < 86400:
        return f"{diff // 3600}시간 전"
    return f"{last_saved.year}. {last_saved.month}. {last_saved.day}."


def describe_save_status(
    status: SaveStatus,
    error: Optional[str] = None,
    last_saved: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Optional[dict]:
    """
    Map a save status to what the indicator shows. Idle renders nothing
    and returns None.
    """
    if status == SaveStatus.IDLE:
        return None
    if status == SaveStatus.SAVING:
        return {"status": status.value, "label": "저장 중..."}
    if status == SaveStatus.SAVED:
        return {
            "status": status.value,
            "label": "저장됨",
            "lastSaved": format_last_saved(last_saved, now) if last_saved else None,
        }
    return {"status": status.value, "label": error or "저장 실패"}


def storage_report(storage: KeyValueStorage) -> dict:
    """Summarize saved blueprints and the total size of stored values."""
    blueprints = []
    unreadable = []
    total_size = 0

    for key in sorted(storage.keys()):
        value = storage.get_item(key) or ""
        total_size += len(value)
        if not key.startswith(BLUEPRINT_PREFIX):
            continue
        try:
            data = json.loads(value)
        except json.JSONDecodeError as exc:
            unreadable.append({"key": key, "error": str(exc)})
            continue
        if not isinstance(data, dict):
            unreadable.append({"key": key, "error": "Stored value is not an object"})
            continue
        blueprints.append({
            "key": key,
            "id": data.get("id"),
            "title": data.get("title"),
            "nodeCount": len(data.get("nodes") or []),
            "lastModified": data.get("lastModified") or data.get("updatedAt"),
        })

    return {
        "blueprints": blueprints,
        "unreadable": unreadable,
        "totalSize": total_size,
    }
