"""
Goal models — goals, their journal entries, community reactions and
goal-to-goal relationships.

Row dictionaries keep the column names of the hosted schema (snake_case),
which is what the goal detail pages consume.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from models.blueprint import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class Goal(Base):
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    parent_goal_id = Column(String(36), ForeignKey("goals.id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)
    deadline = Column(String(10), nullable=True)  # YYYY-MM-DD
    progress = Column(Integer, nullable=False, default=0)
    is_public = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "parent_goal_id": self.parent_goal_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "deadline": self.deadline,
            "progress": self.progress,
            "is_public": self.is_public,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Journal(Base):
    __tablename__ = "journals"

    id = Column(String(36), primary_key=True, default=_uuid)
    goal_id = Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    mood = Column(String(20), nullable=True)
    progress_update = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "goal_id": self.goal_id,
            "user_id": self.user_id,
            "content": self.content,
            "mood": self.mood,
            "progress_update": self.progress_update,
            "created_at": _iso(self.created_at),
        }


class GoalReaction(Base):
    __tablename__ = "goal_reactions"
    __table_args__ = (UniqueConstraint("goal_id", "user_id", "type"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    goal_id = Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(20), nullable=False)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "goal_id": self.goal_id,
            "user_id": self.user_id,
            "type": self.type,
            "message": self.message,
            "created_at": _iso(self.created_at),
        }


class GoalRelationship(Base):
    __tablename__ = "goal_relationships"

    id = Column(String(36), primary_key=True, default=_uuid)
    from_goal_id = Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    to_goal_id = Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    relationship_type = Column(String(30), nullable=False, default="supports")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
