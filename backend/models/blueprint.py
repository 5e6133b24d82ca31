"""
Blueprint model — stores goal blueprints as JSON in PostgreSQL.

Each blueprint is a user's goal graph: typed nodes (value → long goal →
short goal → plan → task) and the directed edges between them.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


class Blueprint(Base):
    """
    A goal blueprint stored in PostgreSQL.

    The nodes and edges are stored as JSON columns matching the Blueprint
    interface of the frontend canvas.
    """

    __tablename__ = "blueprints"

    id = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    nodes = Column(JSON, nullable=False, default=list)
    edges = Column(JSON, nullable=False, default=list)
    author_id = Column(String(36), nullable=False)
    privacy = Column(String(20), nullable=False, default="private")
    category = Column(String(100), nullable=False, default="기타")
    thumbnail = Column(Text, nullable=True)
    view_count = Column(Integer, nullable=False, default=0)
    like_count = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_public(self) -> bool:
        return self.privacy == "public"

    def to_dict(self) -> dict:
        """Serialize to the Blueprint JSON format expected by the frontend."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "nodes": self.nodes,
            "edges": self.edges,
            "authorId": self.author_id,
            "privacy": self.privacy,
            "isPublic": self.is_public,
            "category": self.category,
            "thumbnail": self.thumbnail,
            "viewCount": self.view_count,
            "likeCount": self.like_count,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
