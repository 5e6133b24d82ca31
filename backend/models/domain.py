"""
Domain types shared by the API, the analysis utilities and the profile
repository.

Field names serialize in camelCase (``by_alias=True``) to match the JSON the
frontend keeps in local storage. Datetime fields accept ISO strings, so a
stored record revives into real ``datetime`` objects on load.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NodeType(str, Enum):
    VALUE = "value"            # 가치관
    LONG_GOAL = "long_goal"    # 장기목표
    SHORT_GOAL = "short_goal"  # 단기목표
    PLAN = "plan"              # 계획
    TASK = "task"              # 할일


Priority = Literal["low", "medium", "high"]
Privacy = Literal["private", "unlisted", "followers", "public"]
EdgeKind = Literal["dependency", "contributes_to", "enables"]


class BlueprintNode(CamelModel):
    id: str
    type: NodeType
    title: str
    description: Optional[str] = None
    completed: bool = False
    progress: float = 0
    due_date: Optional[str] = None
    priority: Priority = "medium"
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("progress")
    @classmethod
    def _clamp_progress(cls, value: float) -> float:
        return max(0.0, min(100.0, value))


class BlueprintEdge(CamelModel):
    id: str
    source: str
    target: str
    type: EdgeKind = "contributes_to"


def find_dangling_edges(nodes: List[BlueprintNode], edges: List[BlueprintEdge]) -> List[str]:
    """Return ids of edges whose source or target is not a node of the graph."""
    node_ids = {n.id for n in nodes}
    return [e.id for e in edges if e.source not in node_ids or e.target not in node_ids]


class Blueprint(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    nodes: List[BlueprintNode] = Field(default_factory=list)
    edges: List[BlueprintEdge] = Field(default_factory=list)
    author_id: str = ""
    privacy: Privacy = "private"
    category: str = "기타"
    thumbnail: Optional[str] = None
    view_count: int = 0
    like_count: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_public(self) -> bool:
        return self.privacy == "public"

    @model_validator(mode="after")
    def _edges_reference_nodes(self) -> "Blueprint":
        dangling = find_dangling_edges(self.nodes, self.edges)
        if dangling:
            raise ValueError(f"Edges reference unknown nodes: {', '.join(dangling)}")
        return self


BadgeCategory = Literal["achievement", "milestone", "social", "special"]


class NewBadge(CamelModel):
    id: str
    name: str
    description: str
    icon: str
    category: BadgeCategory


class Badge(NewBadge):
    unlocked_at: datetime = Field(default_factory=_utcnow)


class UserStats(CamelModel):
    blueprints_count: int = 0
    completed_blueprints: int = 0
    followers_count: int = 0
    following_count: int = 0
    total_views: int = 0


class UserProfile(CamelModel):
    """The demo user profile kept under the ``user-profile`` storage key."""

    id: str
    username: str
    email: str
    display_name: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    stats: UserStats = Field(default_factory=UserStats)
    badges: List[Badge] = Field(default_factory=list)


class FollowRelation(CamelModel):
    follower_id: str
    following_id: str
    created_at: datetime = Field(default_factory=_utcnow)


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"
