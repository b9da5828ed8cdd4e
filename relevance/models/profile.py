"""
User profile model: preferences plus interaction history.

The canonical shape every stage sees. Legacy stored layouts are migrated to this
shape at the store boundary (relevance_server.schema.profile_schema_adapter).
"""

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Only the most recent views are kept; oldest entries are dropped first.
MAX_VIEWS = 100


class InteractionKind(str, Enum):
    BOOKMARK = "bookmark"
    LIKE = "like"
    VIEW = "view"

    @property
    def field_name(self) -> str:
        """Interactions attribute holding this kind (bookmarks, likes, views)."""
        return f"{self.value}s"

    @property
    def counter_field(self) -> str:
        """ContentItem counter bumped when this kind is recorded."""
        return f"{self.value}_count"


def _ordered_unique(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    out: List[str] = []
    for v in value:
        s = str(v).strip()
        if s and s not in out:
            out.append(s)
    return out


class Preferences(BaseModel):
    """Explicit and derived preferences used by personalized scoring."""

    model_config = ConfigDict(frozen=True)

    categories: List[str] = Field(
        default_factory=lambda: ["diet", "supplements", "research"]
    )
    keywords: List[str] = Field(default_factory=list)
    source_types: List[str] = Field(default_factory=lambda: ["paper", "news", "video"])
    min_trust_score: int = Field(default=60, ge=0, le=100)
    language: str = "ko"

    @field_validator("categories", "keywords", "source_types", mode="before")
    @classmethod
    def _as_set(cls, value: Any) -> List[str]:
        return _ordered_unique(value)


class Interactions(BaseModel):
    """Ordered, duplicate-free interaction lists (oldest first)."""

    model_config = ConfigDict(frozen=True)

    bookmarks: List[str] = Field(default_factory=list)
    likes: List[str] = Field(default_factory=list)
    views: List[str] = Field(default_factory=list)

    @field_validator("bookmarks", "likes", mode="before")
    @classmethod
    def _unique(cls, value: Any) -> List[str]:
        return _ordered_unique(value)

    @field_validator("views", mode="before")
    @classmethod
    def _unique_capped(cls, value: Any) -> List[str]:
        return _ordered_unique(value)[-MAX_VIEWS:]

    def ids(self, kind: InteractionKind) -> List[str]:
        return list(getattr(self, kind.field_name))


class UserProfile(BaseModel):
    """Per-user preferences and interaction history."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    preferences: Preferences = Field(default_factory=Preferences)
    interactions: Interactions = Field(default_factory=Interactions)

    @classmethod
    def default(cls, user_id: str) -> "UserProfile":
        """Profile created lazily for a user seen for the first time."""
        return cls(user_id=user_id)
