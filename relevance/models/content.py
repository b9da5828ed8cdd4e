"""
Content item model: typed representation of one recommendable post.

Used by every stage instead of raw store dicts.
Built from store/API dicts via ContentItem.model_validate(d).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceType(str, Enum):
    PAPER = "paper"
    VIDEO = "video"
    NEWS = "news"
    MANUAL = "manual"


# Older records name video sources after the hosting platform.
_SOURCE_TYPE_ALIASES = {"youtube": SourceType.VIDEO}

# Sort position of items with no publication date: older than anything dated.
UNDATED = datetime.min.replace(tzinfo=timezone.utc)


class ContentItem(BaseModel):
    """
    A content item with its category, tags, trust rating and engagement counters.

    Instances are frozen: the engine never mutates an item, counters change only
    through ContentStore.increment_counter.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    trust_score: int = Field(default=0, ge=0, le=100)
    source_type: SourceType = SourceType.MANUAL
    published_date: Optional[datetime] = None
    view_count: int = Field(default=0, ge=0)
    like_count: int = Field(default=0, ge=0)
    bookmark_count: int = Field(default=0, ge=0)
    is_active: bool = True
    is_draft: bool = False
    title: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _unique_tags(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [t for t in value.split(",")]
        seen: List[str] = []
        for tag in value:
            if tag is None:
                continue
            name = str(tag).strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    @field_validator("source_type", mode="before")
    @classmethod
    def _source_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = value.strip().lower()
            return _SOURCE_TYPE_ALIASES.get(key, key)
        return value

    @field_validator("published_date", mode="after")
    @classmethod
    def _aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def sort_date(self) -> datetime:
        """published_date, with undated items placed before every dated one."""
        return self.published_date or UNDATED

    @property
    def engagement(self) -> int:
        """views + 2 * likes; the popularity tie-break used across rankings."""
        return self.view_count + 2 * self.like_count

