"""
Scoring models: ranked outputs of the pipeline stages.

Contains:
- ScoredItem: an item with its personalized score and per-factor breakdown
- RecommendationCandidate: an item with category/tag match signals (integrated)
- TagSuggestion: a co-occurring tag with its association score
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .content import ContentItem


class ScoredItem(BaseModel):
    """An item with its personalized recommendation score."""

    model_config = ConfigDict(frozen=True)

    item: ContentItem
    score: float = Field(ge=0.0, le=1.0)
    breakdown: Dict[str, float] = Field(default_factory=dict)


class RecommendationCandidate(BaseModel):
    """A related-content candidate produced by category and/or tag retrieval."""

    model_config = ConfigDict(frozen=True)

    item: ContentItem
    matching_tags: List[str] = Field(default_factory=list)
    matching_tag_count: int = 0
    category_match: bool = False
    tag_match: bool = False
    relevance_score: float = Field(default=0.0, ge=0.0, le=1.0)
    final_score: float = Field(default=0.0, ge=0.0, le=1.0)
    recommendation_sources: List[str] = Field(default_factory=list)
    reason: str = ""

    @property
    def id(self) -> str:
        return self.item.id


class TagSuggestion(BaseModel):
    """A tag that co-occurs with the query tags."""

    model_config = ConfigDict(frozen=True)

    name: str
    co_occurrence_count: int
    co_occurrence_rate: float
    global_post_count: int
    association_score: float = Field(ge=0.0, le=1.0)
