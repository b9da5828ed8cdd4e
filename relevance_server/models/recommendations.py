"""Recommendation response models."""

from typing import Dict, List

from pydantic import BaseModel

from relevance.models.content import ContentItem


class PersonalizedItem(BaseModel):
    item: ContentItem
    score: float
    breakdown: Dict[str, float] = {}


class PersonalizedResponse(BaseModel):
    user_id: str
    items: List[PersonalizedItem]


class CollaborativeResponse(BaseModel):
    user_id: str
    items: List[ContentItem]


class IntegratedItem(BaseModel):
    item: ContentItem
    final_score: float
    relevance_score: float
    category_match: bool
    tag_match: bool
    matching_tags: List[str] = []
    recommendation_sources: List[str] = []
    reason: str


class IntegratedResponse(BaseModel):
    item_id: str
    items: List[IntegratedItem]
