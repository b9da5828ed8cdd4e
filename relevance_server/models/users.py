"""User interaction and preference models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from relevance.models.profile import Interactions, Preferences


class InteractionRequest(BaseModel):
    item_id: str
    kind: str


class UpdatePreferencesRequest(BaseModel):
    """Any subset of preference fields; omitted fields keep their stored values."""

    categories: Optional[List[str]] = None
    keywords: Optional[List[str]] = None
    source_types: Optional[List[str]] = None
    min_trust_score: Optional[int] = None
    language: Optional[str] = None

    def updates(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ProfileResponse(BaseModel):
    user_id: str
    preferences: Preferences
    interactions: Interactions = Field(default_factory=Interactions)


class PreferencesResponse(BaseModel):
    user_id: str
    preferences: Preferences


class InteractionStatusResponse(BaseModel):
    user_id: str
    item_id: str
    bookmarked: bool
    liked: bool
