"""Pydantic request/response models for the API."""

from .recommendations import (
    CollaborativeResponse,
    IntegratedItem,
    IntegratedResponse,
    PersonalizedItem,
    PersonalizedResponse,
)
from .tags import PopularTagsResponse, RelatedTagsRequest, RelatedTagsResponse, TagInfo
from .users import (
    InteractionRequest,
    InteractionStatusResponse,
    PreferencesResponse,
    ProfileResponse,
    UpdatePreferencesRequest,
)

__all__ = [
    "CollaborativeResponse",
    "IntegratedItem",
    "IntegratedResponse",
    "InteractionRequest",
    "InteractionStatusResponse",
    "PersonalizedItem",
    "PersonalizedResponse",
    "PopularTagsResponse",
    "PreferencesResponse",
    "ProfileResponse",
    "RelatedTagsRequest",
    "RelatedTagsResponse",
    "TagInfo",
    "UpdatePreferencesRequest",
]
