"""Data models for the relevance engine."""

from .config import DEFAULT_CONFIG, RecommendationConfig, resolve_config
from .content import ContentItem, SourceType
from .profile import (
    MAX_VIEWS,
    InteractionKind,
    Interactions,
    Preferences,
    UserProfile,
)
from .scoring import RecommendationCandidate, ScoredItem, TagSuggestion
from .tag import Tag, TagLink

__all__ = [
    "DEFAULT_CONFIG",
    "MAX_VIEWS",
    "ContentItem",
    "InteractionKind",
    "Interactions",
    "Preferences",
    "RecommendationCandidate",
    "RecommendationConfig",
    "ScoredItem",
    "SourceType",
    "Tag",
    "TagLink",
    "TagSuggestion",
    "UserProfile",
    "resolve_config",
]
