"""
Content relevance engine: pure scoring and ranking over in-memory items.

Single entry point for the relevance package:
- models/: RecommendationConfig, ContentItem, UserProfile, Tag, scored outputs
- stages/: candidate retrieval (category, tag), weighted scoring, integrated
  merge, co-occurrence, collaborative filtering, interaction updates
- errors: ValidationError, UpstreamUnavailable, NotFound
"""

from .errors import NotFound, RecommendationError, UpstreamUnavailable, ValidationError
from .models import (
    DEFAULT_CONFIG,
    ContentItem,
    InteractionKind,
    Interactions,
    Preferences,
    RecommendationCandidate,
    RecommendationConfig,
    ScoredItem,
    SourceType,
    Tag,
    TagLink,
    TagSuggestion,
    UserProfile,
    resolve_config,
)
from .stages import (
    merge_by_id,
    merge_candidates,
    rank_integrated,
    rank_personalized,
    rank_related_tags,
    score_tag_candidates,
    select_by_category,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ContentItem",
    "InteractionKind",
    "Interactions",
    "NotFound",
    "Preferences",
    "RecommendationCandidate",
    "RecommendationConfig",
    "RecommendationError",
    "ScoredItem",
    "SourceType",
    "Tag",
    "TagLink",
    "TagSuggestion",
    "UpstreamUnavailable",
    "UserProfile",
    "ValidationError",
    "merge_by_id",
    "merge_candidates",
    "rank_integrated",
    "rank_personalized",
    "rank_related_tags",
    "resolve_config",
    "score_tag_candidates",
    "select_by_category",
]
