"""Pipeline stages: candidate retrieval, scoring, merging, and profile updates."""

from .category_candidates import select_by_category
from .collaborative import category_similarity, collect_liked_ids, keep_resolved
from .integrated import merge_candidates, overfetch_limit, rank_integrated
from .interactions import add_interaction, derive_preferences, remove_interaction
from .personalized import rank_by_trust, rank_personalized
from .reasons import build_reason
from .source_merge import merge_by_id
from .tag_candidates import matching_tags_by_item, normalize_tag_names, score_tag_candidates
from .tag_cooccurrence import rank_related_tags
from .weighted_scoring import ScoringContext, WeightedScorer

__all__ = [
    "ScoringContext",
    "WeightedScorer",
    "add_interaction",
    "build_reason",
    "category_similarity",
    "collect_liked_ids",
    "derive_preferences",
    "keep_resolved",
    "matching_tags_by_item",
    "merge_by_id",
    "merge_candidates",
    "normalize_tag_names",
    "overfetch_limit",
    "rank_by_trust",
    "rank_integrated",
    "rank_personalized",
    "rank_related_tags",
    "remove_interaction",
    "score_tag_candidates",
    "select_by_category",
]
