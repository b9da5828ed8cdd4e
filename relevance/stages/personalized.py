"""
Personalized ranking: score candidates against a user's preferences.

Filters: active, non-draft, trust >= profile min_trust_score, not among the most
recent views. Scores each remaining item with the personalized weight set and
returns the top `limit` by score.

The public entry points are rank_personalized and rank_by_trust (fallback).
"""

from datetime import datetime
from typing import List, Optional, Sequence, Set

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.content import ContentItem
from ..models.profile import UserProfile
from ..models.scoring import ScoredItem
from .weighted_scoring import ScoringContext, personalized_scorer


def recently_viewed(profile: UserProfile, config: RecommendationConfig = DEFAULT_CONFIG) -> Set[str]:
    """Ids of the most recent views, excluded from personalized results."""
    window = config.recent_views_excluded
    views = profile.interactions.views
    return set(views[-window:]) if window > 0 else set()


def _eligible(
    items: Sequence[ContentItem],
    profile: UserProfile,
    excluded: Set[str],
) -> List[ContentItem]:
    floor = profile.preferences.min_trust_score
    return [
        item for item in items
        if item.is_active
        and not item.is_draft
        and item.trust_score >= floor
        and item.id not in excluded
    ]


def score_items(
    items: Sequence[ContentItem],
    profile: UserProfile,
    config: RecommendationConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[ScoredItem]:
    """Personalized score for each item, in input order."""
    scorer = personalized_scorer(config)
    ctx = ScoringContext(config=config, preferences=profile.preferences, now=now)
    out = []
    for item in items:
        total, parts = scorer.score(item, ctx)
        out.append(ScoredItem(item=item, score=total, breakdown=parts))
    return out


def rank_personalized(
    profile: UserProfile,
    candidates: Sequence[ContentItem],
    limit: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[ScoredItem]:
    """Score eligible candidates and return the top `limit` by descending score."""
    eligible = _eligible(candidates, profile, recently_viewed(profile, config))
    scored = score_items(eligible, profile, config, now)
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:limit]


def rank_by_trust(
    profile: UserProfile,
    items: Sequence[ContentItem],
    limit: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[ScoredItem]:
    """
    General fallback list: active items by descending trust score.

    Used when the filtered candidate fetch fails or comes back empty, so the
    trust floor is not applied; recent views are still excluded.
    """
    excluded = recently_viewed(profile, config)
    pool = [
        item for item in items
        if item.is_active and not item.is_draft and item.id not in excluded
    ]
    pool.sort(key=lambda i: i.trust_score, reverse=True)
    return score_items(pool[:limit], profile, config, now)
