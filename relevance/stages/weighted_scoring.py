"""
Weighted-factor scoring shared by the personalized, tag, and integrated rankings.

A WeightedScorer pairs a weight set from RecommendationConfig.weight_sets() with
a table of factor functions. Each factor returns a value in [0, 1] and falls back
to 0 when its data is missing; the total is clamped to [0, 1].
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.content import ContentItem
from ..models.profile import Preferences
from ..utils.scores import (
    clamp,
    days_since,
    linear_recency,
    view_like_popularity,
    weighted_popularity,
)


@dataclass(frozen=True)
class ScoringContext:
    """Everything a factor may look at besides the item itself."""

    config: RecommendationConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    preferences: Optional[Preferences] = None
    query_tags: Sequence[str] = ()
    matching_tag_count: int = 0
    total_tags: int = 0
    category_match: bool = False
    tag_match: bool = False
    relevance_score: float = 0.0
    now: Optional[datetime] = None


Factor = Callable[[ContentItem, ScoringContext], float]


def keyword_matches(tag: str, keywords: Sequence[str]) -> bool:
    """True if tag equals, contains, or is contained in any keyword (case-insensitive)."""
    t = tag.lower()
    for keyword in keywords:
        k = keyword.lower()
        if k and (k in t or t in k):
            return True
    return False


# ---------------------------------------------------------------------------
# Personalized factors
# ---------------------------------------------------------------------------


def _pref_category(item: ContentItem, ctx: ScoringContext) -> float:
    prefs = ctx.preferences
    if prefs is None or not item.category:
        return 0.0
    return 1.0 if item.category in prefs.categories else 0.0


def _pref_tags(item: ContentItem, ctx: ScoringContext) -> float:
    prefs = ctx.preferences
    if prefs is None or not item.tags or not prefs.keywords:
        return 0.0
    matched = [t for t in item.tags if keyword_matches(t, prefs.keywords)]
    return len(matched) / len(item.tags)


def _pref_source_type(item: ContentItem, ctx: ScoringContext) -> float:
    prefs = ctx.preferences
    if prefs is None:
        return 0.0
    return 1.0 if item.source_type.value in prefs.source_types else 0.0


def _trust(item: ContentItem, ctx: ScoringContext) -> float:
    return clamp((item.trust_score or 0) / 100.0)


def _recency_month(item: ContentItem, ctx: ScoringContext) -> float:
    age = days_since(item.published_date, ctx.now)
    return linear_recency(age, ctx.config.personal_recency_window_days)


def _view_like_popularity(item: ContentItem, ctx: ScoringContext) -> float:
    return view_like_popularity(item.view_count, item.like_count)


PERSONALIZED_FACTORS: Dict[str, Factor] = {
    "category_match": _pref_category,
    "tag_match": _pref_tags,
    "source_type_match": _pref_source_type,
    "trust": _trust,
    "recency": _recency_month,
    "popularity": _view_like_popularity,
}


# ---------------------------------------------------------------------------
# Tag relevance factors
# ---------------------------------------------------------------------------


def _match_ratio(item: ContentItem, ctx: ScoringContext) -> float:
    if not ctx.query_tags:
        return 0.0
    return clamp(ctx.matching_tag_count / len(ctx.query_tags))


def _precision(item: ContentItem, ctx: ScoringContext) -> float:
    total = ctx.total_tags or len(item.tags)
    if not total:
        return 0.0
    return clamp(ctx.matching_tag_count / total)


def _recency_year(item: ContentItem, ctx: ScoringContext) -> float:
    age = days_since(item.published_date, ctx.now)
    return linear_recency(age, ctx.config.tag_recency_window_days)


def _weighted_popularity(item: ContentItem, ctx: ScoringContext) -> float:
    return weighted_popularity(item.view_count, item.like_count)


TAG_RELEVANCE_FACTORS: Dict[str, Factor] = {
    "match_ratio": _match_ratio,
    "precision": _precision,
    "popularity": _weighted_popularity,
    "recency": _recency_year,
}


# ---------------------------------------------------------------------------
# Integrated factors
# ---------------------------------------------------------------------------


def _category_flag(item: ContentItem, ctx: ScoringContext) -> float:
    return 1.0 if ctx.category_match else 0.0


def _tag_relevance(item: ContentItem, ctx: ScoringContext) -> float:
    return clamp(ctx.relevance_score) if ctx.tag_match else 0.0


def _both_match(item: ContentItem, ctx: ScoringContext) -> float:
    return 1.0 if ctx.category_match and ctx.tag_match else 0.0


INTEGRATED_FACTORS: Dict[str, Factor] = {
    "category_match": _category_flag,
    "tag_relevance": _tag_relevance,
    "both_match": _both_match,
    "popularity": _weighted_popularity,
    "recency": _recency_year,
}


@dataclass
class WeightedScorer:
    """Weighted sum over the active factors; factors without a weight are skipped."""

    weights: Mapping[str, float]
    factors: Mapping[str, Factor] = field(default_factory=dict)

    def __post_init__(self):
        missing = [name for name in self.weights if name not in self.factors]
        if missing:
            raise ValueError(f"No factor function for: {', '.join(missing)}")

    def breakdown(self, item: ContentItem, ctx: ScoringContext) -> Dict[str, float]:
        """Weighted contribution of each active factor."""
        return {
            name: weight * self.factors[name](item, ctx)
            for name, weight in self.weights.items()
            if weight
        }

    def score(self, item: ContentItem, ctx: ScoringContext) -> Tuple[float, Dict[str, float]]:
        parts = self.breakdown(item, ctx)
        return clamp(sum(parts.values())), parts


def personalized_scorer(config: RecommendationConfig = DEFAULT_CONFIG) -> WeightedScorer:
    return WeightedScorer(config.weight_sets()["personalized"], PERSONALIZED_FACTORS)


def tag_relevance_scorer(config: RecommendationConfig = DEFAULT_CONFIG) -> WeightedScorer:
    return WeightedScorer(config.weight_sets()["tag_relevance"], TAG_RELEVANCE_FACTORS)


def integrated_scorer(config: RecommendationConfig = DEFAULT_CONFIG) -> WeightedScorer:
    return WeightedScorer(config.weight_sets()["integrated"], INTEGRATED_FACTORS)
