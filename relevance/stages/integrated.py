"""
Integrated ranking: merge category and tag candidates, then blend a final score.

final = 0.30 * category_match
      + 0.40 * (relevance if tag_match else 0)
      + 0.10 * (category_match and tag_match)
      + 0.15 * popularity + 0.05 * recency        (popularity/recency as tag relevance)

The public entry points are merge_candidates and rank_integrated.
"""

import math
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.content import ContentItem
from ..models.scoring import RecommendationCandidate
from .reasons import build_reason
from .weighted_scoring import ScoringContext, integrated_scorer


def overfetch_limit(limit: int, config: RecommendationConfig = DEFAULT_CONFIG) -> int:
    """Candidates requested from each retriever for a final list of `limit`."""
    return int(math.ceil(limit * config.integrated_overfetch))


def merge_candidates(
    category_items: Sequence[ContentItem],
    tag_candidates: Sequence[RecommendationCandidate],
) -> List[RecommendationCandidate]:
    """
    Union the two candidate sets by item id without double counting.

    Category-only items get relevance 0; tag-only items keep their relevance;
    items in both get both flags, both sources, and the tag relevance.
    Order: category results first, then tag-only results.
    """
    merged: Dict[str, RecommendationCandidate] = {}
    for item in category_items:
        if item.id in merged:
            continue
        merged[item.id] = RecommendationCandidate(
            item=item,
            category_match=True,
            tag_match=False,
            relevance_score=0.0,
            recommendation_sources=["category"],
        )
    for cand in tag_candidates:
        existing = merged.get(cand.id)
        if existing is None:
            merged[cand.id] = cand.model_copy(
                update={
                    "category_match": False,
                    "tag_match": True,
                    "recommendation_sources": ["tag"],
                }
            )
            continue
        if existing.tag_match:
            continue
        merged[cand.id] = existing.model_copy(
            update={
                "tag_match": True,
                "relevance_score": cand.relevance_score,
                "matching_tags": list(cand.matching_tags),
                "matching_tag_count": cand.matching_tag_count,
                "recommendation_sources": existing.recommendation_sources + ["tag"],
            }
        )
    return list(merged.values())


def score_integrated(
    candidate: RecommendationCandidate,
    config: RecommendationConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> RecommendationCandidate:
    """Attach final_score and reason to one merged candidate."""
    ctx = ScoringContext(
        config=config,
        category_match=candidate.category_match,
        tag_match=candidate.tag_match,
        relevance_score=candidate.relevance_score,
        now=now,
    )
    final, _ = integrated_scorer(config).score(candidate.item, ctx)
    return candidate.model_copy(
        update={"final_score": final, "reason": build_reason(candidate, config, now)}
    )


def rank_integrated(
    category_items: Sequence[ContentItem],
    tag_candidates: Sequence[RecommendationCandidate],
    exclude_id: Optional[str],
    limit: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[RecommendationCandidate]:
    """Merge, score, sort by final score, and return the top `limit` (query item dropped)."""
    merged = merge_candidates(category_items, tag_candidates)
    scored = [
        score_integrated(c, config, now)
        for c in merged
        if c.id != exclude_id
    ]
    scored.sort(key=lambda c: c.final_score, reverse=True)
    return scored[:limit]
