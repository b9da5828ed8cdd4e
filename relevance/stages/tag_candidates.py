"""
Tag retrieval: items sharing at least one query tag, ranked by tag relevance.

relevance = 0.4 * match_ratio + 0.3 * precision + 0.2 * popularity + 0.1 * recency
  match_ratio = matching tags / query tags
  precision   = matching tags / tags on the item
  popularity  = min((views * 0.1 + likes * 0.5) / 100, 1)
  recency     = max(0, 1 - days / 365)

Ties break on matching tag count, then views + 2 * likes.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.content import ContentItem
from ..models.scoring import RecommendationCandidate
from ..models.tag import Tag, TagLink
from .weighted_scoring import ScoringContext, tag_relevance_scorer


def normalize_tag_names(tag_names: Sequence[str]) -> List[str]:
    """Strip blanks and duplicates, keeping first-seen order."""
    out: List[str] = []
    for name in tag_names or []:
        n = str(name).strip()
        if n and n not in out:
            out.append(n)
    return out


def matching_tags_by_item(
    tags: Sequence[Tag],
    links: Sequence[TagLink],
    exclude_id: Optional[str] = None,
) -> Dict[str, List[str]]:
    """item id -> names of query tags linked to it (excluded id dropped)."""
    name_by_id = {t.id: t.name for t in tags}
    out: Dict[str, List[str]] = {}
    for link in links:
        if link.item_id == exclude_id:
            continue
        name = name_by_id.get(link.tag_id)
        if name is None:
            continue
        names = out.setdefault(link.item_id, [])
        if name not in names:
            names.append(name)
    return out


def tag_rank_key(candidate: RecommendationCandidate):
    return (
        -candidate.relevance_score,
        -candidate.matching_tag_count,
        -candidate.item.engagement,
    )


def score_tag_candidates(
    query_tags: Sequence[str],
    matches: Dict[str, List[str]],
    items_by_id: Dict[str, ContentItem],
    exclude_id: Optional[str],
    limit: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[RecommendationCandidate]:
    """Score every matched, active, non-draft item and return the top `limit`."""
    query_tags = normalize_tag_names(query_tags)
    if not query_tags or limit <= 0:
        return []
    scorer = tag_relevance_scorer(config)
    out = []
    for item_id, matched in matches.items():
        item = items_by_id.get(item_id)
        if item is None or item.id == exclude_id:
            continue
        if not item.is_active or item.is_draft:
            continue
        total_tags = len(set(item.tags) | set(matched))
        ctx = ScoringContext(
            config=config,
            query_tags=query_tags,
            matching_tag_count=len(matched),
            total_tags=total_tags,
            now=now,
        )
        relevance, _ = scorer.score(item, ctx)
        out.append(
            RecommendationCandidate(
                item=item,
                matching_tags=list(matched),
                matching_tag_count=len(matched),
                tag_match=True,
                relevance_score=relevance,
                recommendation_sources=["tag"],
            )
        )
    out.sort(key=tag_rank_key)
    return out[:limit]
