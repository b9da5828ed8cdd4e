"""
Related-tag suggestions from co-occurrence on shared items.

For query tags Q, the candidate item set S is every item carrying any tag in Q
(N = |S|). Each other tag T on those items gets:

  co_occurrence_count = items in S carrying T
  co_occurrence_rate  = count / N
  popularity          = min(global_post_count / 100, 1)
  specificity         = max(0, 1 - global_post_count / 50)
  association         = 0.6 * rate + 0.2 * popularity + 0.2 * specificity
"""

from typing import Dict, List, Sequence, Set

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.scoring import TagSuggestion
from ..models.tag import Tag, TagLink
from ..utils.scores import clamp


def candidate_item_ids(input_tags: Sequence[Tag], links: Sequence[TagLink]) -> List[str]:
    """Distinct items carrying any input tag, first-seen order."""
    input_ids = {t.id for t in input_tags}
    seen: Dict[str, None] = {}
    for link in links:
        if link.tag_id in input_ids:
            seen.setdefault(link.item_id, None)
    return list(seen)


def cooccurrence_counts(
    input_tags: Sequence[Tag],
    item_ids: Sequence[str],
    item_links: Sequence[TagLink],
) -> Dict[str, int]:
    """tag id -> number of candidate items it appears on (input tags excluded)."""
    input_ids = {t.id for t in input_tags}
    allowed = set(item_ids)
    items_per_tag: Dict[str, Set[str]] = {}
    for link in item_links:
        if link.tag_id in input_ids or link.item_id not in allowed:
            continue
        items_per_tag.setdefault(link.tag_id, set()).add(link.item_id)
    return {tag_id: len(items) for tag_id, items in items_per_tag.items()}


def association_score(
    rate: float,
    global_post_count: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    popularity = clamp(global_post_count / config.tag_popularity_scale)
    specificity = max(0.0, 1.0 - global_post_count / config.tag_specificity_scale)
    return clamp(
        config.cooccurrence_weight_rate * rate
        + config.cooccurrence_weight_popularity * popularity
        + config.cooccurrence_weight_specificity * specificity
    )


def rank_related_tags(
    input_tags: Sequence[Tag],
    input_links: Sequence[TagLink],
    item_links: Sequence[TagLink],
    tags_by_id: Dict[str, Tag],
    limit: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[TagSuggestion]:
    """Top `limit` co-occurring tags by association score, then count."""
    if not input_tags or limit <= 0:
        return []
    item_ids = candidate_item_ids(input_tags, input_links)
    total = len(item_ids)
    if total == 0:
        return []
    counts = cooccurrence_counts(input_tags, item_ids, item_links)
    suggestions = []
    for tag_id, count in counts.items():
        tag = tags_by_id.get(tag_id)
        if tag is None:
            continue
        rate = count / total
        suggestions.append(
            TagSuggestion(
                name=tag.name,
                co_occurrence_count=count,
                co_occurrence_rate=rate,
                global_post_count=tag.global_post_count,
                association_score=association_score(rate, tag.global_post_count, config),
            )
        )
    suggestions.sort(key=lambda s: (-s.association_score, -s.co_occurrence_count))
    return suggestions[:limit]
