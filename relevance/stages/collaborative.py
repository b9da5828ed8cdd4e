"""
Collaborative filtering over profile category overlap.

similarity(A, B) = |categories A ∩ B| / max(|A|, |B|). Profiles above
config.similarity_threshold are ranked by similarity; the top
config.max_similar_users contribute their likes (minus the target's own likes),
in encounter order.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.content import ContentItem
from ..models.profile import UserProfile

logger = logging.getLogger(__name__)


def category_similarity(a: Sequence[str], b: Sequence[str]) -> float:
    """Shared-category fraction relative to the larger category set."""
    set_a, set_b = set(a), set(b)
    denom = max(len(set_a), len(set_b))
    if denom == 0:
        return 0.0
    return len(set_a & set_b) / denom


def similar_profiles(
    target: UserProfile,
    profiles: Sequence[UserProfile],
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[Tuple[UserProfile, float]]:
    """Other profiles above the similarity threshold, most similar first, capped."""
    scored = []
    for other in profiles:
        if other.user_id == target.user_id:
            continue
        sim = category_similarity(
            target.preferences.categories, other.preferences.categories
        )
        if sim > config.similarity_threshold:
            scored.append((other, sim))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[: config.max_similar_users]


def collect_liked_ids(
    target: UserProfile,
    profiles: Sequence[UserProfile],
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[str]:
    """Union of similar users' likes not already liked by target, in encounter order."""
    already = set(target.interactions.likes)
    ordered: Dict[str, None] = {}
    neighbours = similar_profiles(target, profiles, config)
    logger.debug(
        "[collab] user=%s similar_users=%d", target.user_id, len(neighbours)
    )
    for other, _ in neighbours:
        for item_id in other.interactions.likes:
            if item_id not in already:
                ordered.setdefault(item_id, None)
    return list(ordered)


def keep_resolved(
    ids: Sequence[str],
    resolved: Dict[str, Optional[ContentItem]],
) -> List[ContentItem]:
    """Items for ids that resolved to an active item, in the order of ids."""
    out = []
    for item_id in ids:
        item = resolved.get(item_id)
        if item is None:
            logger.info("[collab] SKIP_UNRESOLVED item_id=%s", item_id)
            continue
        if not item.is_active:
            continue
        out.append(item)
    return out
