"""
Dual-source merge: union items from a rich store and a legacy flat store.

Union by id, prefer the richer record when both sources carry the same id,
then sort. Used by DualSourceContentStore.
"""

from typing import Callable, Dict, List, Optional, Sequence

from ..models.content import ContentItem


def richness(item: ContentItem) -> int:
    """Number of populated optional attributes; ties favour the primary source."""
    score = 0
    if item.title:
        score += 1
    if item.category:
        score += 1
    score += len(item.tags)
    if item.trust_score:
        score += 1
    if item.view_count or item.like_count or item.bookmark_count:
        score += 1
    return score


def merge_by_id(
    primary: Sequence[ContentItem],
    legacy: Sequence[ContentItem],
    sort_key: Optional[Callable[[ContentItem], object]] = None,
    descending: bool = True,
) -> List[ContentItem]:
    """
    Union two item lists by id.

    When an id appears in both, the richer record wins (primary on ties).
    The result is sorted by sort_key (default: published date), newest first.
    """
    merged: Dict[str, ContentItem] = {}
    for item in primary:
        merged.setdefault(item.id, item)
    for item in legacy:
        existing = merged.get(item.id)
        if existing is None or richness(item) > richness(existing):
            merged[item.id] = item
    key = sort_key or (lambda i: i.sort_date)
    return sorted(merged.values(), key=key, reverse=descending)
