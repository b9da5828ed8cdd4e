"""
Category retrieval: same-category items, recent first, backfilled from older ones.

Filters: active, non-draft, same category, not the excluded id.
Items published within config.category_window_days are ranked by
(views desc, likes desc, published desc); if they do not fill `limit`, older
items with the same ordering fill the remainder. Undated items count as older.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.content import ContentItem


def popularity_order_key(item: ContentItem):
    """Sort key for views desc, likes desc, published desc."""
    return (-item.view_count, -item.like_count, -item.sort_date.timestamp())


def _same_category(
    items: Sequence[ContentItem],
    category: str,
    exclude_id: Optional[str],
) -> List[ContentItem]:
    return [
        item for item in items
        if item.category == category
        and item.is_active
        and not item.is_draft
        and item.id != exclude_id
    ]


def select_by_category(
    items: Sequence[ContentItem],
    category: str,
    exclude_id: Optional[str],
    limit: int,
    config: RecommendationConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[ContentItem]:
    """Up to `limit` same-category items: in-window first, then older backfill."""
    if not category or limit <= 0:
        return []
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=config.category_window_days)
    pool = _same_category(items, category, exclude_id)

    recent = sorted(
        (i for i in pool if i.sort_date >= cutoff), key=popularity_order_key
    )
    selected = recent[:limit]
    if len(selected) >= limit:
        return selected

    chosen = {i.id for i in selected}
    older = sorted(
        (i for i in pool if i.sort_date < cutoff and i.id not in chosen),
        key=popularity_order_key,
    )
    return selected + older[: limit - len(selected)]
