"""
Interaction list updates and interest derivation over a UserProfile.

All functions are pure: they return a new profile (or preferences) and a flag
saying whether anything changed, leaving persistence to the caller.
"""

from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.content import ContentItem
from ..models.profile import MAX_VIEWS, InteractionKind, Preferences, UserProfile


def add_interaction(
    profile: UserProfile,
    item_id: str,
    kind: InteractionKind,
) -> Tuple[UserProfile, bool]:
    """Append item_id to the kind's list if absent; views keep only the newest MAX_VIEWS."""
    ids = profile.interactions.ids(kind)
    if item_id in ids:
        return profile, False
    ids.append(item_id)
    if kind is InteractionKind.VIEW and len(ids) > MAX_VIEWS:
        ids = ids[-MAX_VIEWS:]
    interactions = profile.interactions.model_copy(update={kind.field_name: ids})
    return profile.model_copy(update={"interactions": interactions}), True


def remove_interaction(
    profile: UserProfile,
    item_id: str,
    kind: InteractionKind,
) -> Tuple[UserProfile, bool]:
    """Drop item_id from the kind's list if present."""
    ids = profile.interactions.ids(kind)
    if item_id not in ids:
        return profile, False
    ids = [i for i in ids if i != item_id]
    interactions = profile.interactions.model_copy(update={kind.field_name: ids})
    return profile.model_copy(update={"interactions": interactions}), True


def engaged_item_ids(profile: UserProfile) -> List[str]:
    """Liked then bookmarked ids. An item both liked and bookmarked appears twice and counts twice."""
    return list(profile.interactions.likes) + list(profile.interactions.bookmarks)


def _top(counter: Counter, n: int) -> List[str]:
    # Counter.most_common keeps first-seen order among equal counts.
    return [key for key, _ in counter.most_common(n)]


def derive_preferences(
    preferences: Preferences,
    items: Iterable[Optional[ContentItem]],
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> Preferences:
    """
    Merge the most frequent categories and tags of engaged items into preferences.

    Top config.derived_top_categories categories and config.derived_top_tags tags
    are unioned with the existing sets (never replacing them). Missing items are ignored.
    """
    categories: Counter = Counter()
    tags: Counter = Counter()
    for item in items:
        if item is None:
            continue
        if item.category:
            categories[item.category] += 1
        for tag in item.tags:
            tags[tag] += 1
    top_categories = _top(categories, config.derived_top_categories)
    top_tags = _top(tags, config.derived_top_tags)
    return preferences.model_copy(
        update={
            "categories": _union(top_categories, preferences.categories),
            "keywords": _union(preferences.keywords, top_tags),
        }
    )


def _union(first: Sequence[str], second: Sequence[str]) -> List[str]:
    out = list(first)
    for value in second:
        if value not in out:
            out.append(value)
    return out
