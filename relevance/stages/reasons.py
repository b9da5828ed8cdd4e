"""
Human-readable justification for an integrated recommendation.

Used by the integrated response to explain which signals fired.
"""

from datetime import datetime
from typing import List, Optional

from ..models.config import RecommendationConfig, DEFAULT_CONFIG
from ..models.scoring import RecommendationCandidate
from ..utils.scores import days_since

DEFAULT_REASON = "related content"


def build_reason(
    candidate: RecommendationCandidate,
    config: RecommendationConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> str:
    """
    Comma-joined reason phrases for a candidate.

    Match phrase (both / category only / shared tags), then "popular" when
    likes or views pass their thresholds, then "recently published" for items
    at most recent_reason_days old.
    """
    reasons: List[str] = []
    if candidate.category_match and candidate.tag_match:
        reasons.append("same category and shares related tags")
    elif candidate.category_match:
        reasons.append("same category")
    elif candidate.tag_match:
        count = candidate.matching_tag_count
        if count > 1:
            reasons.append(f"shares {count} tags")
        else:
            reasons.append("shares a related tag")

    item = candidate.item
    if (
        item.like_count > config.popular_like_threshold
        or item.view_count > config.popular_view_threshold
    ):
        reasons.append("popular")

    age = days_since(item.published_date, now)
    if age is not None and age <= config.recent_reason_days:
        reasons.append("recently published")

    return ", ".join(reasons) if reasons else DEFAULT_REASON
