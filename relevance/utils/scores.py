"""
Score helpers: age, recency, popularity, and clamping used by every stage.
"""

from datetime import datetime, timezone
from typing import Optional


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def days_since(published: Optional[datetime], now: Optional[datetime] = None) -> Optional[float]:
    """Fractional days since published; None when the date is missing."""
    if published is None:
        return None
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return (now - published).total_seconds() / 86400.0


def linear_recency(days_old: Optional[float], window_days: int) -> float:
    """
    Recency score decaying linearly from 1 to 0 across window_days.
    0 at or beyond the window, and 0 when the age is unknown.
    """
    if days_old is None or window_days <= 0:
        return 0.0
    return clamp(1.0 - max(days_old, 0.0) / window_days)


def view_like_popularity(view_count: int, like_count: int) -> float:
    """Personalized popularity: min((views + likes*2) / 100, 1)."""
    return clamp(((view_count or 0) + (like_count or 0) * 2) / 100.0)


def weighted_popularity(view_count: int, like_count: int) -> float:
    """Tag/integrated popularity: min((views*0.1 + likes*0.5) / 100, 1)."""
    return clamp(((view_count or 0) * 0.1 + (like_count or 0) * 0.5) / 100.0)
