"""Shared utilities for scoring."""

from .scores import (
    clamp,
    days_since,
    linear_recency,
    view_like_popularity,
    weighted_popularity,
)

__all__ = [
    "clamp",
    "days_since",
    "linear_recency",
    "view_like_popularity",
    "weighted_popularity",
]
