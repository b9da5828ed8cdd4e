"""Backing logic: stores, cache, interaction recorder, recommendation service."""

from .content_store import (
    ContentQuery,
    ContentStore,
    DualSourceContentStore,
    FirestoreContentStore,
    InMemoryContentStore,
    JsonContentStore,
)
from .interaction_recorder import InteractionRecorder, KeyedLocks
from .listing_cache import ListingCache
from .profile_store import FirestoreProfileStore, InMemoryProfileStore, JsonProfileStore, ProfileStore
from .recommendation_service import RecommendationService, parse_kind
from .tag_registry import InMemoryTagRegistry, TagRegistry

__all__ = [
    "ContentQuery",
    "ContentStore",
    "DualSourceContentStore",
    "FirestoreContentStore",
    "FirestoreProfileStore",
    "InMemoryContentStore",
    "InMemoryProfileStore",
    "InMemoryTagRegistry",
    "InteractionRecorder",
    "JsonContentStore",
    "JsonProfileStore",
    "KeyedLocks",
    "ListingCache",
    "ProfileStore",
    "RecommendationService",
    "TagRegistry",
    "parse_kind",
]
