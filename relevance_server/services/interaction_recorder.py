"""
Interaction recorder: serialized read-modify-write of user profiles.

Every profile write runs under a per-user lock so concurrent bookmark/like/view
updates for the same user never lose each other's changes. Methods are
synchronous; RecommendationService runs them in worker threads.
"""

import logging
import threading
import weakref
from typing import Any, Dict, Iterable, Optional, Tuple

from relevance.models.config import RecommendationConfig, DEFAULT_CONFIG
from relevance.models.content import ContentItem
from relevance.models.profile import InteractionKind, Preferences, UserProfile
from relevance.stages.interactions import add_interaction, derive_preferences, remove_interaction

from .profile_store import ProfileStore

logger = logging.getLogger(__name__)


class KeyedLocks:
    """One threading.Lock per key, created on first use and released once no caller holds it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()

    def get(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class InteractionRecorder:
    def __init__(self, profile_store: ProfileStore, locks: Optional[KeyedLocks] = None):
        self._store = profile_store
        self._locks = locks or KeyedLocks()

    def load(self, user_id: str) -> UserProfile:
        """Stored profile, or a fresh default profile (not persisted)."""
        return self._store.get_profile(user_id) or UserProfile.default(user_id)

    def record(self, user_id: str, item_id: str, kind: InteractionKind) -> Tuple[UserProfile, bool]:
        with self._locks.get(user_id):
            profile, changed = add_interaction(self.load(user_id), item_id, kind)
            if changed:
                self._store.save_profile(profile)
        logger.debug("[interactions] RECORD user=%s item=%s kind=%s changed=%s", user_id, item_id, kind.value, changed)
        return profile, changed

    def remove(self, user_id: str, item_id: str, kind: InteractionKind) -> Tuple[UserProfile, bool]:
        with self._locks.get(user_id):
            profile, changed = remove_interaction(self.load(user_id), item_id, kind)
            if changed:
                self._store.save_profile(profile)
        logger.debug("[interactions] REMOVE user=%s item=%s kind=%s changed=%s", user_id, item_id, kind.value, changed)
        return profile, changed

    def update_preferences(self, user_id: str, updates: Dict[str, Any]) -> Preferences:
        """Shallow-merge preference fields and persist."""
        with self._locks.get(user_id):
            profile = self.load(user_id)
            merged = {**profile.preferences.model_dump(mode="json"), **updates}
            preferences = Preferences.model_validate(merged)
            self._store.save_profile(profile.model_copy(update={"preferences": preferences}))
        return preferences

    def apply_derived(
        self,
        user_id: str,
        items: Iterable[Optional[ContentItem]],
        config: RecommendationConfig = DEFAULT_CONFIG,
    ) -> Preferences:
        """Merge interests derived from items into the current stored preferences."""
        items = list(items)
        with self._locks.get(user_id):
            profile = self.load(user_id)
            preferences = derive_preferences(profile.preferences, items, config)
            self._store.save_profile(profile.model_copy(update={"preferences": preferences}))
        logger.info(
            "[interests] DERIVED user=%s categories=%d keywords=%d",
            user_id, len(preferences.categories), len(preferences.keywords),
        )
        return preferences
