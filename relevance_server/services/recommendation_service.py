"""
Recommendation service: async orchestration over the content, profile and tag stores.

Every store call runs in a worker thread under a per-call timeout. Read paths
degrade to (possibly empty) lists when a store fails; writes and the explicit
single-item fetch raise UpstreamUnavailable. Listing results are cached in a
ListingCache that is cleared after every write made through this service.

Exposed operations:
- recommend_personalized / recommend_collaborative / recommend_integrated / recommend_by_id
- suggest_related_tags / suggest_tags / popular_tags
- record_interaction / remove_interaction / interaction_status
- update_preferences / derive_interests / get_profile
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from relevance.errors import (
    NotFound,
    RecommendationError,
    UpstreamUnavailable,
    ValidationError,
    require_id,
    require_positive_limit,
)
from relevance.models.config import RecommendationConfig, resolve_config
from relevance.models.content import ContentItem
from relevance.models.profile import InteractionKind, Preferences, UserProfile
from relevance.models.scoring import RecommendationCandidate, ScoredItem, TagSuggestion
from relevance.models.tag import Tag
from relevance.stages.category_candidates import select_by_category
from relevance.stages.collaborative import collect_liked_ids, keep_resolved
from relevance.stages.integrated import overfetch_limit, rank_integrated
from relevance.stages.interactions import engaged_item_ids
from relevance.stages.personalized import rank_by_trust, rank_personalized
from relevance.stages.tag_candidates import matching_tags_by_item, normalize_tag_names, score_tag_candidates
from relevance.stages.tag_cooccurrence import candidate_item_ids, rank_related_tags

from .content_store import ContentQuery, ContentStore
from .interaction_recorder import InteractionRecorder, KeyedLocks
from .listing_cache import ListingCache
from .profile_store import ProfileStore
from .tag_registry import TagRegistry

logger = logging.getLogger(__name__)

DEFAULT_ADAPTER_TIMEOUT_SECONDS = 5.0


def parse_kind(kind: Union[InteractionKind, str]) -> InteractionKind:
    if isinstance(kind, InteractionKind):
        return kind
    try:
        return InteractionKind(str(kind).strip().lower())
    except ValueError:
        allowed = ", ".join(k.value for k in InteractionKind)
        raise ValidationError(f"unknown interaction kind {kind!r} (expected one of: {allowed})")


class RecommendationService:
    def __init__(
        self,
        content_store: ContentStore,
        profile_store: ProfileStore,
        tag_registry: TagRegistry,
        cache: Optional[ListingCache] = None,
        config: Optional[RecommendationConfig] = None,
        adapter_timeout: float = DEFAULT_ADAPTER_TIMEOUT_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
        locks: Optional[KeyedLocks] = None,
    ):
        self.content_store = content_store
        self.profile_store = profile_store
        self.tag_registry = tag_registry
        self.cache = cache if cache is not None else ListingCache()
        self.config = resolve_config(config)
        self.adapter_timeout = adapter_timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.recorder = InteractionRecorder(profile_store, locks)

    # ------------------------------------------------------------------
    # Adapter plumbing
    # ------------------------------------------------------------------

    async def _call(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking store call in a thread; failures become UpstreamUnavailable."""
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, *args), self.adapter_timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamUnavailable(operation, e) from e
        except RecommendationError:
            raise
        except Exception as e:
            raise UpstreamUnavailable(operation, e) from e

    async def _cached(self, key: Hashable, load: Callable[[], Awaitable[Sequence[Any]]]) -> List[Any]:
        hit = self.cache.get(key)
        if hit is not None:
            return list(hit)
        value = tuple(await load())
        return list(self.cache.put_if_absent(key, value))

    async def _query_items(self, filters: ContentQuery) -> List[ContentItem]:
        return await self._cached(
            ("content.query", filters.cache_key()),
            lambda: self._call("content.query", self.content_store.query, filters),
        )

    async def _resolve_items(self, item_ids: Sequence[str]) -> Dict[str, Optional[ContentItem]]:
        """id -> item (None when missing or the lookup failed), looked up concurrently."""
        results = await asyncio.gather(
            *(self._call("content.get_by_id", self.content_store.get_by_id, i) for i in item_ids),
            return_exceptions=True,
        )
        resolved: Dict[str, Optional[ContentItem]] = {}
        for item_id, result in zip(item_ids, results):
            if isinstance(result, BaseException):
                logger.warning("[resolve] SKIP item_id=%s: %s", item_id, result)
                resolved[item_id] = None
            else:
                resolved[item_id] = result
        return resolved

    async def _profile_or_default(self, user_id: str) -> UserProfile:
        try:
            return await self._call("profile.get", self.recorder.load, user_id)
        except UpstreamUnavailable as e:
            logger.warning("[fallback] DEFAULT_PROFILE user=%s: %s", user_id, e)
            return UserProfile.default(user_id)

    # ------------------------------------------------------------------
    # Personalized / collaborative
    # ------------------------------------------------------------------

    async def recommend_personalized(self, user_id: str, limit: int = 10) -> List[ScoredItem]:
        user_id = require_id(user_id, "user_id")
        require_positive_limit(limit)
        profile = await self._profile_or_default(user_id)
        now = self._clock()

        filters = ContentQuery(
            min_trust_score=profile.preferences.min_trust_score,
            limit=self.config.personal_candidate_limit,
        )
        try:
            candidates = await self._query_items(filters)
        except UpstreamUnavailable as e:
            logger.warning("[fallback] CANDIDATE_FETCH_FAILED user=%s: %s", user_id, e)
            candidates = []
        if candidates:
            return rank_personalized(profile, candidates, limit, self.config, now)

        logger.info("[fallback] TRUST_ORDER user=%s", user_id)
        general = ContentQuery(
            sort_by="trust_score",
            limit=limit + self.config.recent_views_excluded,
        )
        try:
            items = await self._query_items(general)
        except UpstreamUnavailable as e:
            logger.warning("[fallback] GENERAL_FETCH_FAILED user=%s: %s", user_id, e)
            return []
        return rank_by_trust(profile, items, limit, self.config, now)

    async def recommend_collaborative(self, user_id: str, limit: int = 10) -> List[ContentItem]:
        user_id = require_id(user_id, "user_id")
        require_positive_limit(limit)
        target = await self._profile_or_default(user_id)
        try:
            profiles = await self._call("profile.list", self.profile_store.list_profiles)
        except UpstreamUnavailable as e:
            logger.warning("[collab] PROFILE_SCAN_FAILED user=%s: %s", user_id, e)
            return []
        ids = collect_liked_ids(target, profiles, self.config)[:limit]
        if not ids:
            return []
        return keep_resolved(ids, await self._resolve_items(ids))

    # ------------------------------------------------------------------
    # Related content
    # ------------------------------------------------------------------

    async def related_by_category(
        self, category: str, exclude_id: Optional[str], limit: int
    ) -> List[ContentItem]:
        if not category:
            return []
        now = self._clock()

        async def load():
            items = await self._call(
                "content.query", self.content_store.query, ContentQuery(category=category)
            )
            return select_by_category(items, category, exclude_id, limit, self.config, now)

        return await self._cached(("related.category", category, exclude_id, limit), load)

    async def related_by_tags(
        self, tag_names: Sequence[str], exclude_id: Optional[str], limit: int
    ) -> List[RecommendationCandidate]:
        names = normalize_tag_names(tag_names)
        if not names:
            return []
        now = self._clock()

        async def load():
            tags = await self._call("tags.resolve", self.tag_registry.resolve, names)
            if not tags:
                return []
            links = await self._call(
                "tags.items_for_tags", self.tag_registry.items_for_tags, [t.id for t in tags]
            )
            matches = matching_tags_by_item(tags, links, exclude_id)
            if not matches:
                return []
            items = await self._call(
                "content.query", self.content_store.query, ContentQuery(ids=tuple(matches))
            )
            items_by_id = {i.id: i for i in items}
            return score_tag_candidates(names, matches, items_by_id, exclude_id, limit, self.config, now)

        return await self._cached(("related.tags", tuple(names), exclude_id, limit), load)

    async def recommend_integrated(self, item: ContentItem, limit: int = 10) -> List[RecommendationCandidate]:
        """
        Related items for `item`: category and tag retrieval run concurrently,
        merged by id, scored, and cut to `limit`. The query item is never returned.
        """
        require_positive_limit(limit)
        fetch = overfetch_limit(limit, self.config)
        by_category, by_tags = await asyncio.gather(
            self.related_by_category(item.category, item.id, fetch),
            self.related_by_tags(item.tags, item.id, fetch),
            return_exceptions=True,
        )
        if isinstance(by_category, BaseException):
            logger.warning("[integrated] CATEGORY_BRANCH_FAILED item=%s: %s", item.id, by_category)
            by_category = []
        if isinstance(by_tags, BaseException):
            logger.warning("[integrated] TAG_BRANCH_FAILED item=%s: %s", item.id, by_tags)
            by_tags = []
        ranked = rank_integrated(by_category, by_tags, item.id, limit, self.config, self._clock())
        logger.debug(
            "[integrated] item=%s category=%d tags=%d returned=%d",
            item.id, len(by_category), len(by_tags), len(ranked),
        )
        return ranked

    async def recommend_by_id(self, item_id: str, limit: int = 10) -> List[RecommendationCandidate]:
        item_id = require_id(item_id, "item_id")
        require_positive_limit(limit)
        item = await self._call("content.get_by_id", self.content_store.get_by_id, item_id)
        if item is None:
            raise NotFound("item", item_id)
        return await self.recommend_integrated(item, limit)

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    async def suggest_related_tags(self, tag_names: Sequence[str], limit: int = 5) -> List[TagSuggestion]:
        require_positive_limit(limit)
        names = normalize_tag_names(tag_names)
        if not names:
            return []

        async def load():
            registry = self.tag_registry
            tags = await self._call("tags.resolve", registry.resolve, names)
            if not tags:
                return []
            input_links = await self._call("tags.items_for_tags", registry.items_for_tags, [t.id for t in tags])
            item_ids = candidate_item_ids(tags, input_links)
            if not item_ids:
                return []
            item_links = await self._call("tags.tags_for_items", registry.tags_for_items, item_ids)
            other_ids = list(dict.fromkeys(link.tag_id for link in item_links))
            others = await self._call("tags.get_tags", registry.get_tags, other_ids)
            tags_by_id = {t.id: t for t in others}
            return rank_related_tags(tags, input_links, item_links, tags_by_id, limit, self.config)

        try:
            return await self._cached(("tags.related", tuple(names), limit), load)
        except UpstreamUnavailable as e:
            logger.warning("[tags] RELATED_FAILED tags=%s: %s", names, e)
            return []

    async def suggest_tags(self, text: str, limit: int = 10) -> List[Tag]:
        """Tags whose name contains text (case-insensitive), most used first."""
        require_positive_limit(limit)
        needle = (text or "").strip().lower()
        try:
            tags = await self._call("tags.list", self.tag_registry.list_tags)
        except UpstreamUnavailable as e:
            logger.warning("[tags] SUGGEST_FAILED text=%r: %s", text, e)
            return []
        matched = [t for t in tags if needle in t.name.lower()]
        matched.sort(key=lambda t: t.global_post_count, reverse=True)
        return matched[:limit]

    async def popular_tags(self, limit: int = 20) -> List[Tag]:
        require_positive_limit(limit)
        tags = await self._call("tags.list", self.tag_registry.list_tags)
        used = [t for t in tags if t.global_post_count > 0]
        used.sort(key=lambda t: t.global_post_count, reverse=True)
        return used[:limit]

    # ------------------------------------------------------------------
    # Profile writes
    # ------------------------------------------------------------------

    async def get_profile(self, user_id: str) -> UserProfile:
        user_id = require_id(user_id, "user_id")
        return await self._call("profile.get", self.recorder.load, user_id)

    async def record_interaction(
        self, user_id: str, item_id: str, kind: Union[InteractionKind, str]
    ) -> UserProfile:
        """Add item_id to the user's list for kind (idempotent); bumps the item counter on first add."""
        user_id = require_id(user_id, "user_id")
        item_id = require_id(item_id, "item_id")
        kind = parse_kind(kind)
        profile, changed = await self._call("profile.record", self.recorder.record, user_id, item_id, kind)
        self.cache.clear()
        if changed:
            try:
                await self._call(
                    "content.increment_counter",
                    self.content_store.increment_counter,
                    item_id,
                    kind.counter_field,
                )
            except UpstreamUnavailable as e:
                logger.warning("[interactions] COUNTER_FAILED item=%s field=%s: %s", item_id, kind.counter_field, e)
        return profile

    async def remove_interaction(
        self, user_id: str, item_id: str, kind: Union[InteractionKind, str]
    ) -> UserProfile:
        user_id = require_id(user_id, "user_id")
        item_id = require_id(item_id, "item_id")
        kind = parse_kind(kind)
        profile, _ = await self._call("profile.remove", self.recorder.remove, user_id, item_id, kind)
        self.cache.clear()
        return profile

    async def interaction_status(self, user_id: str, item_id: str) -> Dict[str, bool]:
        user_id = require_id(user_id, "user_id")
        item_id = require_id(item_id, "item_id")
        try:
            profile = await self._call("profile.get", self.recorder.load, user_id)
        except UpstreamUnavailable as e:
            logger.warning("[interactions] STATUS_FAILED user=%s: %s", user_id, e)
            return {"bookmarked": False, "liked": False}
        return {
            "bookmarked": item_id in profile.interactions.bookmarks,
            "liked": item_id in profile.interactions.likes,
        }

    async def update_preferences(self, user_id: str, updates: Dict[str, Any]) -> Preferences:
        user_id = require_id(user_id, "user_id")
        unknown = set(updates or {}) - set(Preferences.model_fields)
        if unknown:
            raise ValidationError(f"unknown preference fields: {', '.join(sorted(unknown))}")
        try:
            Preferences.model_validate(updates or {})
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e
        preferences = await self._call(
            "profile.update_preferences", self.recorder.update_preferences, user_id, dict(updates or {})
        )
        self.cache.clear()
        return preferences

    async def derive_interests(self, user_id: str) -> Preferences:
        """
        Merge the most frequent categories and tags of liked and bookmarked items
        into the user's preferences, persist, and return them.
        """
        user_id = require_id(user_id, "user_id")
        profile = await self._call("profile.get", self.recorder.load, user_id)
        ids = engaged_item_ids(profile)
        resolved = await self._resolve_items(list(dict.fromkeys(ids))) if ids else {}
        items = [resolved.get(i) for i in ids]
        preferences = await self._call(
            "profile.derive_interests", self.recorder.apply_derived, user_id, items, self.config
        )
        self.cache.clear()
        return preferences
