"""Application state: stores, cache, and the recommendation service built from config."""

import logging
from typing import Optional

from .config import ServerConfig, get_config
from .services import (
    ContentQuery,
    DualSourceContentStore,
    FirestoreContentStore,
    FirestoreProfileStore,
    InMemoryContentStore,
    InMemoryProfileStore,
    InMemoryTagRegistry,
    JsonContentStore,
    JsonProfileStore,
    ListingCache,
    RecommendationService,
)

logger = logging.getLogger(__name__)


class AppState:
    """Global application state."""

    def __init__(self, config: ServerConfig, service: Optional[RecommendationService] = None):
        self.config = config
        self.service = service or self._create_service(config)

    def _create_content_store(self, config: ServerConfig):
        if config.data_source == "firebase":
            store = FirestoreContentStore(
                project_id=config.firebase_project_id,
                credentials_path=config.firebase_credentials_path,
            )
        elif config.data_source == "json" and config.content_json_path:
            store = JsonContentStore(config.content_json_path)
        else:
            logger.warning("[startup] No DATA_SOURCE configured; using an empty in-memory catalog")
            return InMemoryContentStore()
        if config.legacy_content_json_path:
            logger.info("[startup] Content store: dual source (legacy=%s)", config.legacy_content_json_path)
            return DualSourceContentStore(store, JsonContentStore(config.legacy_content_json_path))
        return store

    def _create_profile_store(self, config: ServerConfig):
        if config.data_source == "firebase":
            return FirestoreProfileStore(
                project_id=config.firebase_project_id,
                credentials_path=config.firebase_credentials_path,
            )
        if config.data_source == "json" and config.profiles_json_path:
            return JsonProfileStore(config.profiles_json_path)
        return InMemoryProfileStore()

    def _create_service(self, config: ServerConfig) -> RecommendationService:
        content_store = self._create_content_store(config)
        profile_store = self._create_profile_store(config)
        everything = ContentQuery(active_only=False, exclude_drafts=False)
        tag_registry = InMemoryTagRegistry.from_source(
            lambda: content_store.query(everything),
            max_age_seconds=config.cache_ttl_seconds,
        )
        logger.info(
            "[startup] Content store: %s (%d tags), profile store: %s",
            type(content_store).__name__, len(tag_registry.list_tags()), type(profile_store).__name__,
        )
        return RecommendationService(
            content_store,
            profile_store,
            tag_registry,
            cache=ListingCache(config.cache_ttl_seconds),
            config=config.load_algorithm_config(),
            adapter_timeout=config.adapter_timeout_seconds,
        )


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState(get_config())
    return _state


def set_state(state: Optional[AppState]) -> None:
    """Replace the global state (tests inject in-memory stores)."""
    global _state
    _state = state


def get_service() -> RecommendationService:
    return get_state().service
