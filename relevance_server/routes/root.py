"""Root and health endpoints."""

from fastapi import APIRouter

from ..state import get_state

router = APIRouter()


@router.get("/")
def root():
    state = get_state()
    service = state.service
    return {
        "name": "Content Relevance API",
        "version": "1.0.0",
        "status": "ok",
        "data_source": state.config.data_source or "memory",
        "stores": {
            "content": type(service.content_store).__name__,
            "profiles": type(service.profile_store).__name__,
            "tags": type(service.tag_registry).__name__,
        },
        "cache_entries": len(service.cache),
        "endpoints": {
            "recommendations": [
                "/api/recommendations/personalized/{user_id}",
                "/api/recommendations/collaborative/{user_id}",
                "/api/recommendations/related/{item_id}",
            ],
            "tags": ["/api/tags/related", "/api/tags/suggestions", "/api/tags/popular"],
            "users": [
                "/api/users/{user_id}",
                "/api/users/{user_id}/interactions",
                "/api/users/{user_id}/preferences",
                "/api/users/{user_id}/derive-interests",
                "/api/users/{user_id}/status/{item_id}",
            ],
        },
    }


@router.get("/health")
def health():
    return {"status": "ok"}
