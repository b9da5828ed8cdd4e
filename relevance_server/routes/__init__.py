"""Register all route modules on the FastAPI app."""

from fastapi import FastAPI

from .recommendations import router as recommendations_router
from .root import router as root_router
from .tags import router as tags_router
from .users import router as users_router


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the app."""
    app.include_router(root_router)
    app.include_router(recommendations_router, prefix="/api/recommendations", tags=["recommendations"])
    app.include_router(tags_router, prefix="/api/tags", tags=["tags"])
    app.include_router(users_router, prefix="/api/users", tags=["users"])
