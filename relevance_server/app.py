"""
Content Relevance API: FastAPI app factory.

Use: uvicorn relevance_server.app:app
Or:  python -m relevance_server.server
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from relevance.errors import NotFound, UpstreamUnavailable, ValidationError

from .config import get_config
from .logging_config import configure_logging
from .routes import register_routes
from .state import get_state

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map engine errors to HTTP status codes."""

    @app.exception_handler(ValidationError)
    async def _validation(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFound)
    async def _not_found(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(UpstreamUnavailable)
    async def _unavailable(request: Request, exc: UpstreamUnavailable):
        logger.warning("[api] UPSTREAM_UNAVAILABLE %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Build FastAPI app with CORS, routes, error mapping, and startup."""
    configure_logging(get_config().log_level)
    app = FastAPI(
        title="Content Relevance API",
        description="Personalized, collaborative, and related-content recommendations",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)
    register_error_handlers(app)

    @app.on_event("startup")
    def _startup():
        config = get_config()
        ok, errors = config.validate()
        for error in errors:
            logger.warning("[startup] %s", error)
        state = get_state()
        logger.info(
            "[startup] Content Relevance API ready (data_source=%s, cache_ttl=%ss, adapter_timeout=%ss, valid=%s)",
            config.data_source or "memory", config.cache_ttl_seconds, config.adapter_timeout_seconds, ok,
        )
        logger.debug("[startup] service=%s", type(state.service).__name__)

    return app


app = create_app()
