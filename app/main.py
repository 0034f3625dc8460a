"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers, static avatars.
No business logic here (SRP). See app.core.lifespan and app.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.v1 import api_router
from app.core.config import get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.core.limiter import limiter
from app.middleware import (
    RequestIDMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter

    register_exception_handlers(app)

    # Middleware: last added = outermost. Order: size limit → request ID → security → CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_bytes)

    app.include_router(api_router, prefix="/api/v1")

    storage_root = Path(settings.storage_root)
    storage_root.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.storage_base_url,
        StaticFiles(directory=storage_root),
        name="storage",
    )

    return app


app = create_app()
