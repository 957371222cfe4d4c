"""
FastAPI Application Entry Point.

This is the main entry point for the BFF backend application.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worship_bff.api import router as api_router
from worship_bff.core.config import get_app_config, get_cors_origins, get_environment
from worship_bff.core.database import get_document_store
from worship_bff.core.exception_handlers import register_exception_handlers
from worship_bff.core.logging import get_logger, setup_logging
from worship_bff.core.middleware import OriginGuardMiddleware, RequestContextMiddleware
from worship_bff.integrations.http import close_http_client
from worship_bff.integrations.image_pool import close_image_pool

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    The server starts accepting connections only after the document store
    has answered its first ping.
    """
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    if app_config.features.security_startup_checks_enabled:
        from worship_bff.core.startup_checks import run_startup_checks
        run_startup_checks()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": get_environment(),
        },
    )

    store = get_document_store()
    await store.connect()
    store.start_monitor()

    yield

    logger.info("Application shutting down")
    await store.close()
    await close_image_pool()
    await close_http_client()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application
    cors_settings = app_settings.cors
    cors_origins = get_cors_origins()

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    # Last added runs first: RequestContext, OriginGuard, CORS, routes.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=cors_settings.allow_methods,
        allow_headers=cors_settings.allow_headers,
        max_age=cors_settings.max_age,
    )
    app.add_middleware(OriginGuardMiddleware, allowed_origins=cors_origins)
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=app_config.features.api_request_logging,
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix=app_settings.api_prefix)

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn worship_bff.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
