import logging
from dataclasses import asdict
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

# ✅ Import All API Routes
from app.api.routes import admin, auth, health, offers, recruitment, services, subscriptions
from app.core.config import Settings, load_settings
from app.core.logging_config import sanitize_log_data, setup_logging
from app.core.rate_limit import RateLimiter, enforce_rate_limit
from app.db.session import build_engine, build_session_factory

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Persistence failures are a server fault, never an auth rejection."""
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": {"code": "server_error", "message": "An internal error occurred"}},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Without explicit settings they are loaded from the environment, which
    raises ConfigError (and so stops the process) when SECRET_KEY is unset.
    """
    if settings is None:
        settings = load_settings()

    setup_logging(settings.log_level, settings.log_dir)
    logger.debug(f"Settings: {sanitize_log_data(asdict(settings))}")

    # ============================================
    # ✅ FASTAPI APP INIT
    # ============================================

    app = FastAPI(title="Garoui API", version=settings.app_version)

    engine = build_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        trusted_proxies=settings.trusted_proxies,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # ============================================
    # ✅ REGISTER ALL ROUTERS
    # ============================================

    rate_limited = [Depends(enforce_rate_limit)]
    for module in (health, auth, subscriptions, offers, recruitment, services, admin):
        app.include_router(module.router, prefix=API_PREFIX, dependencies=rate_limited)

    logger.info(f"Garoui API ready (environment={settings.environment})")
    return app
