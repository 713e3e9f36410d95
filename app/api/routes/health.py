"""
Health check endpoints for deployment monitoring.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text

from app.core.auth_dependency import get_settings
from app.core.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request, settings: Settings = Depends(get_settings)):
    """
    Health check endpoint for deployment monitoring.

    Returns 200 with status "degraded" when the database cannot be reached.
    """
    status = "healthy"

    # Check database connectivity
    try:
        db = request.app.state.session_factory()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        db_status = "connected"
    except Exception as e:
        logger.error(f"Health check database query failed: {e}")
        db_status = "error"
        status = "degraded"

    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "Garoui API",
        "database": db_status,
        "environment": settings.environment,
        "version": settings.app_version,
    }


@router.get("/ping")
def ping():
    return {"message": "pong", "timestamp": datetime.now(timezone.utc).isoformat()}
