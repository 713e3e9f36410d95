"""
FastAPI dependencies for authentication and role/subscription guards.

Guards resolve the caller themselves, so a route can depend on any guard
without a separate authentication step. The resolved account is memoised on
`request.state` and only looked up once per request.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.gate import Decision, authorize
from app.core.identity import AuthOutcome, verify_and_resolve
from app.core.roles import (
    Role,
    ADMIN_ONLY,
    ADMIN_OR_MODERATOR,
    ADMIN_OR_PARTNER,
    ALL_ROLES,
    role_set,
)
from app.db.models.user import User
from app.db.session import get_db

logger = logging.getLogger(__name__)

_AUTH_MESSAGES = {
    AuthOutcome.UNAUTHENTICATED: "An authentication token is required",
    AuthOutcome.EXPIRED: "Your session has expired, please log in again",
    AuthOutcome.INVALID: "Invalid authentication token",
    AuthOutcome.STALE_ACCOUNT: "Account not found or not active",
}

_DECISION_MESSAGES = {
    Decision.FORBIDDEN: "You do not have permission to access this resource",
    Decision.SUBSCRIPTION_REQUIRED: "An active subscription is required to access this resource",
}


def get_settings(request: Request) -> Settings:
    """Settings built at startup by the app factory."""
    return request.app.state.settings


def _unauthorized(outcome: AuthOutcome) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": outcome.value, "message": _AUTH_MESSAGES[outcome]},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _rejected(decision: Decision) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"code": decision.value, "message": _DECISION_MESSAGES[decision]},
    )


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """Resolve the bearer token to a live, active account or answer 401."""
    cached: Optional[User] = getattr(request.state, "account", None)
    if cached is not None:
        return cached

    result = verify_and_resolve(settings, db, request.headers.get("Authorization"))
    if not result.ok:
        logger.warning(f"Authentication rejected: outcome={result.outcome.value}, path={request.url.path}")
        raise _unauthorized(result.outcome)

    request.state.account = result.account
    return result.account


def require_roles(*roles: Role, subscription: bool = False):
    """
    Build a guard dependency.

    Args:
        roles: Allowed roles. Every role when empty.
        subscription: Also require a premium subscription for applicant roles.

    Returns:
        Dependency returning the authorized User.
    """
    allowed = role_set(*roles) if roles else ALL_ROLES

    def guard(
        request: Request,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ) -> User:
        decision = authorize(db, user, allowed, requires_active_subscription=subscription)
        if decision is not Decision.ALLOW:
            logger.warning(
                f"Authorization rejected: user_id={user.id}, role={user.role.value}, "
                f"decision={decision.value}, path={request.url.path}"
            )
            raise _rejected(decision)
        return user

    return guard


require_admin = require_roles(*ADMIN_ONLY)
require_admin_or_moderator = require_roles(*ADMIN_OR_MODERATOR)
require_admin_or_partner = require_roles(*ADMIN_OR_PARTNER)
