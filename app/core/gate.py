"""
Authorization decisions.

Given an account that has already been resolved, decide whether it may use
a resource. Two checks stack:

1. Static role allow-list.
2. For subscription-gated resources (job applications), applicant roles
   must hold a premium subscription at request time.

Decisions are recomputed on every call; nothing is cached and nothing is
written.
"""
import enum
import logging
from datetime import datetime
from typing import AbstractSet, Optional

from sqlalchemy.orm import Session

from app.core.roles import Role, SUBSCRIPTION_GATED_ROLES
from app.db.models.user import User
from app.services.subscription_service import has_premium_access

logger = logging.getLogger(__name__)


class Decision(str, enum.Enum):
    ALLOW = "allow"
    FORBIDDEN = "forbidden"
    SUBSCRIPTION_REQUIRED = "subscription_required"


def authorize(
    db: Session,
    account: User,
    allowed_roles: AbstractSet[Role],
    requires_active_subscription: bool = False,
    now: Optional[datetime] = None,
) -> Decision:
    role = Role(account.role)

    if role not in allowed_roles:
        return Decision.FORBIDDEN

    if requires_active_subscription and role in SUBSCRIPTION_GATED_ROLES:
        if not has_premium_access(db, account.id, now=now):
            return Decision.SUBSCRIPTION_REQUIRED

    return Decision.ALLOW


def owns_or_admin(account: User, owner_id: Optional[int]) -> bool:
    """Ownership check: admins own everything, everyone else only their own rows."""
    if Role(account.role) is Role.ADMIN:
        return True
    return owner_id is not None and owner_id == account.id


def is_staff(account: User) -> bool:
    return Role(account.role) in (Role.ADMIN, Role.MODERATOR)
