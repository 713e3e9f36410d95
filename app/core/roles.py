"""
Closed enumerations for account roles and statuses, plus the role sets
routes guard on.
"""
import enum
from typing import FrozenSet


class Role(str, enum.Enum):
    """Account roles."""
    CLIENT = "client"
    PARTNER = "partner"
    CANDIDATE = "candidate"
    ELECTRICIAN = "electrician"
    MODERATOR = "moderator"
    ADMIN = "admin"


class AccountStatus(str, enum.Enum):
    """Account lifecycle status."""
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


def role_set(*roles) -> FrozenSet[Role]:
    """
    Build an allow-list from Role members or their string values.

    Unknown values raise ValueError here, when the guard is declared,
    instead of silently never matching at request time.
    """
    return frozenset(Role(r) for r in roles)


ALL_ROLES: FrozenSet[Role] = frozenset(Role)
ADMIN_ONLY = role_set(Role.ADMIN)
ADMIN_OR_MODERATOR = role_set(Role.ADMIN, Role.MODERATOR)
ADMIN_OR_PARTNER = role_set(Role.ADMIN, Role.PARTNER)

# Roles that can pick a role at registration
SELF_SERVICE_ROLES = role_set(Role.CLIENT, Role.PARTNER, Role.CANDIDATE)

# Applicant roles that must hold a premium subscription on gated resources
SUBSCRIPTION_GATED_ROLES = role_set(Role.CANDIDATE, Role.ELECTRICIAN)
