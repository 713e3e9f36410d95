"""
Identity and token verification.

Tokens are stateless HS256 JWTs carrying the account id (`sub`), email and
role. The claims are only a hint: every request re-reads the account and
uses its stored role and status, so admin changes apply on the next request
rather than when the token runs out.

Nothing here raises for a bad credential. Callers get a result and decide
how to answer; only database errors propagate.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.roles import Role, AccountStatus
from app.core.security import create_access_token, decode_access_token, verify_password
from app.db.models.user import User
from app.services.account_service import find_account_by_email, find_account_by_id
from app.util.time import as_utc, utcnow

logger = logging.getLogger(__name__)


class AuthOutcome(str, enum.Enum):
    """Outcome of verifying a bearer credential. Values double as wire error codes."""
    UNAUTHENTICATED = "unauthenticated"
    EXPIRED = "token_expired"
    INVALID = "token_invalid"
    STALE_ACCOUNT = "account_unavailable"
    RESOLVED = "resolved"


class CredentialCheck(str, enum.Enum):
    """Outcome of an email/password login attempt."""
    OK = "ok"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_DISABLED = "account_disabled"


@dataclass(frozen=True)
class TokenClaims:
    account_id: int
    email: str
    role: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenCheck:
    outcome: AuthOutcome
    claims: Optional[TokenClaims] = None


@dataclass(frozen=True)
class AuthResult:
    outcome: AuthOutcome
    account: Optional[User] = None
    claims: Optional[TokenClaims] = None

    @property
    def ok(self) -> bool:
        return self.outcome is AuthOutcome.RESOLVED


@dataclass(frozen=True)
class LoginResult:
    outcome: CredentialCheck
    account: Optional[User] = None


def extract_bearer(raw_header: Optional[str]) -> Optional[str]:
    """Return the token from an `Authorization: Bearer <token>` value, or None."""
    if not raw_header:
        return None
    parts = raw_header.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def issue_token(
    settings: Settings,
    account_id: int,
    email: str,
    role: Role,
    now: Optional[datetime] = None,
) -> str:
    claims = {
        "sub": str(account_id),
        "email": email,
        "role": Role(role).value,
    }
    return create_access_token(settings, claims, now=now)


def verify_token(settings: Settings, raw_header: Optional[str], now: Optional[datetime] = None) -> TokenCheck:
    """
    Check signature, structure and expiry of a bearer credential.

    A token checked at exactly its `exp` second counts as expired.
    """
    token = extract_bearer(raw_header)
    if token is None:
        return TokenCheck(AuthOutcome.UNAUTHENTICATED)

    try:
        payload = decode_access_token(settings, token)
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        return TokenCheck(AuthOutcome.INVALID)

    try:
        account_id = int(payload["sub"])
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
    except (KeyError, TypeError, ValueError):
        return TokenCheck(AuthOutcome.INVALID)

    claims = TokenClaims(
        account_id=account_id,
        email=str(payload.get("email") or ""),
        role=str(payload.get("role") or ""),
        expires_at=expires_at,
    )

    if expires_at <= as_utc(now or utcnow()):
        return TokenCheck(AuthOutcome.EXPIRED, claims)

    return TokenCheck(AuthOutcome.RESOLVED, claims)


def verify_and_resolve(
    settings: Settings,
    db: Session,
    raw_header: Optional[str],
    now: Optional[datetime] = None,
) -> AuthResult:
    """Verify the credential, then load the live account it points to."""
    check = verify_token(settings, raw_header, now)
    if check.outcome is not AuthOutcome.RESOLVED:
        return AuthResult(check.outcome, claims=check.claims)

    account = find_account_by_id(db, check.claims.account_id)
    if account is None or not account.is_active:
        logger.info(
            f"Stale token: user_id={check.claims.account_id}, "
            f"status={account.status.value if account is not None else 'missing'}"
        )
        return AuthResult(AuthOutcome.STALE_ACCOUNT, claims=check.claims)

    return AuthResult(AuthOutcome.RESOLVED, account=account, claims=check.claims)


def authenticate(db: Session, email: str, password: str) -> LoginResult:
    """
    Check login credentials.

    Pending accounts may log in (they are waiting for activation); inactive
    ones are refused.
    """
    account = find_account_by_email(db, email)
    if account is None:
        return LoginResult(CredentialCheck.INVALID_CREDENTIALS)

    if account.status not in (AccountStatus.ACTIVE, AccountStatus.PENDING):
        return LoginResult(CredentialCheck.ACCOUNT_DISABLED, account)

    if not verify_password(password, account.password_hash):
        return LoginResult(CredentialCheck.INVALID_CREDENTIALS)

    return LoginResult(CredentialCheck.OK, account)
