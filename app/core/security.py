import logging
import bcrypt
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import jwt

from app.core.config import Settings

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72

# Use passlib context for backward compatibility with existing hashes
# But we'll use bcrypt directly for new hashes to avoid passlib issues
try:
    pwd_context = CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
    )
    logger.debug("Password context initialized")
except Exception as e:
    logger.warning(f"Failed to initialize passlib context: {e}, using bcrypt directly")
    pwd_context = None


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt directly (more reliable than passlib).

    Length is validated by the request schemas; anything over the bcrypt
    limit reaching this point is a programming error.

    Args:
        password: Plain text password (max 72 bytes in UTF-8)
        rounds: bcrypt cost factor

    Returns:
        Hashed password string (bcrypt format compatible with passlib)

    Raises:
        ValueError: If password is empty or longer than 72 bytes
    """
    if not password:
        raise ValueError("Password must not be empty")

    password_bytes = password.encode('utf-8')
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")

    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a password against its hash.

    Supports both bcrypt-native hashes and passlib-wrapped hashes for backward compatibility.

    Returns:
        True if password matches hash, False otherwise
    """
    if not password or not hashed:
        return False
    try:
        password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
        hashed_bytes = hashed.encode('utf-8')
        try:
            return bcrypt.checkpw(password_bytes, hashed_bytes)
        except (ValueError, TypeError):
            # Not a bcrypt-native hash, let passlib try its schemes
            if pwd_context:
                return pwd_context.verify(password, hashed)
            return False
    except Exception as e:
        logger.error(f"Password verification failed: {e}", exc_info=True)
        return False


def create_access_token(
    settings: Settings,
    claims: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """Sign `claims` with iat/exp added. Expiry defaults to the configured lifetime."""
    issued_at = now or datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode = claims.copy()
    to_encode.update({
        "iat": int(issued_at.timestamp()),
        "exp": int(expire.timestamp()),
    })
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    """
    Check the signature and return the claims.

    Expiry is not checked here; the caller compares `exp` against its own
    clock so the boundary is explicit.

    Raises:
        jose.JWTError: bad signature, wrong algorithm or malformed token
    """
    return jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.algorithm],
        options={"verify_exp": False},
    )
