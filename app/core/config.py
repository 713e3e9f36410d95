"""
Application settings.

Settings are read from the environment once, at startup, and handed to the
app factory. Request handling code gets them through the `get_settings`
dependency and never looks at os.environ itself.
"""
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple


DEFAULT_DATABASE_URL = "sqlite:///./garoui.db"

DEFAULT_ALLOWED_ORIGINS = (
    "https://garoui-electricite.com",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://localhost:3001",
)


class ConfigError(RuntimeError):
    """Raised when the process cannot start with the given environment."""


@dataclass(frozen=True)
class Settings:
    # ✅ Security
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 24 * 60
    bcrypt_rounds: int = 12

    # ✅ Database
    database_url: str = DEFAULT_DATABASE_URL

    # ✅ HTTP
    allowed_origins: Tuple[str, ...] = field(default=DEFAULT_ALLOWED_ORIGINS)
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_requests: int = 100
    # Peers whose X-Forwarded-For header is believed
    trusted_proxies: Tuple[str, ...] = ()

    # ✅ Runtime
    environment: str = "development"
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    app_version: str = "1.0.0"


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_list(environ: Mapping[str, str], name: str, default: Tuple[str, ...] = ()) -> Tuple[str, ...]:
    """Comma separated variable, blanks dropped."""
    parsed = tuple(
        item.strip()
        for item in (environ.get(name) or "").split(",")
        if item.strip()
    )
    return parsed or default


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        ConfigError: SECRET_KEY is missing or a numeric variable is malformed.
    """
    if environ is None:
        environ = os.environ

    secret_key = (environ.get("SECRET_KEY") or "").strip()
    if not secret_key:
        raise ConfigError("SECRET_KEY is not set; refusing to start without a token signing secret")

    return Settings(
        secret_key=secret_key,
        algorithm=environ.get("ALGORITHM", "HS256"),
        access_token_expire_minutes=_env_int(environ, "ACCESS_TOKEN_EXPIRE_MINUTES", 24 * 60),
        bcrypt_rounds=_env_int(environ, "BCRYPT_ROUNDS", 12),
        database_url=environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
        allowed_origins=_env_list(environ, "ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS),
        rate_limit_window_seconds=_env_int(environ, "RATE_LIMIT_WINDOW_SECONDS", 15 * 60),
        rate_limit_max_requests=_env_int(environ, "RATE_LIMIT_MAX_REQUESTS", 100),
        trusted_proxies=_env_list(environ, "TRUSTED_PROXIES"),
        environment=environ.get("ENVIRONMENT", "development"),
        log_level=environ.get("LOG_LEVEL", "INFO"),
        log_dir=environ.get("LOG_DIR") or None,
    )
