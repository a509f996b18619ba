"""Application settings with environment-based simple classes."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from dotenv import load_dotenv

from authkit.core.durations import parse_duration

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Secrets shorter than this are accepted outside production with a warning.
MIN_SECRET_LENGTH: Final[int] = 32
DEFAULT_SECRET: Final[str] = "CHANGE_ME_JWT"
_WEAK_SECRETS: Final[frozenset[str]] = frozenset(
    {"", "change_me", "change_me_jwt", "secret", "password", "admin"}
)

log = logging.getLogger(__name__)

# Load .env in development (no-op when the file does not exist)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_list(name: str, default: str) -> tuple[str, ...]:
    """Split a comma-separated environment variable into a tuple of tokens."""
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Symmetric key used to sign access tokens (HS256 by default).
    JWT_ACCESS_EXPIRES_IN: str
        Access-token lifetime as a duration string (``"3600s"``, ``"15m"``...).
    JWT_REFRESH_EXPIRES_IN: str
        Refresh-token lifetime as a duration string (``"7d"`` by default).
    REDIS_URL: str
        Connection URL of the key-value store holding refresh tokens and the
        access-token blacklist.
    REDIS_MAX_RETRIES: int
        Retries per command on connection/timeout errors before giving up.
    REDIS_BACKOFF_BASE / REDIS_BACKOFF_CAP: float
        Exponential backoff parameters (seconds) between retries.
    BLACKLIST_FAIL_OPEN: bool
        When ``True`` a store outage treats tokens as not blacklisted.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    DEFAULT_LOCALE / SUPPORTED_LOCALES:
        Locale negotiation for translated error messages.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", DEFAULT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRES_IN = os.getenv("JWT_ACCESS_EXPIRES_IN", "3600s")
    JWT_REFRESH_EXPIRES_IN = os.getenv("JWT_REFRESH_EXPIRES_IN", "7d")

    # Key-value store
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_MAX_RETRIES = int(os.getenv("REDIS_MAX_RETRIES", "3"))
    REDIS_BACKOFF_BASE = float(os.getenv("REDIS_BACKOFF_BASE", "0.05"))
    REDIS_BACKOFF_CAP = float(os.getenv("REDIS_BACKOFF_CAP", "2.0"))
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))
    BLACKLIST_FAIL_OPEN = env_bool("BLACKLIST_FAIL_OPEN", True)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS & i18n
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "en")
    SUPPORTED_LOCALES = env_list("SUPPORTED_LOCALES", "en,es")

    # Flask built-ins
    DEBUG = False
    TESTING = False
    PRODUCTION = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = True
    JWT_SECRET_KEY = "test-secret-key-with-at-least-32-characters"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled; :class:`AuthSettings` refuses a
    default or short signing secret in this mode.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    PRODUCTION = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Validated token-lifecycle settings, built once at startup.

    :ivar access_secret: HMAC secret for access tokens.
    :ivar access_token_ttl: Access-token lifetime in seconds.
    :ivar refresh_token_ttl: Refresh-token lifetime in seconds.
    :ivar algorithm: JWT signing algorithm.
    :ivar blacklist_fail_open: Blacklist lookup policy on store errors.
    """

    access_secret: str
    access_token_ttl: int
    refresh_token_ttl: int
    algorithm: str = "HS256"
    blacklist_fail_open: bool = True

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any], *, production: bool = False) -> AuthSettings:
        """
        Build settings from a Flask config mapping.

        :param cfg: Mapping holding the ``JWT_*`` and ``BLACKLIST_*`` keys.
        :param production: Reject weak secrets instead of warning about them.
        :returns: Frozen settings instance.
        :raises ValueError: When a value is missing or invalid.
        """
        secret = str(cfg.get("JWT_SECRET_KEY") or "")
        if not secret:
            raise ValueError("JWT_SECRET_KEY must be set.")

        weak = secret.lower() in _WEAK_SECRETS or len(secret) < MIN_SECRET_LENGTH
        if weak and production:
            raise ValueError(
                f"JWT_SECRET_KEY must be a non-default value of at least "
                f"{MIN_SECRET_LENGTH} characters in production."
            )
        if weak:
            log.warning("Using a weak JWT secret; set JWT_SECRET_KEY before deploying.")

        access_ttl = parse_duration(cfg.get("JWT_ACCESS_EXPIRES_IN", "3600s"))
        refresh_ttl = parse_duration(cfg.get("JWT_REFRESH_EXPIRES_IN", "7d"))
        if access_ttl <= 0 or refresh_ttl <= 0:
            raise ValueError("Token lifetimes must be positive durations.")

        return cls(
            access_secret=secret,
            access_token_ttl=access_ttl,
            refresh_token_ttl=refresh_ttl,
            algorithm=str(cfg.get("JWT_ALGORITHM", "HS256")),
            blacklist_fail_open=bool(cfg.get("BLACKLIST_FAIL_OPEN", True)),
        )
