"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between the token stores,
repositories and application services.

Each error carries a ``code``: the stable message key that the API layer
translates into the caller's language. The translation to HTTP responses
(RFC 7807) is handled by ``authkit/core/errors.py`` via
``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    # Some dialects (PostgreSQL) include constraint name in the error message
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from stores, repositories or domain logic.
    - The API layer or BaseService will later translate them to APIError.
    """

    code: ClassVar[str] = "errors.bad_request"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


# --------------------------------------------------------------------------- #
# Generic domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    code: ClassVar[str] = "errors.not_found"

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


class ForbiddenError(ServiceError):
    """Raised when the authenticated caller lacks the required role."""

    code = "errors.forbidden"


class StoreUnavailableError(ServiceError):
    """
    Raised when the key-value store cannot complete an operation after the
    client's retries are exhausted.

    Components decide their own policy: the blacklist swallows it, refresh
    verification turns it into "not found", issuance lets it surface.
    """

    code = "errors.service_unavailable"


# --------------------------------------------------------------------------- #
# Authentication errors
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """Base for every failure that must answer ``401 Unauthorized``."""

    code = "auth.unauthorized"


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password; the two cases are indistinguishable."""

    code = "auth.invalid_credentials"


class InvalidRefreshTokenError(AuthenticationError):
    """Refresh token absent, expired, or already consumed by another rotation."""

    code = "auth.invalid_refresh_token"


class TokenMissingError(AuthenticationError):
    code = "auth.token_missing"


class TokenRevokedError(AuthenticationError):
    """Access token was blacklisted by a logout."""

    code = "auth.token_revoked"


class InvalidTokenError(AuthenticationError):
    """Access token could not be parsed at all."""

    code = "auth.token_invalid"


class InvalidSignatureError(InvalidTokenError):
    """Signature, algorithm or required claims do not check out."""

    code = "auth.token_invalid"


class TokenExpiredError(AuthenticationError):
    code = "auth.token_expired"


class UserNotFoundError(AuthenticationError):
    """Token subject no longer maps to an existing user."""

    code = "auth.user_not_found"


class EmailTakenError(ServiceError):
    """Registration attempted with an email that already has an account."""

    code = "auth.email_taken"
