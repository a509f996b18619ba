# authkit/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from authkit.services.identity.dto import UserPublicOut
from authkit.services.tokens.dto import TokenPairOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-service registration.

    :param email: Login email (normalized by the model).
    :type email: str
    :param password: Raw password, hashed by the model.
    :type password: str
    :param first_name: Optional given name.
    :type first_name: str | None
    :param last_name: Optional family name.
    :type last_name: str | None
    """

    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token issued earlier.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Result of registration or login: who signed in and their tokens.
    """

    user: UserPublicOut
    tokens: TokenPairOut


@dataclass(frozen=True, slots=True)
class SessionOut:
    """
    One active refresh-token session, without the token value.

    :param created_at: Issuance time (epoch seconds).
    :param expires_at: Expiry time (epoch seconds).
    :param ip_address: Client address recorded at issuance.
    :param user_agent: Client user agent recorded at issuance.
    """

    created_at: int
    expires_at: int
    ip_address: str | None
    user_agent: str | None
