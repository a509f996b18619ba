"""
DTOs for TokenLifecycleService.
"""

from __future__ import annotations

from dataclasses import dataclass

from authkit.services._shared.ports import AccessClaims, RequestMetadata
from authkit.services._shared.roles import Role
from authkit.services.identity.dto import UserPublicOut


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Access/refresh pair handed to the client.

    :param access_token: Signed bearer token.
    :type access_token: str
    :param refresh_token: Opaque single-use refresh token.
    :type refresh_token: str
    :param expires_in: Access-token lifetime in seconds, taken from the
        same setting the codec signs with.
    :type expires_in: int
    """

    access_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True, slots=True)
class AuthenticatedPrincipal:
    """
    Outcome of a successful bearer-token check.

    :param user_id: Token subject.
    :param role: Role claim of the token.
    :param claims: Full verified claims.
    :param access_token: The raw token, kept for logout.
    :param user: Resolved user view; ``None`` when no directory is wired.
    """

    user_id: int
    role: Role
    claims: AccessClaims
    access_token: str
    user: UserPublicOut | None = None


__all__ = ["TokenPairOut", "AuthenticatedPrincipal", "RequestMetadata"]
