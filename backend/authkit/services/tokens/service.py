"""
TokenLifecycleService
=====================

Single entry point for the token protocol used by the authentication flows:

- Issue an access/refresh pair.
- Rotate a refresh token (single use, one winner under concurrency).
- Log out (blacklist the access token, then revoke every refresh token).
- Authenticate an inbound bearer token.

The service owns *the order* of operations; the stores own their keys.
"""

from __future__ import annotations

import logging

from authkit.services._shared.errors import (
    InvalidRefreshTokenError,
    NotFoundError,
    TokenMissingError,
    TokenRevokedError,
    UserNotFoundError,
)
from authkit.services._shared.ports import (
    RefreshTokenRecord,
    RefreshTokenStore,
    RequestMetadata,
    TokenBlacklistStore,
    TokenCodec,
    UserDirectory,
)
from authkit.services._shared.roles import Role
from authkit.services.tokens.dto import AuthenticatedPrincipal, TokenPairOut

log = logging.getLogger(__name__)


class TokenLifecycleService:
    """
    Orchestrates the codec, the refresh store and the blacklist.

    :param codec: Access-token signer/verifier.
    :param refresh_tokens: Refresh-token store.
    :param blacklist: Access-token blacklist.
    :param users: Optional user lookup; enables the existence checks on
        rotation and authentication.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        refresh_tokens: RefreshTokenStore,
        blacklist: TokenBlacklistStore,
        users: UserDirectory | None = None,
    ) -> None:
        self.codec = codec
        self.refresh_tokens = refresh_tokens
        self.blacklist = blacklist
        self.users = users

    # --------------------------------------------------------------------- #
    # Issuance
    # --------------------------------------------------------------------- #

    def issue_token_pair(
        self, user_id: int, role: Role, metadata: RequestMetadata | None = None
    ) -> TokenPairOut:
        """
        Mint an access token and a refresh token for ``user_id``.

        :raises StoreUnavailableError: If the refresh record cannot be written.
        """
        access_token = self.codec.issue(user_id, role)
        refresh_token = self.refresh_tokens.issue(user_id, role, metadata)
        return TokenPairOut(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.codec.ttl_seconds,
        )

    # --------------------------------------------------------------------- #
    # Rotation
    # --------------------------------------------------------------------- #

    def rotate_refresh_token(
        self, presented: str, metadata: RequestMetadata | None = None
    ) -> TokenPairOut:
        """
        Exchange a refresh token for a brand-new pair.

        The presented token is consumed atomically; of two concurrent calls
        with the same token only one gets a pair. The new pair carries the
        role recorded when the old token was issued.

        :param presented: Refresh token sent by the client.
        :param metadata: Client context for the new record; defaults to the
            context recorded on the consumed token.
        :raises InvalidRefreshTokenError: Token absent, expired or already used.
        :raises UserNotFoundError: Token owner no longer exists.
        """
        if not presented:
            raise InvalidRefreshTokenError()

        record = self.refresh_tokens.verify(presented)
        if record is None:
            raise InvalidRefreshTokenError()

        if self.users is not None:
            try:
                self.users.get_user(record.user_id)
            except NotFoundError as exc:
                self.refresh_tokens.revoke(presented)
                raise UserNotFoundError() from exc

        consumed = self.refresh_tokens.consume(presented)
        if consumed is None:
            log.warning("Refresh token already consumed.", extra={"user_id": record.user_id})
            raise InvalidRefreshTokenError()

        if metadata is None:
            metadata = RequestMetadata(
                ip_address=consumed.ip_address, user_agent=consumed.user_agent
            )
        pair = self.issue_token_pair(consumed.user_id, consumed.role, metadata)
        log.info("Rotated refresh token.", extra={"user_id": consumed.user_id})
        return pair

    # --------------------------------------------------------------------- #
    # Revocation
    # --------------------------------------------------------------------- #

    def logout(self, user_id: int, access_token: str) -> None:
        """
        Blacklist ``access_token`` first, then revoke all refresh tokens.

        Neither step raises on store failure, so logout always completes.
        """
        self.blacklist.add(access_token)
        self.refresh_tokens.revoke_all(user_id)
        log.info("User logged out.", extra={"user_id": user_id})

    def list_sessions(self, user_id: int) -> list[RefreshTokenRecord]:
        return self.refresh_tokens.list_for_user(user_id)

    # --------------------------------------------------------------------- #
    # Request authentication
    # --------------------------------------------------------------------- #

    def authenticate(self, access_token: str | None) -> AuthenticatedPrincipal:
        """
        Resolve a bearer token into a principal.

        The blacklist is consulted before the signature is trusted.

        :raises TokenMissingError: No token supplied.
        :raises TokenRevokedError: Token was blacklisted.
        :raises InvalidSignatureError: Signature or claims do not check out.
        :raises TokenExpiredError: Token is past its ``exp``.
        :raises UserNotFoundError: Subject no longer exists.
        """
        if not access_token:
            raise TokenMissingError()

        if self.blacklist.is_blacklisted(access_token):
            raise TokenRevokedError()

        claims = self.codec.verify(access_token)

        user = None
        if self.users is not None:
            try:
                user = self.users.get_user(claims.subject_id)
            except NotFoundError as exc:
                raise UserNotFoundError() from exc

        return AuthenticatedPrincipal(
            user_id=claims.subject_id,
            role=claims.role,
            claims=claims,
            access_token=access_token,
            user=user,
        )
