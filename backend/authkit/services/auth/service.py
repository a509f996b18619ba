# authkit/services/auth/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from authkit.repositories.user import UserRepository
from authkit.services._shared.base import BaseService
from authkit.services._shared.errors import (
    EmailTakenError,
    InvalidCredentialsError,
    violates,
)
from authkit.services._shared.ports import RequestMetadata
from authkit.services._shared.roles import Role
from authkit.services.auth.dto import (
    AuthResultOut,
    LoginIn,
    RefreshIn,
    RegisterIn,
    SessionOut,
)
from authkit.services.identity.dto import UserPublicOut
from authkit.services.identity.service import IdentityService, to_public
from authkit.services.tokens.dto import TokenPairOut
from authkit.services.tokens.service import TokenLifecycleService

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication flows (register / login / refresh / logout).

    Credentials are checked against the database; every token operation is
    delegated to :class:`TokenLifecycleService`.
    """

    def __init__(
        self,
        *,
        tokens: TokenLifecycleService,
        identity: IdentityService | None = None,
    ) -> None:
        """
        :param tokens: Token lifecycle orchestrator.
        :param identity: User lookup service.
        """
        super().__init__()
        self.tokens = tokens
        self.identity = identity or IdentityService()

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn, metadata: RequestMetadata | None = None) -> AuthResultOut:
        """
        Create a ``USER`` account and sign it in.

        :raises EmailTakenError: If the email already has an account.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise EmailTakenError()

            try:
                user = repo.create(
                    email=dto.email,
                    password=dto.password,
                    role=Role.USER,
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                )
            except IntegrityError as exc:
                # Lost a race with a concurrent registration of the same email
                if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                    raise EmailTakenError() from exc
                raise

            user_id, role = user.id, user.role

        public = self.identity.get_user(user_id)
        pair = self.tokens.issue_token_pair(user_id, role, metadata)
        log.info("User registered.", extra={"user_id": user_id})
        return AuthResultOut(user=public, tokens=pair)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn, metadata: RequestMetadata | None = None) -> AuthResultOut:
        """
        Verify credentials and issue a fresh pair.

        Unknown email and wrong password raise the same error, and nothing
        is written to the token store on failure.

        :raises InvalidCredentialsError: On any credential mismatch.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.authenticate(dto.email, dto.password)
            if user is None:
                log.info("Login rejected.")
                raise InvalidCredentialsError()
            public = to_public(user)

        pair = self.tokens.issue_token_pair(public.id, public.role, metadata)
        return AuthResultOut(user=public, tokens=pair)

    # ------------------------------------------------------------------ #
    # Refresh / logout
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn, metadata: RequestMetadata | None = None) -> TokenPairOut:
        return self.tokens.rotate_refresh_token(dto.refresh_token, metadata)

    def logout(self, user_id: int, access_token: str) -> None:
        self.tokens.logout(user_id, access_token)

    # ------------------------------------------------------------------ #
    # Current user
    # ------------------------------------------------------------------ #

    def me(self, user_id: int) -> UserPublicOut:
        return self.identity.get_user(user_id)

    def sessions(self, user_id: int) -> list[SessionOut]:
        """List the user's live refresh sessions, oldest first."""
        return [
            SessionOut(
                created_at=record.created_at,
                expires_at=record.expires_at,
                ip_address=record.ip_address,
                user_agent=record.user_agent,
            )
            for record in self.tokens.list_sessions(user_id)
        ]
