"""
IdentityService
===============

Read access to the `User` aggregate. Implements the user-lookup port the
token lifecycle relies on.
"""

from __future__ import annotations

from authkit.models.user import User
from authkit.repositories.user import UserRepository
from authkit.services._shared.base import BaseService
from authkit.services._shared.errors import NotFoundError
from authkit.services.identity.dto import UserPublicOut


def to_public(user: User) -> UserPublicOut:
    """Strip secrets from a ``User`` row."""
    return UserPublicOut(
        id=user.id,
        email=user.email,
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Satisfies :class:`~authkit.services._shared.ports.UserDirectory`.
    """

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :param user_id: User primary key.
        :type user_id: int
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises NotFoundError: If user does not exist.
        """

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            return to_public(user)
