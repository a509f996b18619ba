from __future__ import annotations

from typing import Protocol

from authkit.services.identity.dto import UserPublicOut


class UserDirectory(Protocol):
    """Read-only lookup of users by id."""

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        :raises NotFoundError: If no user has this id.
        """
        ...
