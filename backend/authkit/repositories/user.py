"""User repository for persistence and credential checks."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from authkit.models.user import User
from authkit.repositories.base import BaseRepository
from authkit.services._shared.roles import Role


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER handles tokens; those live in the key-value store.
    """

    model = User

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :returns: User instance or ``None`` when not found.
        """
        stmt = select(User).where(User.email == email.lower().strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def create(
        self,
        *,
        email: str,
        password: str,
        role: Role = Role.USER,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        """Create and flush a user; the model hashes ``password``.

        :raises IntegrityError: If the email is already taken at flush time.
        """
        user = User(
            email=email,
            password=password,
            role=role,
            first_name=first_name,
            last_name=last_name,
        )
        return self.add(user)

    # ---------------------------- Password ops ----------------------------

    def authenticate(self, email: str, password: str) -> User | None:
        """Authenticate a user by email and password.

        Unknown email and wrong password both yield ``None``.

        :param email: Email address to authenticate.
        :param password: Raw password to verify.
        :returns: Authenticated user or ``None`` when credentials fail.
        """
        user = self.get_by_email(email)
        if not user or not user.verify_password(password):
            return None
        return user
