"""Factory Boy definition for :class:`authkit.models.user.User`."""

from __future__ import annotations

import factory

from authkit.models.user import User
from authkit.services._shared.roles import Role
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`authkit.models.user.User` instances.

    Notes
    -----
    - ``password`` goes through the model setter, so the stored value is
      always a werkzeug hash. Pass ``password="..."`` to override.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    role = Role.USER
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    password = DEFAULT_PASSWORD
