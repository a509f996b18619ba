"""Factory Boy helpers wired to the project's SQLAlchemy session."""

from __future__ import annotations

import factory

from authkit.core.extensions import db


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class persisting factory objects through the Flask-scoped session."""

    class Meta:
        abstract = True
        # A callable keeps Factory Boy lazy: the session only exists once the
        # ``app`` fixture has pushed an application context.
        sqlalchemy_session_factory = lambda: db.session  # noqa: E731
        sqlalchemy_session_persistence = "commit"
