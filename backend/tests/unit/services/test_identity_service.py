"""Unit tests for IdentityService (user lookup port)."""

from __future__ import annotations

import pytest

from authkit.services._shared.errors import NotFoundError
from authkit.services._shared.roles import Role
from authkit.services.identity.service import IdentityService
from tests.factories.user import UserFactory


def test_get_user_returns_public_dto(session):
    user = UserFactory(email="carol@example.com", role=Role.MANAGER, first_name="Carol")

    out = IdentityService().get_user(user.id)

    assert out.id == user.id
    assert out.email == "carol@example.com"
    assert out.role is Role.MANAGER
    assert out.first_name == "Carol"
    assert out.created_at is not None


def test_get_user_missing_raises(session):
    with pytest.raises(NotFoundError) as excinfo:
        IdentityService().get_user(999)
    assert excinfo.value.entity == "User"
    assert excinfo.value.key == 999


def test_translate_exceptions_maps_to_api_errors(app):
    from authkit.core.errors import NotFound, ServiceUnavailable, Unauthorized
    from authkit.services._shared.errors import StoreUnavailableError, TokenRevokedError

    svc = IdentityService()
    unauthorized = svc.translate_exceptions(TokenRevokedError())
    assert isinstance(unauthorized, Unauthorized)
    assert unauthorized.code == "auth.token_revoked"
    assert isinstance(svc.translate_exceptions(NotFoundError("User", 1)), NotFound)
    assert isinstance(svc.translate_exceptions(StoreUnavailableError()), ServiceUnavailable)
