"""Tests for the ``flask auth`` command group."""

from __future__ import annotations

from authkit.models.user import User
from authkit.services._shared.roles import Role


def test_create_user_with_role(app, session):
    runner = app.test_cli_runner()
    result = runner.invoke(
        args=["auth", "create-user", "--email", "root@example.com", "--role", "admin"],
        input="Adm1n!pass\nAdm1n!pass\n",
    )

    assert result.exit_code == 0, result.output
    assert "role=ADMIN" in result.output
    created = session.query(User).filter_by(email="root@example.com").one()
    assert created.role is Role.ADMIN


def test_create_user_refuses_duplicates(app, user):
    runner = app.test_cli_runner()
    result = runner.invoke(
        args=["auth", "create-user", "--email", user.email, "--password", "x"],
    )
    assert result.exit_code != 0
    assert "already exists" in result.output


def test_create_user_rejects_malformed_email(app, session):
    result = app.test_cli_runner().invoke(
        args=["auth", "create-user", "--email", "not-an-email", "--password", "Adm1n!pass"],
    )

    assert result.exit_code == 2
    assert "Email format looks invalid." in result.output
    assert not isinstance(result.exception, ValueError)
    assert session.query(User).count() == 0


def test_revoke_sessions(app, user, tokens):
    tokens.issue_token_pair(user.id, user.role)
    tokens.issue_token_pair(user.id, user.role)

    result = app.test_cli_runner().invoke(args=["auth", "revoke-sessions", str(user.id)])

    assert result.exit_code == 0, result.output
    assert "Revoked 2 refresh token(s)" in result.output
    assert tokens.list_sessions(user.id) == []
