"""Flask CLI commands for account bootstrap and session revocation."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from authkit.core.extensions import get_token_lifecycle
from authkit.services._shared.roles import Role
from authkit.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)

ROLE_CHOICES = [role.name.lower() for role in Role]


@click.group("auth")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for auth commands.")
def auth_cli(verbose: bool) -> None:
    """Account and session administration commands."""
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


@auth_cli.command("create-user")
@click.option("--email", required=True)
@click.password_option()
@click.option(
    "--role",
    type=click.Choice(ROLE_CHOICES, case_sensitive=False),
    default="user",
    show_default=True,
)
@with_appcontext
def create_user_command(email: str, password: str, role: str) -> None:
    """Create an account with an explicit role (e.g. the first administrator)."""
    try:
        with SQLAlchemyUnitOfWork() as uow:
            if uow.users.exists_by_email(email):
                raise click.UsageError(f"A user with email {email!r} already exists.")
            user = uow.users.create(email=email, password=password, role=Role.parse(role))
            user_id, user_role = user.id, user.role
    except ValueError as exc:
        # Model validators reject malformed emails and empty passwords.
        raise click.BadParameter(str(exc)) from exc
    except SQLAlchemyError as exc:  # pragma: no cover - CLI safeguard
        raise click.ClickException(f"User creation failed: {exc}") from exc
    click.echo(f"Created user id={user_id} role={user_role.name}")


@auth_cli.command("revoke-sessions")
@click.argument("user_id", type=int)
@with_appcontext
def revoke_sessions_command(user_id: int) -> None:
    """Revoke every refresh token of USER_ID."""
    removed = get_token_lifecycle().refresh_tokens.revoke_all(user_id)
    click.echo(f"Revoked {removed} refresh token(s) for user {user_id}")
