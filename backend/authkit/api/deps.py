"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from authkit.core.extensions import get_token_lifecycle
from authkit.services._shared.errors import ForbiddenError, TokenMissingError
from authkit.services._shared.ports import RequestMetadata
from authkit.services._shared.roles import Role
from authkit.services.tokens.dto import AuthenticatedPrincipal

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


def bearer_token() -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, or ``None``."""

    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def request_metadata() -> RequestMetadata:
    """Client address and user agent recorded on refresh tokens."""

    return RequestMetadata(
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )


def current_principal() -> AuthenticatedPrincipal:
    """Return the principal stored by :func:`require_auth`."""

    principal = g.get("principal")
    if principal is None:
        raise TokenMissingError()
    return principal


def _authenticate_request() -> AuthenticatedPrincipal:
    principal = get_token_lifecycle().authenticate(bearer_token())
    g.principal = principal
    return principal


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, non-revoked access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        _authenticate_request()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: Role) -> Callable[[F], F]:
    """Ensure the authenticated principal currently holds one of ``roles``."""

    allowed = frozenset(roles)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            principal = _authenticate_request()
            # Current stored role; the signed claim only when no user was resolved.
            role = principal.user.role if principal.user is not None else principal.role
            if role not in allowed:
                raise ForbiddenError()
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
