"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request

from authkit.api.deps import (
    current_principal,
    json_response,
    request_metadata,
    require_auth,
    timing,
)
from authkit.core.extensions import get_token_lifecycle
from authkit.schemas import (
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    SessionSchema,
    TokenPairSchema,
    UserSchema,
)
from authkit.services.auth.service import AuthService

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
token_schema = TokenPairSchema()
user_schema = UserSchema()
session_list_schema = SessionSchema(many=True)


def _service() -> AuthService:
    return AuthService(tokens=get_token_lifecycle())


@bp.post("/register")
@timing
def register():
    """Register a new user and return it with a fresh token pair."""

    dto = register_schema.load(request.get_json(silent=True) or {})
    result = _service().register(dto, request_metadata())
    body = {"data": {"user": user_schema.dump(result.user), "tokens": token_schema.dump(result.tokens)}}
    return json_response(body, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue an access/refresh pair."""

    dto = login_schema.load(request.get_json(silent=True) or {})
    result = _service().login(dto, request_metadata())
    body = {"data": {"user": user_schema.dump(result.user), "tokens": token_schema.dump(result.tokens)}}
    return json_response(body)


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new pair; the old token stops working."""

    dto = refresh_schema.load(request.get_json(silent=True) or {})
    pair = _service().refresh(dto, request_metadata())
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the presented access token and every refresh token of the caller."""

    principal = current_principal()
    _service().logout(principal.user_id, principal.access_token)
    return "", 204


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user profile."""

    principal = current_principal()
    user = principal.user or _service().me(principal.user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.get("/sessions")
@require_auth
@timing
def sessions():
    """List the caller's active refresh sessions."""

    principal = current_principal()
    items = _service().sessions(principal.user_id)
    return json_response({"data": session_list_schema.dump(items)})
