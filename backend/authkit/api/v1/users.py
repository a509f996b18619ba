"""User endpoints."""

from __future__ import annotations

from flask import Blueprint

from authkit.api.deps import json_response, require_roles, timing
from authkit.schemas import UserSchema
from authkit.services._shared.roles import Role
from authkit.services.identity.service import IdentityService

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()


@bp.get("/<int:user_id>")
@require_roles(Role.ADMIN, Role.MANAGER)
@timing
def get_user(user_id: int):
    """Return a single user; restricted to administrators and managers."""

    user = IdentityService().get_user(user_id)
    return json_response({"data": user_schema.dump(user)})
