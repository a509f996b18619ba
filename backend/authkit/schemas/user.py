"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from authkit.services._shared.roles import Role


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    role = fields.Enum(Role, by_value=False)
    first_name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
