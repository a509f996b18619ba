"""HTTP API: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from flask import Flask


def init_app(app: Flask) -> None:
    """Mount every v1 blueprint at ``<API_BASE_PREFIX>/v1<relative prefix>``.

    With the default ``/api`` base this yields ``/api/v1`` (health),
    ``/api/v1/auth`` and ``/api/v1/users``.
    """
    from authkit.api.v1 import API_VERSION, REGISTRY

    version_root = "/".join([app.config.get("API_BASE_PREFIX", "/api").rstrip("/"), API_VERSION])
    for bp, rel_prefix in REGISTRY:
        app.register_blueprint(bp, url_prefix=version_root + rel_prefix)


__all__ = ["init_app"]
