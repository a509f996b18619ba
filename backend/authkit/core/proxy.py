"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`werkzeug.middleware.proxy_fix.ProxyFix` when enabled.

    Refresh-token records store ``request.remote_addr``; behind a reverse
    proxy it must come from ``X-Forwarded-For`` for that to be the client.

    Controlled by ``USE_PROXYFIX`` (default ``True``) and ``PROXY_HOPS``
    (number of trusted proxies, default ``1``).
    """
    if app.config.get("USE_PROXYFIX", True):
        hops = int(app.config.get("PROXY_HOPS", 1))
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops)
