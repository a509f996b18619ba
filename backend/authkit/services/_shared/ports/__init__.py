"""
authkit.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) that define the contracts
for the token lifecycle infrastructure.

These ports decouple the service layer from concrete implementations
of token signing, refresh storage and access-token revocation.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec` and :class:`~.AccessClaims` — signing and
    verification of access tokens.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore`, :class:`~.RefreshTokenRecord` and
    :class:`~.RequestMetadata` — persistence and one-shot consumption of
    refresh tokens.

- :mod:`blacklist_store`:
    Defines :class:`~.TokenBlacklistStore` — revocation of access tokens
    before their natural expiry.

- :mod:`user_directory`:
    Defines :class:`~.UserDirectory` — user existence lookup.

Design Notes
------------
Concrete adapters (Redis, PyJWT, SQLAlchemy) implement these interfaces
under ``authkit.infra`` and ``authkit.services.identity``.
"""

from __future__ import annotations

from .blacklist_store import TokenBlacklistStore
from .refresh_token_store import RefreshTokenRecord, RefreshTokenStore, RequestMetadata
from .token_codec import AccessClaims, TokenCodec
from .user_directory import UserDirectory

__all__ = [
    "AccessClaims",
    "TokenCodec",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "RequestMetadata",
    "TokenBlacklistStore",
    "UserDirectory",
]
