# authkit/infra/jwt/pyjwt_token_codec.py
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any
from uuid import uuid4

import jwt

from authkit.services._shared.errors import (
    InvalidSignatureError,
    InvalidTokenError,
    TokenExpiredError,
)
from authkit.services._shared.ports import AccessClaims, TokenCodec
from authkit.services._shared.roles import Role

log = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("sub", "role", "iat", "exp")


class JWTTokenCodec(TokenCodec):
    """
    HMAC-signed JWT access tokens built with PyJWT.

    Claims: ``sub`` (user id as string), ``role`` (int), ``iat``, ``exp`` and
    a random ``jti``. Expiry is checked against :attr:`clock` rather than
    PyJWT's own clock so it can be pinned in tests.

    :param secret: Shared signing secret.
    :param ttl_seconds: Access-token lifetime.
    :param algorithm: HMAC algorithm; only this one is accepted on verify.
    :param clock: Epoch-seconds source; ``time.time`` when omitted.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        *,
        algorithm: str = "HS256",
        clock: Callable[[], float] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("A signing secret is required.")
        self._secret = secret
        self._ttl = int(ttl_seconds)
        self.algorithm = algorithm
        self.clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def _now(self) -> int:
        return int(self.clock() if self.clock is not None else time.time())

    # -------------------- API ------------------------

    def issue(self, subject_id: int, role: Role) -> str:
        now = self._now()
        payload = {
            "sub": str(int(subject_id)),
            "role": int(Role.parse(role)),
            "iat": now,
            "exp": now + self._ttl,
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> AccessClaims:
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
            return self._to_claims(payload)
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError, OverflowError) as exc:
            raise InvalidTokenError("Unreadable access token") from exc

    def verify(self, token: str) -> AccessClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,  # checked below against self.clock
                    "verify_iat": False,
                    "require": list(REQUIRED_CLAIMS),
                },
            )
            claims = self._to_claims(payload)
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError, OverflowError) as exc:
            log.info("Rejected access token: %s", type(exc).__name__)
            raise InvalidSignatureError("Access token failed verification") from exc

        if claims.expires_at <= self._now():
            raise TokenExpiredError("Access token has expired")
        return claims

    # -------------------- helpers --------------------

    @staticmethod
    def _to_claims(payload: dict[str, Any]) -> AccessClaims:
        return AccessClaims(
            subject_id=int(payload["sub"]),
            role=Role.parse(payload["role"]),
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
            jti=str(payload.get("jti", "")),
        )
