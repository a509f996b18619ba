from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable

from authkit.infra.redis.client import KeyValueStore
from authkit.services._shared.errors import InvalidTokenError, StoreUnavailableError
from authkit.services._shared.ports import TokenBlacklistStore, TokenCodec

log = logging.getLogger(__name__)


class RedisTokenBlacklistStore(TokenBlacklistStore):
    """
    Blacklist for **access tokens**, keyed by the raw token string.

    Each marker lives exactly as long as the token it blocks, so entries
    never need explicit deletion.

    :param kv: Key-value store facade.
    :param codec: Used only to *read* ``exp`` (no signature check).
    :param default_ttl: Marker lifetime when ``exp`` is unreadable or past;
        the configured access-token lifetime.
    :param fail_open: On lookup errors report "not blacklisted" (``True``) or
        "blacklisted" (``False``).
    :param clock: Epoch-seconds source; ``time.time`` when omitted.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        codec: TokenCodec,
        *,
        default_ttl: int,
        fail_open: bool = True,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.kv = kv
        self.codec = codec
        self.default_ttl = default_ttl
        self.fail_open = fail_open
        self.clock = clock

    @staticmethod
    def _k(access_token: str) -> str:
        return f"auth:blacklist:{access_token}"

    def _now(self) -> float:
        return self.clock() if self.clock is not None else time.time()

    def _ttl_for(self, access_token: str) -> int:
        try:
            claims = self.codec.decode(access_token)
        except InvalidTokenError:
            return self.default_ttl
        remaining = claims.expires_at - self._now()
        if remaining <= 0:
            return self.default_ttl
        # Round up: a fraction of a second still needs a marker.
        return math.ceil(remaining)

    def add(self, access_token: str) -> None:
        ttl = self._ttl_for(access_token)
        try:
            self.kv.set(self._k(access_token), "1", ttl)
        except StoreUnavailableError:
            # Logout must complete even when the marker cannot be written.
            log.error("Failed to blacklist access token.", exc_info=True)

    def is_blacklisted(self, access_token: str) -> bool:
        try:
            return self.kv.exists(self._k(access_token))
        except StoreUnavailableError:
            log.warning(
                "Blacklist lookup failed; answering %s.",
                "not blacklisted" if self.fail_open else "blacklisted",
                exc_info=True,
            )
            return not self.fail_open
