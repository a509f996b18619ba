# comments in English; reST docstrings
from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from uuid import uuid4

from authkit.infra.redis.client import KeyValueStore
from authkit.services._shared.errors import StoreUnavailableError
from authkit.services._shared.ports import RefreshTokenRecord, RefreshTokenStore, RequestMetadata
from authkit.services._shared.roles import Role

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed store of opaque refresh tokens.

    Layout:

    - ``auth:refresh:<token>`` holds the JSON record with a TTL equal to the
      seconds left until its ``expires_at``.
    - ``auth:user_refresh:<user_id>`` is a set of the user's outstanding
      tokens; its TTL follows the newest member. It only serves bulk
      revocation and listing, never validity decisions.

    :param kv: Key-value store facade.
    :param ttl_seconds: Refresh-token lifetime.
    :param clock: Epoch-seconds source; ``time.time`` when omitted.
    """

    kv: KeyValueStore
    ttl_seconds: int
    clock: Callable[[], float] | None = None

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token: str) -> str:
        return f"auth:refresh:{token}"

    @staticmethod
    def _ku(user_id: int) -> str:
        return f"auth:user_refresh:{user_id}"

    def _now(self) -> int:
        return int(self.clock() if self.clock is not None else time.time())

    @staticmethod
    def _load(raw: str | None) -> RefreshTokenRecord | None:
        if raw is None:
            return None
        try:
            return RefreshTokenRecord.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            log.error("Discarding unreadable refresh token record.", exc_info=True)
            return None

    # -------------------- API ------------------------

    def issue(self, user_id: int, role: Role, metadata: RequestMetadata | None = None) -> str:
        """
        Persist a new record and index it *before* the token is handed out.

        :raises StoreUnavailableError: If the write fails after retries.
        """
        token = str(uuid4())
        now = self._now()
        meta = metadata or RequestMetadata()
        record = RefreshTokenRecord(
            token=token,
            user_id=int(user_id),
            role=Role.parse(role),
            expires_at=now + self.ttl_seconds,
            created_at=now,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
        )

        with self.kv.transaction() as pipe:
            pipe.set(self._k(token), json.dumps(record.to_dict()), ex=self.ttl_seconds)
            pipe.sadd(self._ku(record.user_id), token)
            pipe.expire(self._ku(record.user_id), self.ttl_seconds)

        log.info("Issued refresh token.", extra={"user_id": record.user_id})
        return token

    def verify(self, token: str) -> RefreshTokenRecord | None:
        try:
            record = self._load(self.kv.get(self._k(token)))
        except StoreUnavailableError:
            log.error("Refresh token lookup failed; treating token as invalid.", exc_info=True)
            return None
        if record is None:
            return None

        if record.is_expired(self._now()):
            # Store TTL lagged behind the embedded expiry; drop it now.
            try:
                self.revoke(token)
            except StoreUnavailableError:
                log.warning("Could not delete expired refresh token record.", exc_info=True)
            return None
        return record

    def consume(self, token: str) -> RefreshTokenRecord | None:
        """
        Atomically take the record out of the store.

        Of several concurrent callers presenting the same token, exactly one
        receives the record; the others get ``None``.

        :raises StoreUnavailableError: If the store cannot be reached.
        """
        record = self._load(self.kv.get_and_delete(self._k(token)))
        if record is not None:
            try:
                self.kv.set_remove(self._ku(record.user_id), token)
            except StoreUnavailableError:
                # Stale index members are pruned by revoke_all/list_for_user.
                log.warning("Could not unindex consumed refresh token.", exc_info=True)
        return record

    def revoke(self, token: str) -> None:
        self.consume(token)

    def revoke_all(self, user_id: int) -> int:
        """
        Best effort per token: a failing delete is logged and the loop goes on.

        Never raises; an unreachable index means nothing could be enumerated.
        """
        key_u = self._ku(user_id)
        try:
            tokens = sorted(self.kv.set_members(key_u))
        except StoreUnavailableError:
            log.error(
                "Could not read refresh token index; nothing revoked.",
                extra={"user_id": user_id},
                exc_info=True,
            )
            return 0

        removed = 0
        for token in tokens:
            try:
                removed += self.kv.delete(self._k(token))
            except StoreUnavailableError:
                log.error(
                    "Failed to revoke one refresh token; continuing.",
                    extra={"user_id": user_id},
                    exc_info=True,
                )
        try:
            self.kv.delete(key_u)
        except StoreUnavailableError:
            log.error("Could not delete refresh token index.", extra={"user_id": user_id})

        log.info("Revoked refresh tokens.", extra={"user_id": user_id, "removed": removed})
        return removed

    def list_for_user(self, user_id: int) -> list[RefreshTokenRecord]:
        key_u = self._ku(user_id)
        records: list[RefreshTokenRecord] = []
        stale: list[str] = []
        for token in sorted(self.kv.set_members(key_u)):
            record = self.verify(token)
            if record is None:
                # Underlying record missing (expired/deleted) -> mark for cleanup
                stale.append(token)
            else:
                records.append(record)

        if stale:
            self.kv.set_remove(key_u, *stale)
        return sorted(records, key=lambda r: r.created_at)
