from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Protocol

from authkit.services._shared.roles import Role


@dataclass(frozen=True, slots=True)
class RequestMetadata:
    """
    Client context captured when a refresh token is minted.

    :ivar ip_address: Client address as seen behind the proxy chain.
    :ivar user_agent: Raw ``User-Agent`` header.
    """

    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Server-side state of one outstanding refresh token.

    :ivar token: Opaque token string handed to the client.
    :ivar user_id: Owner user id.
    :ivar role: Role snapshot at issuance; reused verbatim on rotation.
    :ivar expires_at: Absolute expiry in epoch seconds.
    :ivar created_at: Issuance time in epoch seconds.
    :ivar ip_address: Optional client address at issuance.
    :ivar user_agent: Optional client user agent at issuance.
    """

    token: str
    user_id: int
    role: Role
    expires_at: int
    created_at: int
    ip_address: str | None = None
    user_agent: str | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["role"] = int(self.role)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RefreshTokenRecord:
        """
        Rebuild a record from its stored JSON form.

        :raises KeyError: If a required field is missing.
        :raises ValueError: If a field has the wrong shape.
        """
        return cls(
            token=str(data["token"]),
            user_id=int(data["user_id"]),
            role=Role.parse(data["role"]),
            expires_at=int(data["expires_at"]),
            created_at=int(data["created_at"]),
            ip_address=data.get("ip_address"),
            user_agent=data.get("user_agent"),
        )


class RefreshTokenStore(Protocol):
    """
    Stateful store for opaque refresh tokens.

    A token is valid only while its record exists and has not expired.
    Rotation MUST go through :meth:`consume` so that, among concurrent
    presenters of the same token, exactly one observes the record.
    """

    def issue(self, user_id: int, role: Role, metadata: RequestMetadata | None = None) -> str:
        """
        Mint a token, persist its record and index it under ``user_id``.

        :raises StoreUnavailableError: If the record could not be written.
        """
        ...

    def verify(self, token: str) -> RefreshTokenRecord | None:
        """
        Return the live record, or ``None`` when absent, expired or unreadable.

        Never raises; an expired record found here is deleted.
        """
        ...

    def consume(self, token: str) -> RefreshTokenRecord | None:
        """Atomically delete the record and return what was there (``None`` if nothing)."""
        ...

    def revoke(self, token: str) -> None:
        """Delete one token. Idempotent."""
        ...

    def revoke_all(self, user_id: int) -> int:
        """
        Delete every indexed token of ``user_id`` and then the index itself.

        :returns: Number of records actually deleted.
        """
        ...

    def list_for_user(self, user_id: int) -> list[RefreshTokenRecord]:
        """List live records for ``user_id``, dropping stale index members."""
        ...
