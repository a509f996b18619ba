from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from authkit.services._shared.roles import Role


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Claims carried by an access token.

    :ivar subject_id: Id of the user the token was issued to.
    :ivar role: Role snapshot at issuance.
    :ivar issued_at: Epoch seconds when the token was minted.
    :ivar expires_at: Epoch seconds after which the token is rejected.
    :ivar jti: Random token id; keeps two tokens minted in the same second apart.
    """

    subject_id: int
    role: Role
    issued_at: int
    expires_at: int
    jti: str


class TokenCodec(Protocol):
    """Port for minting and checking signed access tokens."""

    @property
    def ttl_seconds(self) -> int:
        """Configured access-token lifetime."""
        ...

    def issue(self, subject_id: int, role: Role) -> str:
        """Sign a new access token for ``subject_id`` expiring after :attr:`ttl_seconds`."""
        ...

    def decode(self, token: str) -> AccessClaims:
        """
        Read claims **without** checking the signature or expiry.

        Only for bookkeeping such as blacklist TTLs; never a trust decision.

        :raises InvalidTokenError: If the token cannot be parsed.
        """
        ...

    def verify(self, token: str) -> AccessClaims:
        """
        Check signature, algorithm and expiry, then return the claims.

        :raises InvalidSignatureError: Bad signature, malformed token or missing claims.
        :raises TokenExpiredError: ``exp`` is not in the future.
        """
        ...
