from __future__ import annotations

from typing import Protocol


class TokenBlacklistStore(Protocol):
    """
    Abstraction for a blacklist of **access tokens** revoked before expiry.

    Entries need only outlive the token they block.
    """

    def add(self, access_token: str) -> None:
        """Blacklist ``access_token`` until its natural expiry. Never raises."""
        ...

    def is_blacklisted(self, access_token: str) -> bool:
        """Report whether ``access_token`` was blacklisted."""
        ...
