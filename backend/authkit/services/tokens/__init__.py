"""Token lifecycle: issuance, rotation, logout and bearer authentication."""

from .dto import AuthenticatedPrincipal, TokenPairOut
from .service import TokenLifecycleService

__all__ = ["TokenLifecycleService", "TokenPairOut", "AuthenticatedPrincipal"]
