"""Identity provider interfaces."""

from abc import ABC, abstractmethod

from app.schemas.auth import AuthPrincipal


class AuthVerificationError(Exception):
    """Raised when a session token cannot be verified or normalized."""


class IdentityProviderUnavailable(Exception):
    """Raised when the identity provider cannot be reached or answers unexpectedly."""


class IdentityProvider(ABC):
    """Provider-neutral session resolution interface."""

    @abstractmethod
    async def resolve_session(self, token: str) -> AuthPrincipal | None:
        """Return the principal for ``token``, or ``None`` when the session is not valid."""


__all__ = ["AuthVerificationError", "IdentityProvider", "IdentityProviderUnavailable"]
