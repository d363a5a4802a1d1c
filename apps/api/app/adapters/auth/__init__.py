"""Identity provider adapters."""

from .base import AuthVerificationError, IdentityProvider, IdentityProviderUnavailable
from .mock_auth import MockIdentityProvider
from .session_auth import SessionIdentityProvider

__all__ = [
    "AuthVerificationError",
    "IdentityProvider",
    "IdentityProviderUnavailable",
    "MockIdentityProvider",
    "SessionIdentityProvider",
]
