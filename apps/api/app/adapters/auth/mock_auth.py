"""Mock identity provider for local development and tests."""

from app.adapters.auth.base import AuthVerificationError, IdentityProvider
from app.schemas.auth import AuthPrincipal, Role


class MockIdentityProvider(IdentityProvider):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>``
    - ``test:<user_id>:<role>``
    - ``test:<user_id>:<role>:verified``
    """

    async def resolve_session(self, token: str) -> AuthPrincipal | None:
        parts = token.split(":")
        if len(parts) not in (2, 3, 4) or parts[0] != "test":
            raise AuthVerificationError("Invalid session token")

        user_id = parts[1].strip()
        if not user_id:
            raise AuthVerificationError("Session token missing user identity")

        role = Role.parse(parts[2]) if len(parts) >= 3 else Role.USER
        email_verified = len(parts) == 4 and parts[3] == "verified"
        return AuthPrincipal(user_id=user_id, role=role, email_verified=email_verified)


__all__ = ["MockIdentityProvider"]
