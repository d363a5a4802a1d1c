"""HTTP session identity provider adapter."""

from __future__ import annotations

from typing import Any

import httpx

from app.adapters.auth.base import AuthVerificationError, IdentityProvider, IdentityProviderUnavailable
from app.schemas.auth import AuthPrincipal, Role


class SessionIdentityProvider(IdentityProvider):
    """Resolves session tokens through the external auth service's session endpoint.

    The token is forwarded under every configured session cookie name so the
    provider finds it whether it runs with secure cookies or not. A ``null``
    body, a 401, or a banned user resolve to no principal.
    """

    def __init__(
        self,
        *,
        base_url: str,
        session_path: str,
        cookie_names: tuple[str, ...],
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session_path = session_path
        self._cookie_names = cookie_names
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def resolve_session(self, token: str) -> AuthPrincipal | None:
        if not token or any(char in token for char in ";\r\n"):
            raise AuthVerificationError("Invalid session token")

        cookie_header = "; ".join(f"{name}={token}" for name in self._cookie_names)
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self._session_path, headers={"Cookie": cookie_header})
        except httpx.HTTPError as exc:
            raise IdentityProviderUnavailable("Identity provider request failed") from exc

        if response.status_code in (401, 403):
            return None
        if response.status_code != 200:
            raise IdentityProviderUnavailable(f"Identity provider returned status {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise IdentityProviderUnavailable("Identity provider returned an invalid body") from exc

        return self._to_principal(body)

    @staticmethod
    def _to_principal(body: Any) -> AuthPrincipal | None:
        if not isinstance(body, dict):
            return None
        user = body.get("user")
        if not isinstance(user, dict) or user.get("banned") is True:
            return None

        user_id = str(user.get("id") or "").strip()
        if not user_id:
            return None

        return AuthPrincipal(
            user_id=user_id,
            role=Role.parse(user.get("role")),
            email_verified=bool(user.get("emailVerified", False)),
        )


__all__ = ["SessionIdentityProvider"]
