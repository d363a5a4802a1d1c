"""Identity provider adapter and provider selection tests."""

from __future__ import annotations

import asyncio
import os
import unittest

import httpx
from fastapi.testclient import TestClient

from app.adapters.auth.base import AuthVerificationError, IdentityProviderUnavailable
from app.adapters.auth.mock_auth import MockIdentityProvider
from app.adapters.auth.session_auth import SessionIdentityProvider
from app.core.config import Settings, get_settings
from app.main import create_app
from app.routes.dependencies import get_identity_provider
from app.schemas.auth import AuthPrincipal, Role

COOKIE_NAMES = ("__Secure-turbozap.session_token", "turbozap.session_token")


def _provider(handler) -> SessionIdentityProvider:
    return SessionIdentityProvider(
        base_url="http://auth.local/",
        session_path="/api/auth/get-session",
        cookie_names=COOKIE_NAMES,
        timeout_seconds=1.0,
        transport=httpx.MockTransport(handler),
    )


class MockIdentityProviderTests(unittest.TestCase):
    def test_token_formats(self) -> None:
        provider = MockIdentityProvider()
        self.assertEqual(
            asyncio.run(provider.resolve_session("test:user-1")),
            AuthPrincipal(user_id="user-1", role=Role.USER),
        )
        self.assertEqual(
            asyncio.run(provider.resolve_session("test:user-2:admin:verified")),
            AuthPrincipal(user_id="user-2", role=Role.ADMIN, email_verified=True),
        )

    def test_invalid_tokens_raise(self) -> None:
        provider = MockIdentityProvider()
        for token in ("garbage", "test:", "prod:user-1", "test:a:b:c:d"):
            with self.subTest(token=token):
                with self.assertRaises(AuthVerificationError):
                    asyncio.run(provider.resolve_session(token))


class SessionIdentityProviderTests(unittest.TestCase):
    def test_forwards_token_under_every_cookie_name(self) -> None:
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["cookie"] = request.headers["cookie"]
            return httpx.Response(
                200,
                json={
                    "session": {"id": "s-1"},
                    "user": {"id": "user-9", "role": "developer", "emailVerified": True},
                },
            )

        principal = asyncio.run(_provider(handler).resolve_session("tok.sig"))

        self.assertEqual(principal, AuthPrincipal(user_id="user-9", role=Role.DEVELOPER, email_verified=True))
        self.assertEqual(seen["url"], "http://auth.local/api/auth/get-session")
        self.assertEqual(
            seen["cookie"],
            "__Secure-turbozap.session_token=tok.sig; turbozap.session_token=tok.sig",
        )

    def test_null_session_unauthorized_and_banned_resolve_to_none(self) -> None:
        responses = (
            httpx.Response(200, json=None),
            httpx.Response(401, json={"message": "Unauthorized"}),
            httpx.Response(200, json={"user": {"id": "user-1", "banned": True}}),
            httpx.Response(200, json={"user": {"id": ""}}),
        )
        for response in responses:
            with self.subTest(status=response.status_code, body=response.text):
                provider = _provider(lambda request, response=response: response)
                self.assertIsNone(asyncio.run(provider.resolve_session("tok")))

    def test_unknown_role_degrades_to_user(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={"user": {"id": "u", "role": "owner"}}))
        principal = asyncio.run(provider.resolve_session("tok"))
        self.assertEqual(principal.role, Role.USER)
        self.assertFalse(principal.email_verified)

    def test_provider_outages_raise_unavailable(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        handlers = (
            refuse,
            lambda request: httpx.Response(502, text="bad gateway"),
            lambda request: httpx.Response(200, text="<html>"),
        )
        for handler in handlers:
            with self.subTest(handler=handler):
                with self.assertRaises(IdentityProviderUnavailable):
                    asyncio.run(_provider(handler).resolve_session("tok"))

    def test_cookie_injection_is_rejected_before_any_request(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=None)

        with self.assertRaises(AuthVerificationError):
            asyncio.run(_provider(handler).resolve_session("tok; other=1"))
        self.assertEqual(calls, [])


class ProviderSelectionTests(unittest.TestCase):
    def test_session_provider_is_default(self) -> None:
        settings = Settings(_env_file=None, auth_provider="session", identity_provider_url="http://auth.example")
        self.assertIsInstance(get_identity_provider(settings), SessionIdentityProvider)

    def test_mock_provider_selected(self) -> None:
        settings = Settings(_env_file=None, auth_provider="mock")
        self.assertIsInstance(get_identity_provider(settings), MockIdentityProvider)

    def test_session_cookie_names_follow_prefix(self) -> None:
        settings = Settings(_env_file=None, cookie_prefix="acme")
        self.assertEqual(settings.session_cookie_names, ("__Secure-acme.session_token", "acme.session_token"))


class _UnavailableProvider(MockIdentityProvider):
    async def resolve_session(self, token: str) -> AuthPrincipal | None:
        raise IdentityProviderUnavailable("down")


class ProviderOutageApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self._old_provider = os.environ.get("TURBOZAP_AUTH_PROVIDER")
        os.environ["TURBOZAP_AUTH_PROVIDER"] = "mock"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        if self._old_provider is None:
            os.environ.pop("TURBOZAP_AUTH_PROVIDER", None)
        else:
            os.environ["TURBOZAP_AUTH_PROVIDER"] = self._old_provider
        get_settings.cache_clear()

    def test_outage_is_500_not_401(self) -> None:
        app = create_app()
        app.dependency_overrides[get_identity_provider] = lambda: _UnavailableProvider()
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/keys", headers={"Authorization": "Bearer test:user-1"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"]["code"], "INTERNAL_ERROR")
