"""Authorization guard and permission catalogue tests."""

from __future__ import annotations

import unittest

from app.domain.authorization import (
    Denied,
    DenialReason,
    Granted,
    authorize,
    authorize_scopes,
    has_role,
)
from app.domain.permissions import (
    KNOWN_PERMISSIONS,
    normalize_permissions,
    role_permissions,
    ungranted_permissions,
    unknown_permissions,
)
from app.errors import ApiError
from app.schemas.auth import AuthPrincipal, Role


def _principal(role: Role) -> AuthPrincipal:
    return AuthPrincipal(user_id=f"user-{role.value.lower()}", role=role)


class AuthorizeTests(unittest.TestCase):
    def test_missing_principal_is_unauthenticated(self) -> None:
        decision = authorize(None, Role.USER)
        self.assertIsInstance(decision, Denied)
        self.assertEqual(decision.reason, DenialReason.UNAUTHENTICATED)
        self.assertEqual(decision.status_code, 401)

    def test_role_membership_grants(self) -> None:
        self.assertEqual(authorize(_principal(Role.ADMIN), Role.ADMIN), Granted())
        self.assertEqual(authorize(_principal(Role.DEVELOPER), {Role.DEVELOPER, Role.ADMIN}), Granted())
        self.assertEqual(authorize(_principal(Role.USER), [Role.USER]), Granted())

    def test_wrong_role_is_forbidden_not_unauthenticated(self) -> None:
        decision = authorize(_principal(Role.USER), {Role.ADMIN})
        self.assertIsInstance(decision, Denied)
        self.assertEqual(decision.reason, DenialReason.FORBIDDEN)
        self.assertEqual(decision.status_code, 403)

    def test_no_implicit_hierarchy(self) -> None:
        self.assertIsInstance(authorize(_principal(Role.ADMIN), Role.DEVELOPER), Denied)
        self.assertIsInstance(authorize(_principal(Role.ADMIN), {Role.USER}), Denied)
        self.assertTrue(has_role(_principal(Role.ADMIN), {Role.DEVELOPER, Role.ADMIN}))

    def test_empty_requirement_denies_everyone(self) -> None:
        for role in Role:
            with self.subTest(role=role):
                self.assertIsInstance(authorize(_principal(role), set()), Denied)

    def test_denial_maps_to_http_envelope(self) -> None:
        unauthenticated = ApiError.from_denial(authorize(None, Role.ADMIN))
        self.assertEqual(unauthenticated.status_code, 401)
        self.assertEqual(unauthenticated.payload.error.code, "UNAUTHORIZED")

        forbidden = ApiError.from_denial(authorize(_principal(Role.USER), Role.ADMIN))
        self.assertEqual(forbidden.status_code, 403)
        self.assertEqual(
            forbidden.payload.model_dump(),
            {"success": False, "error": {"code": "FORBIDDEN", "message": "Forbidden"}},
        )


class ScopeAuthorizationTests(unittest.TestCase):
    def test_scope_subset_required(self) -> None:
        granted = ("instance:read", "message:send")
        self.assertEqual(authorize_scopes(granted=granted, required=["instance:read"]), Granted())
        self.assertEqual(authorize_scopes(granted=granted, required=[]), Granted())

        decision = authorize_scopes(granted=granted, required=["instance:read", "logs:read"])
        self.assertIsInstance(decision, Denied)
        self.assertEqual(decision.reason, DenialReason.FORBIDDEN)

    def test_unrestricted_caller_is_granted(self) -> None:
        self.assertEqual(authorize_scopes(granted=(), required=["user:ban"], unrestricted=True), Granted())

    def test_no_key_is_unauthenticated(self) -> None:
        decision = authorize_scopes(granted=None, required=[])
        self.assertIsInstance(decision, Denied)
        self.assertEqual(decision.reason, DenialReason.UNAUTHENTICATED)


class PermissionCatalogueTests(unittest.TestCase):
    def test_role_grants(self) -> None:
        self.assertEqual(role_permissions(Role.ADMIN), KNOWN_PERMISSIONS)
        self.assertIn("logs:read", role_permissions(Role.DEVELOPER))
        self.assertIn("settings:update", role_permissions(Role.DEVELOPER))
        self.assertNotIn("user:ban", role_permissions(Role.DEVELOPER))
        self.assertNotIn("logs:read", role_permissions(Role.USER))
        self.assertNotIn("settings:update", role_permissions(Role.USER))
        self.assertIn("apiKey:create", role_permissions(Role.USER))

    def test_normalize_dedupes_and_keeps_first_seen_order(self) -> None:
        self.assertEqual(
            normalize_permissions(["message:send", " instance:read ", "message:send", ""]),
            ["message:send", "instance:read"],
        )

    def test_unknown_and_ungranted(self) -> None:
        self.assertEqual(unknown_permissions(["instance:read", "instance:explode"]), ["instance:explode"])
        self.assertEqual(ungranted_permissions(Role.USER, ["instance:read", "logs:read"]), ["logs:read"])
        self.assertEqual(ungranted_permissions(Role.ADMIN, ["user:impersonate"]), [])

    def test_role_parse_is_lenient(self) -> None:
        self.assertEqual(Role.parse("admin"), Role.ADMIN)
        self.assertEqual(Role.parse(" Developer "), Role.DEVELOPER)
        self.assertEqual(Role.parse("owner"), Role.USER)
        self.assertEqual(Role.parse(None), Role.USER)
