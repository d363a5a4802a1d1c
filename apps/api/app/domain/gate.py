"""Per-request gating decision.

The gate only looks at the path and at whether a session cookie is present.
Session validity is resolved later by the identity provider inside the
handler, so this module performs no I/O and never raises.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import urlencode

from app.domain.routes import DEFAULT_ROUTE_TABLE, RouteCategory, RouteTable, classify, is_static_asset

ROLE_HINT_HEADER = "x-requires-role"


@dataclass(frozen=True, slots=True)
class Continue:
    pass


@dataclass(frozen=True, slots=True)
class Redirect:
    location: str


@dataclass(frozen=True, slots=True)
class ContinueWithHeader:
    name: str
    value: str


GateDecision = Continue | Redirect | ContinueWithHeader


@dataclass(frozen=True, slots=True)
class GatePolicy:
    session_cookie_names: tuple[str, ...]
    sign_in_path: str = "/sign-in"
    app_landing_path: str = "/app"
    table: RouteTable = field(default=DEFAULT_ROUTE_TABLE)


def find_session_token(cookies: object, names: tuple[str, ...]) -> str | None:
    """Return the first non-empty cookie value among ``names``, in order."""
    if not isinstance(cookies, Mapping):
        return None
    for name in names:
        value = cookies.get(name)
        if isinstance(value, str) and value:
            return value
    return None


def sign_in_redirect(policy: GatePolicy, callback_path: str) -> Redirect:
    return Redirect(location=f"{policy.sign_in_path}?{urlencode({'callbackUrl': callback_path})}")


def evaluate_gate(path: object, cookies: object, policy: GatePolicy) -> GateDecision:
    if not isinstance(path, str):
        # Unparseable input is treated as an anonymous request for the root.
        path, cookies = "", None

    if is_static_asset(path, policy.table):
        return Continue()

    classification = classify(path, policy.table)
    has_session = find_session_token(cookies, policy.session_cookie_names) is not None

    if not has_session and classification.requires_session:
        return sign_in_redirect(policy, path)

    if has_session and classification.category is RouteCategory.AUTH_ENTRY:
        return Redirect(location=policy.app_landing_path)

    if has_session and classification.is_restricted and classification.required_role is not None:
        return ContinueWithHeader(name=ROLE_HINT_HEADER, value=classification.required_role.value)

    return Continue()


__all__ = [
    "ROLE_HINT_HEADER",
    "Continue",
    "ContinueWithHeader",
    "GateDecision",
    "GatePolicy",
    "Redirect",
    "evaluate_gate",
    "find_session_token",
    "sign_in_redirect",
]
