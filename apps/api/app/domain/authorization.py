"""Authorization guard for roles and API key scopes.

Role checks are set membership, not a hierarchy: ADMIN only satisfies a
requirement that lists ADMIN. Call sites spell out every acceptable role.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from app.schemas.auth import AuthPrincipal, Role


class DenialReason(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"


@dataclass(frozen=True, slots=True)
class Granted:
    pass


@dataclass(frozen=True, slots=True)
class Denied:
    reason: DenialReason
    message: str

    @property
    def status_code(self) -> int:
        return 401 if self.reason is DenialReason.UNAUTHENTICATED else 403


AuthorizationResult = Granted | Denied

_UNAUTHENTICATED = Denied(DenialReason.UNAUTHENTICATED, "Unauthorized")
_FORBIDDEN_ROLE = Denied(DenialReason.FORBIDDEN, "Forbidden")
_FORBIDDEN_SCOPE = Denied(DenialReason.FORBIDDEN, "API key lacks required permissions")


def acceptable_roles(requirement: Role | Iterable[Role]) -> frozenset[Role]:
    if isinstance(requirement, Role):
        return frozenset({requirement})
    return frozenset(requirement)


def authorize(principal: AuthPrincipal | None, requirement: Role | Iterable[Role]) -> AuthorizationResult:
    if principal is None:
        return _UNAUTHENTICATED
    if principal.role not in acceptable_roles(requirement):
        return _FORBIDDEN_ROLE
    return Granted()


def has_role(principal: AuthPrincipal | None, requirement: Role | Iterable[Role]) -> bool:
    return isinstance(authorize(principal, requirement), Granted)


def authorize_scopes(
    *,
    granted: Iterable[str] | None,
    required: Iterable[str],
    unrestricted: bool = False,
) -> AuthorizationResult:
    """Check a key's scope set; ``granted=None`` means no key was presented."""
    if unrestricted:
        return Granted()
    if granted is None:
        return _UNAUTHENTICATED
    if set(required) - set(granted):
        return _FORBIDDEN_SCOPE
    return Granted()


__all__ = [
    "AuthorizationResult",
    "Denied",
    "DenialReason",
    "Granted",
    "acceptable_roles",
    "authorize",
    "authorize_scopes",
    "has_role",
]
