"""Role permission catalogue.

Scopes are written ``resource:action``. The catalogue is static and the
per-role grants never change at runtime; API key permissions are validated
against both.
"""

from app.schemas.auth import Role

_STATEMENTS: dict[str, tuple[str, ...]] = {
    "instance": ("create", "read", "update", "delete", "connect", "disconnect"),
    "webhook": ("create", "read", "update", "delete"),
    "message": ("send", "read"),
    "user": ("read", "update", "delete", "ban", "impersonate"),
    "settings": ("read", "update"),
    "apiKey": ("create", "read", "revoke"),
    "logs": ("read",),
}


def _scopes(statements: dict[str, tuple[str, ...]]) -> frozenset[str]:
    return frozenset(f"{resource}:{action}" for resource, actions in statements.items() for action in actions)


KNOWN_PERMISSIONS: frozenset[str] = _scopes(_STATEMENTS)

_USER_GRANTS = _scopes(
    {
        "instance": _STATEMENTS["instance"],
        "webhook": _STATEMENTS["webhook"],
        "message": _STATEMENTS["message"],
        "settings": ("read",),
        "apiKey": _STATEMENTS["apiKey"],
    }
)

_ROLE_GRANTS: dict[Role, frozenset[str]] = {
    Role.USER: _USER_GRANTS,
    Role.DEVELOPER: _USER_GRANTS | {"settings:update", "logs:read"},
    Role.ADMIN: KNOWN_PERMISSIONS,
}


def role_permissions(role: Role) -> frozenset[str]:
    return _ROLE_GRANTS.get(role, frozenset())


def normalize_permissions(permissions: list[str] | tuple[str, ...]) -> list[str]:
    """Strip and de-duplicate scopes, keeping first-seen order."""
    seen: dict[str, None] = {}
    for permission in permissions:
        text = permission.strip()
        if text:
            seen.setdefault(text, None)
    return list(seen)


def unknown_permissions(permissions: list[str]) -> list[str]:
    return [permission for permission in permissions if permission not in KNOWN_PERMISSIONS]


def ungranted_permissions(role: Role, permissions: list[str]) -> list[str]:
    granted = role_permissions(role)
    return [permission for permission in permissions if permission not in granted]
