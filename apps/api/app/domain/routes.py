"""Static URL path classification for the dashboard surface.

Classification is plain string matching on the path. Nothing here touches the
filesystem or decodes traversal segments, so arbitrary untrusted input is safe.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from app.schemas.auth import Role

_FILE_EXTENSION = re.compile(r"\.[A-Za-z0-9]{1,8}$")


class RouteCategory(str, Enum):
    PUBLIC = "PUBLIC"
    AUTH_ENTRY = "AUTH_ENTRY"
    PROTECTED = "PROTECTED"
    ADMIN = "ADMIN"
    ROLE = "ROLE"


@dataclass(frozen=True, slots=True)
class RouteClassification:
    category: RouteCategory
    required_role: Role | None = None

    @property
    def is_restricted(self) -> bool:
        return self.category in (RouteCategory.ADMIN, RouteCategory.ROLE)

    @property
    def requires_session(self) -> bool:
        return self.category in (RouteCategory.PROTECTED, RouteCategory.ADMIN, RouteCategory.ROLE)


@dataclass(frozen=True, slots=True)
class RouteTable:
    """Immutable classification rules, built once per process."""

    public_prefixes: tuple[str, ...]
    auth_entry_paths: tuple[str, ...]
    protected_root: str
    admin_prefixes: tuple[str, ...]
    role_prefixes: tuple[tuple[str, Role], ...]
    static_prefixes: tuple[str, ...]


DEFAULT_ROUTE_TABLE = RouteTable(
    public_prefixes=(
        "/",
        "/forgot-password",
        "/reset-password",
        "/verify-email",
        "/docs",
        "/api/auth",
    ),
    auth_entry_paths=("/sign-in", "/sign-up"),
    protected_root="/app",
    admin_prefixes=("/app/admin",),
    role_prefixes=(
        ("/app/api-keys", Role.DEVELOPER),
        ("/app/logs", Role.DEVELOPER),
    ),
    static_prefixes=("/_next", "/favicon", "/landing", "/static"),
)

_PUBLIC = RouteClassification(RouteCategory.PUBLIC)
_AUTH_ENTRY = RouteClassification(RouteCategory.AUTH_ENTRY)
_PROTECTED = RouteClassification(RouteCategory.PROTECTED)
_ADMIN = RouteClassification(RouteCategory.ADMIN, Role.ADMIN)


def matches_prefix(path: str, prefix: str) -> bool:
    """Segment-aware prefix match; the root prefix only matches the root itself."""
    if prefix == "/":
        return path in ("", "/")
    return path == prefix or path.startswith(f"{prefix}/")


def is_static_asset(path: str, table: RouteTable = DEFAULT_ROUTE_TABLE) -> bool:
    if any(path.startswith(prefix) for prefix in table.static_prefixes):
        return True
    last_segment = path.rsplit("/", 1)[-1]
    if not last_segment.strip("."):
        return False
    return bool(_FILE_EXTENSION.search(last_segment))


def classify(path: str, table: RouteTable = DEFAULT_ROUTE_TABLE) -> RouteClassification:
    if is_static_asset(path, table):
        return _PUBLIC
    return classify_route(path, table)


def classify_route(path: str, table: RouteTable = DEFAULT_ROUTE_TABLE) -> RouteClassification:
    """Classify by the route tables alone, without treating file-like paths as assets."""
    if any(matches_prefix(path, prefix) for prefix in table.public_prefixes):
        return _PUBLIC
    if path in table.auth_entry_paths:
        return _AUTH_ENTRY
    # Admin and role prefixes only count inside the protected root.
    if not matches_prefix(path, table.protected_root):
        return _PUBLIC
    if any(matches_prefix(path, prefix) for prefix in table.admin_prefixes):
        return _ADMIN
    for prefix, role in table.role_prefixes:
        if matches_prefix(path, prefix):
            return RouteClassification(RouteCategory.ROLE, role)
    return _PROTECTED


__all__ = [
    "DEFAULT_ROUTE_TABLE",
    "RouteCategory",
    "RouteClassification",
    "RouteTable",
    "classify",
    "classify_route",
    "is_static_asset",
    "matches_prefix",
]
