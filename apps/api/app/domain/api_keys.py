"""API key secret handling and usability rules."""

from __future__ import annotations

import hashlib
import secrets
from datetime import UTC, datetime
from typing import Protocol

KEY_PREFIX = "tzk_"
_HINT_LENGTH = 4


class _KeyLifetime(Protocol):
    revoked_at: datetime | None
    expires_at: datetime | None


def generate_secret() -> str:
    return f"{KEY_PREFIX}{secrets.token_urlsafe(32)}"


def hash_secret(secret: str) -> str:
    """Deterministic digest used as the storage lookup key for presented secrets."""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def secret_hint(secret: str) -> str:
    return secret[-_HINT_LENGTH:]


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so comparisons never mix naive and aware values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_usable(key: _KeyLifetime, now: datetime | None = None) -> bool:
    """A key is usable iff it is not revoked and its expiry is strictly in the future."""
    if key.revoked_at is not None:
        return False
    if key.expires_at is None:
        return True
    current = as_utc(now) if now is not None else datetime.now(UTC)
    return as_utc(key.expires_at) > current


__all__ = ["KEY_PREFIX", "as_utc", "generate_secret", "hash_secret", "is_usable", "secret_hint"]
