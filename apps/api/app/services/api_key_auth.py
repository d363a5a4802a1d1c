"""Resolve presented ``X-API-Key`` secrets into callers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
import logging
from secrets import compare_digest

from app.core.logging_safety import safe_log_identifier
from app.domain.api_keys import hash_secret, is_usable
from app.domain.authorization import AuthorizationResult, authorize_scopes
from app.repositories.memory import InMemoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiKeyCaller:
    key_id: str | None
    owner_user_id: str | None
    permissions: tuple[str, ...]
    is_global: bool = False


class ApiKeyAuthenticator:
    """Checks the configured global key first, then stored user keys."""

    def __init__(self, store: InMemoryStore, global_api_key: str | None) -> None:
        self._store = store
        self._global_api_key = global_api_key

    def resolve(self, secret: str | None, *, now: datetime | None = None) -> ApiKeyCaller | None:
        if not secret:
            return None

        if self._global_api_key and compare_digest(secret.encode("utf-8"), self._global_api_key.encode("utf-8")):
            return ApiKeyCaller(key_id=None, owner_user_id=None, permissions=(), is_global=True)

        current = now or datetime.now(UTC)
        record = self._store.find_api_key_by_hash(hash_secret(secret))
        if record is None or not is_usable(record, current):
            return None

        self._touch(record.id, current)
        return ApiKeyCaller(
            key_id=record.id,
            owner_user_id=record.owner_user_id,
            permissions=record.permissions,
        )

    def _touch(self, key_id: str, used_at: datetime) -> None:
        # last_used_at is advisory; a failed write never fails the request.
        try:
            self._store.touch_api_key(key_id, used_at=used_at)
        except Exception:
            logger.warning(
                "api_key.touch_failed key_id=%s",
                safe_log_identifier(key_id, prefix="kid"),
                exc_info=True,
            )


def authorize_key(caller: ApiKeyCaller | None, required: list[str] | tuple[str, ...]) -> AuthorizationResult:
    if caller is None:
        return authorize_scopes(granted=None, required=required)
    return authorize_scopes(granted=caller.permissions, required=required, unrestricted=caller.is_global)


__all__ = ["ApiKeyAuthenticator", "ApiKeyCaller", "authorize_key"]
