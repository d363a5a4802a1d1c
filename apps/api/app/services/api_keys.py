"""API key lifecycle service layer."""

from __future__ import annotations

from datetime import UTC, datetime
import logging

from app.core.logging_safety import mask_secret_hint, safe_log_identifier
from app.domain.api_keys import KEY_PREFIX, as_utc, generate_secret, hash_secret, is_usable, secret_hint
from app.domain.outcomes import FORBIDDEN, UNAUTHENTICATED, Failure, FailureKind
from app.domain.permissions import normalize_permissions, ungranted_permissions, unknown_permissions
from app.repositories.memory import ApiKeyRecord, DuplicateApiKeyError, InMemoryStore
from app.schemas.api_key import (
    ApiKeyCreated,
    ApiKeyRevoked,
    ApiKeySummary,
    CreateApiKeyRequest,
    UpdateApiKeyRequest,
)
from app.schemas.auth import AuthPrincipal

logger = logging.getLogger(__name__)

DEFAULT_KEY_NAME = "API Key"

_NOT_FOUND = Failure(FailureKind.NOT_FOUND, "API key not found")
_GLOBAL_KEY_IMMUTABLE = Failure(FailureKind.FORBIDDEN, "Global API keys are managed by server configuration")
_EXCESS_PERMISSIONS = Failure(FailureKind.FORBIDDEN, "Requested permissions exceed your role")
_EXPIRY_IN_PAST = Failure(FailureKind.VALIDATION, "expiresAt must be in the future")
_EMPTY_NAME = Failure(FailureKind.VALIDATION, "name must not be empty")
_DUPLICATE = Failure(FailureKind.CONFLICT, "API key already exists")


class ApiKeyService:
    """Owner-scoped create/list/update/revoke operations.

    Expected outcomes come back as ``Failure`` values; only storage faults raise.
    ADMIN principals get no ownership bypass here.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_keys(self, principal: AuthPrincipal | None) -> list[ApiKeySummary] | Failure:
        if principal is None:
            return UNAUTHENTICATED
        return [self._to_summary(record) for record in self._store.list_api_keys_for_owner(principal.user_id)]

    def create_key(self, principal: AuthPrincipal | None, payload: CreateApiKeyRequest) -> ApiKeyCreated | Failure:
        if principal is None:
            return UNAUTHENTICATED

        permissions = normalize_permissions(payload.permissions)
        unknown = unknown_permissions(permissions)
        if unknown:
            return Failure(FailureKind.VALIDATION, f"Unknown permissions: {', '.join(sorted(unknown))}")
        if ungranted_permissions(principal.role, permissions):
            return _EXCESS_PERMISSIONS

        now = datetime.now(UTC)
        expires_at = as_utc(payload.expires_at) if payload.expires_at is not None else None
        if expires_at is not None and expires_at <= now:
            return _EXPIRY_IN_PAST

        name = (payload.name or "").strip() or DEFAULT_KEY_NAME
        secret = generate_secret()
        try:
            record = self._store.create_api_key(
                owner_user_id=principal.user_id,
                name=name,
                key_hash=hash_secret(secret),
                key_hint=secret_hint(secret),
                permissions=tuple(permissions),
                expires_at=expires_at,
            )
        except DuplicateApiKeyError:
            logger.warning(
                "api_key.create_conflict principal_id=%s",
                safe_log_identifier(principal.user_id, prefix="pid"),
            )
            return _DUPLICATE

        logger.info(
            "api_key.created key_id=%s principal_id=%s permissions=%d",
            safe_log_identifier(record.id, prefix="kid"),
            safe_log_identifier(principal.user_id, prefix="pid"),
            len(record.permissions),
        )
        return ApiKeyCreated(
            id=record.id,
            name=record.name,
            key=secret,
            permissions=list(record.permissions),
            expires_at=record.expires_at,
            created_at=record.created_at,
        )

    def update_key(
        self,
        principal: AuthPrincipal | None,
        key_id: str,
        payload: UpdateApiKeyRequest,
    ) -> ApiKeySummary | Failure:
        owned = self._load_owned(principal, key_id)
        if isinstance(owned, Failure):
            return owned

        changes: dict[str, object] = {}
        if payload.name is not None:
            name = payload.name.strip()
            if not name:
                return _EMPTY_NAME
            changes["name"] = name
        if "expires_at" in payload.model_fields_set:
            changes["expires_at"] = as_utc(payload.expires_at) if payload.expires_at is not None else None

        # Omitted fields are merged by the store so concurrent partial updates both land.
        updated = self._store.update_api_key(key_id, **changes)
        if updated is None:
            return _NOT_FOUND
        return self._to_summary(updated)

    def revoke_key(self, principal: AuthPrincipal | None, key_id: str) -> ApiKeyRevoked | Failure:
        owned = self._load_owned(principal, key_id)
        if isinstance(owned, Failure):
            return owned

        revoked = self._store.revoke_api_key(key_id, revoked_at=datetime.now(UTC))
        if revoked is None:
            return _NOT_FOUND

        logger.info(
            "api_key.revoked key_id=%s principal_id=%s",
            safe_log_identifier(key_id, prefix="kid"),
            safe_log_identifier(owned.owner_user_id, prefix="pid"),
        )
        return ApiKeyRevoked(id=revoked.id)

    def _load_owned(self, principal: AuthPrincipal | None, key_id: str) -> ApiKeyRecord | Failure:
        if principal is None:
            return UNAUTHENTICATED

        record = self._store.get_api_key(key_id)
        if record is None:
            return _NOT_FOUND
        if record.owner_user_id is None:
            return _GLOBAL_KEY_IMMUTABLE
        if record.owner_user_id != principal.user_id:
            logger.warning(
                "api_key.ownership_denied key_id=%s principal_id=%s",
                safe_log_identifier(key_id, prefix="kid"),
                safe_log_identifier(principal.user_id, prefix="pid"),
            )
            return FORBIDDEN
        return record

    @staticmethod
    def _to_summary(record: ApiKeyRecord) -> ApiKeySummary:
        return ApiKeySummary(
            id=record.id,
            name=record.name,
            key_preview=mask_secret_hint(record.key_hint, prefix=KEY_PREFIX),
            permissions=list(record.permissions),
            usable=is_usable(record),
            last_used_at=record.last_used_at,
            expires_at=record.expires_at,
            created_at=record.created_at,
            revoked_at=record.revoked_at,
        )
