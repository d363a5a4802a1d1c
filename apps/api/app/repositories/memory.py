"""In-memory credential store used by the API and tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4


class _Unset(Enum):
    TOKEN = 0


UNSET = _Unset.TOKEN


class DuplicateApiKeyError(Exception):
    """Raised when a new record collides with an existing id or secret digest."""


@dataclass(slots=True)
class ApiKeyRecord:
    id: str
    name: str
    key_hash: str
    key_hint: str
    owner_user_id: str | None
    permissions: tuple[str, ...]
    created_at: datetime
    expires_at: datetime | None = None
    revoked_at: datetime | None = None
    last_used_at: datetime | None = None


@dataclass(slots=True)
class InMemoryStore:
    """Deterministic persistence layer; every mutation of a record holds the store lock."""

    api_keys: dict[str, ApiKeyRecord] = field(default_factory=dict)
    api_key_ids_by_hash: dict[str, str] = field(default_factory=dict)
    api_key_write_count: int = 0
    touch_failure_message: str | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def create_api_key(
        self,
        *,
        owner_user_id: str | None,
        name: str,
        key_hash: str,
        key_hint: str,
        permissions: tuple[str, ...],
        expires_at: datetime | None,
        key_id: str | None = None,
    ) -> ApiKeyRecord:
        record = ApiKeyRecord(
            id=key_id or str(uuid4()),
            name=name,
            key_hash=key_hash,
            key_hint=key_hint,
            owner_user_id=owner_user_id,
            permissions=tuple(permissions),
            created_at=datetime.now(UTC),
            expires_at=expires_at,
        )
        with self._lock:
            if record.id in self.api_keys or key_hash in self.api_key_ids_by_hash:
                raise DuplicateApiKeyError("API key already exists")
            self.api_keys[record.id] = record
            self.api_key_ids_by_hash[key_hash] = record.id
            self.api_key_write_count += 1
            return replace(record)

    def get_api_key(self, key_id: str) -> ApiKeyRecord | None:
        with self._lock:
            record = self.api_keys.get(key_id)
            return replace(record) if record is not None else None

    def find_api_key_by_hash(self, key_hash: str) -> ApiKeyRecord | None:
        with self._lock:
            key_id = self.api_key_ids_by_hash.get(key_hash)
            record = self.api_keys.get(key_id) if key_id is not None else None
            return replace(record) if record is not None else None

    def list_api_keys_for_owner(self, owner_user_id: str) -> list[ApiKeyRecord]:
        with self._lock:
            records = [replace(record) for record in self.api_keys.values() if record.owner_user_id == owner_user_id]
        records.sort(key=lambda record: record.created_at, reverse=True)
        return records

    def update_api_key(
        self,
        key_id: str,
        *,
        name: str | None = None,
        expires_at: datetime | None | _Unset = UNSET,
    ) -> ApiKeyRecord | None:
        """Apply only the given fields, merged against the record under the lock.

        ``name=None`` keeps the current name; ``expires_at=None`` clears the expiry
        while leaving it ``UNSET`` keeps it.
        """
        with self._lock:
            record = self.api_keys.get(key_id)
            if record is None:
                return None
            if name is not None:
                record.name = name
            if not isinstance(expires_at, _Unset):
                record.expires_at = expires_at
            self.api_key_write_count += 1
            return replace(record)

    def revoke_api_key(self, key_id: str, *, revoked_at: datetime) -> ApiKeyRecord | None:
        """Set ``revoked_at`` once; revoking again keeps the original instant."""
        with self._lock:
            record = self.api_keys.get(key_id)
            if record is None:
                return None
            if record.revoked_at is None:
                record.revoked_at = revoked_at
                self.api_key_write_count += 1
            return replace(record)

    def touch_api_key(self, key_id: str, *, used_at: datetime) -> None:
        if self.touch_failure_message is not None:
            message = self.touch_failure_message
            self.touch_failure_message = None
            raise RuntimeError(message)

        with self._lock:
            record = self.api_keys.get(key_id)
            if record is not None:
                record.last_used_at = used_at
