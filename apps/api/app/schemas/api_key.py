"""API key request and response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateApiKeyRequest(_CamelModel):
    name: str | None = Field(default=None, max_length=120)
    permissions: list[str] = Field(default_factory=list)
    expires_at: datetime | None = None


class UpdateApiKeyRequest(_CamelModel):
    """Partial update; omitted fields keep their value and an explicit null ``expiresAt`` clears expiry."""

    name: str | None = Field(default=None, max_length=120)
    expires_at: datetime | None = None


class ApiKeyCreated(_CamelModel):
    id: str
    name: str
    key: str
    permissions: list[str]
    expires_at: datetime | None
    created_at: datetime


class ApiKeySummary(_CamelModel):
    id: str
    name: str
    key_preview: str
    permissions: list[str]
    usable: bool
    last_used_at: datetime | None
    expires_at: datetime | None
    created_at: datetime
    revoked_at: datetime | None


class ApiKeyRevoked(_CamelModel):
    id: str


class GlobalApiKey(_CamelModel):
    key: str


class ApiKeyIdentity(_CamelModel):
    key_id: str | None
    owner_user_id: str | None
    is_global: bool
    permissions: list[str]


class ApiKeyCreatedResponse(BaseModel):
    success: Literal[True] = True
    data: ApiKeyCreated


class ApiKeyListResponse(BaseModel):
    success: Literal[True] = True
    data: list[ApiKeySummary]


class ApiKeySummaryResponse(BaseModel):
    success: Literal[True] = True
    data: ApiKeySummary


class ApiKeyRevokedResponse(BaseModel):
    success: Literal[True] = True
    data: ApiKeyRevoked


class GlobalApiKeyResponse(BaseModel):
    success: Literal[True] = True
    data: GlobalApiKey


class ApiKeyIdentityResponse(BaseModel):
    success: Literal[True] = True
    data: ApiKeyIdentity
