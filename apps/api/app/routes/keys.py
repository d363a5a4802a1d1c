"""API key lifecycle routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.domain.outcomes import Failure
from app.errors import ApiError
from app.routes.dependencies import get_api_key_service, get_optional_principal
from app.schemas.api_key import (
    ApiKeyCreatedResponse,
    ApiKeyListResponse,
    ApiKeyRevokedResponse,
    ApiKeySummaryResponse,
    CreateApiKeyRequest,
    UpdateApiKeyRequest,
)
from app.schemas.auth import AuthPrincipal
from app.schemas.error import ErrorResponse
from app.services.api_keys import ApiKeyService

router = APIRouter(prefix="/keys", tags=["API Keys"])

_OWNER_ERRORS = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.get(
    "",
    response_model=ApiKeyListResponse,
    responses={401: {"model": ErrorResponse}},
)
async def list_api_keys(
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[ApiKeyService, Depends(get_api_key_service)],
) -> ApiKeyListResponse:
    result = service.list_keys(principal)
    if isinstance(result, Failure):
        raise ApiError.from_failure(result)
    return ApiKeyListResponse(data=result)


@router.post(
    "",
    response_model=ApiKeyCreatedResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_api_key(
    payload: CreateApiKeyRequest,
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[ApiKeyService, Depends(get_api_key_service)],
) -> ApiKeyCreatedResponse:
    result = service.create_key(principal, payload)
    if isinstance(result, Failure):
        raise ApiError.from_failure(result)
    return ApiKeyCreatedResponse(data=result)


@router.put(
    "/{keyId}",
    response_model=ApiKeySummaryResponse,
    responses={400: {"model": ErrorResponse}, **_OWNER_ERRORS},
)
async def update_api_key(
    key_id: Annotated[str, Path(alias="keyId")],
    payload: UpdateApiKeyRequest,
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[ApiKeyService, Depends(get_api_key_service)],
) -> ApiKeySummaryResponse:
    result = service.update_key(principal, key_id, payload)
    if isinstance(result, Failure):
        raise ApiError.from_failure(result)
    return ApiKeySummaryResponse(data=result)


@router.delete(
    "/{keyId}",
    response_model=ApiKeyRevokedResponse,
    responses=_OWNER_ERRORS,
)
async def revoke_api_key(
    key_id: Annotated[str, Path(alias="keyId")],
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[ApiKeyService, Depends(get_api_key_service)],
) -> ApiKeyRevokedResponse:
    result = service.revoke_key(principal, key_id)
    if isinstance(result, Failure):
        raise ApiError.from_failure(result)
    return ApiKeyRevokedResponse(data=result)
