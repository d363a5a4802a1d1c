"""Programmatic caller introspection."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.domain.authorization import Denied
from app.errors import ApiError
from app.routes.dependencies import get_api_key_caller
from app.schemas.api_key import ApiKeyIdentity, ApiKeyIdentityResponse
from app.schemas.error import ErrorResponse
from app.services.api_key_auth import ApiKeyCaller, authorize_key

router = APIRouter(tags=["API Keys"])


@router.get(
    "/whoami",
    response_model=ApiKeyIdentityResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def whoami(
    caller: Annotated[ApiKeyCaller, Depends(get_api_key_caller)],
    permission: Annotated[list[str] | None, Query()] = None,
) -> ApiKeyIdentityResponse:
    decision = authorize_key(caller, permission or [])
    if isinstance(decision, Denied):
        raise ApiError.from_denial(decision)
    return ApiKeyIdentityResponse(
        data=ApiKeyIdentity(
            key_id=caller.key_id,
            owner_user_id=caller.owner_user_id,
            is_global=caller.is_global,
            permissions=list(caller.permissions),
        )
    )
