"""Admin routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.domain.outcomes import Failure
from app.errors import ApiError
from app.routes.dependencies import get_global_key_service, get_optional_principal
from app.schemas.api_key import GlobalApiKeyResponse
from app.schemas.auth import AuthPrincipal
from app.schemas.error import ErrorResponse
from app.services.global_key import GlobalKeyService

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/global-key",
    response_model=GlobalApiKeyResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def get_global_key(
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
    service: Annotated[GlobalKeyService, Depends(get_global_key_service)],
) -> GlobalApiKeyResponse:
    result = service.get_global_key(principal)
    if isinstance(result, Failure):
        raise ApiError.from_failure(result)
    return GlobalApiKeyResponse(data=result)
