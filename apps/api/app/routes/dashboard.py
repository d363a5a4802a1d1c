"""Dashboard page access checks.

The gate's role hint header is never trusted here: the route is classified
again and the resolved principal is authorized against it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.domain.authorization import Denied, authorize
from app.domain.routes import classify_route
from app.errors import ApiError
from app.routes.dependencies import get_optional_principal
from app.schemas.auth import AuthPrincipal, Role
from app.schemas.dashboard import PageAccess, PageAccessResponse
from app.schemas.error import ErrorResponse

router = APIRouter(prefix="/app", tags=["Dashboard"])

_ALL_ROLES = frozenset(Role)

# Wherever DEVELOPER is required ADMIN is listed too; the guard never widens on its own.
_ACCEPTED_ROLES: dict[Role, frozenset[Role]] = {
    Role.ADMIN: frozenset({Role.ADMIN}),
    Role.DEVELOPER: frozenset({Role.DEVELOPER, Role.ADMIN}),
    Role.USER: _ALL_ROLES,
}

_PAGE_ERRORS = {401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}}


def _page_access(request: Request, principal: AuthPrincipal | None) -> PageAccessResponse:
    path = request.url.path
    classification = classify_route(path)
    required = classification.required_role
    accepted = _ACCEPTED_ROLES[required] if required is not None else _ALL_ROLES

    decision = authorize(principal, accepted)
    if isinstance(decision, Denied):
        raise ApiError.from_denial(decision)

    return PageAccessResponse(
        data=PageAccess(path=path, category=classification.category, user_id=principal.user_id, role=principal.role)
    )


@router.get("", response_model=PageAccessResponse, responses=_PAGE_ERRORS)
async def get_app_home(
    request: Request,
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
) -> PageAccessResponse:
    return _page_access(request, principal)


@router.get("/{page_path:path}", response_model=PageAccessResponse, responses=_PAGE_ERRORS)
async def get_app_page(
    page_path: str,
    request: Request,
    principal: Annotated[AuthPrincipal | None, Depends(get_optional_principal)],
) -> PageAccessResponse:
    return _page_access(request, principal)
