"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.auth import (
    AuthVerificationError,
    IdentityProvider,
    MockIdentityProvider,
    SessionIdentityProvider,
)
from app.core.config import Settings, get_settings
from app.core.logging_safety import safe_log_identifier
from app.domain.gate import find_session_token
from app.errors import ApiError
from app.repositories.memory import InMemoryStore
from app.schemas.auth import AuthPrincipal
from app.services.api_key_auth import ApiKeyAuthenticator, ApiKeyCaller
from app.services.api_keys import ApiKeyService
from app.services.global_key import GlobalKeyService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False, scheme_name="apiKeyAuth")
logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_identity_provider(settings: Annotated[Settings, Depends(get_settings)]) -> IdentityProvider:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "session":
        return SessionIdentityProvider(
            base_url=settings.identity_provider_url,
            session_path=settings.identity_provider_session_path,
            cookie_names=settings.session_cookie_names,
            timeout_seconds=settings.identity_provider_timeout_seconds,
        )
    return MockIdentityProvider()


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        return None
    return credentials.credentials


async def get_optional_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthPrincipal | None:
    """Resolve the session principal, or ``None`` for anonymous callers.

    Session cookies are consulted first in their configured order, then a bearer
    token. Provider outages propagate so they surface as 500s instead of 401s.
    """
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    token = find_session_token(request.cookies, settings.session_cookie_names) or _bearer_token(credentials)
    if token is None:
        return None

    try:
        principal = await provider.resolve_session(token)
    except AuthVerificationError:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        return None

    if principal is None:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=no_active_session",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        return None

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.user_id, prefix="pid"),
        principal.role.value,
    )
    request.state.auth_principal = principal
    return principal


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_api_key_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> ApiKeyService:
    return ApiKeyService(store)


def get_global_key_service(settings: Annotated[Settings, Depends(get_settings)]) -> GlobalKeyService:
    return GlobalKeyService(settings)


def get_api_key_authenticator(
    store: Annotated[InMemoryStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ApiKeyAuthenticator:
    return ApiKeyAuthenticator(store, settings.configured_global_api_key())


async def get_api_key_caller(
    request: Request,
    api_key: Annotated[str | None, Security(api_key_scheme)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    authenticator: Annotated[ApiKeyAuthenticator, Depends(get_api_key_authenticator)],
) -> ApiKeyCaller:
    """Authenticate a programmatic caller from ``X-API-Key`` or a bearer token."""
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    secret = api_key or _bearer_token(credentials)
    if not secret:
        logger.warning(
            "api_key.rejected correlation_id=%s path=%s reason=missing_api_key",
            safe_correlation_id,
            request.url.path,
        )
        raise ApiError(status_code=401, code="UNAUTHORIZED", message="API key is required")

    caller = authenticator.resolve(secret)
    if caller is None:
        logger.warning(
            "api_key.rejected correlation_id=%s path=%s reason=invalid_or_unusable_api_key",
            safe_correlation_id,
            request.url.path,
        )
        raise ApiError(status_code=401, code="UNAUTHORIZED", message="Invalid API key")

    request.state.api_key_caller = caller
    return caller
