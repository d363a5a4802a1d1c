"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.domain.gate import GatePolicy
from app.domain.routes import DEFAULT_ROUTE_TABLE
from app.errors import ApiError
from app.middleware import RequestGateMiddleware
from app.repositories.memory import InMemoryStore
from app.routes import admin_router, dashboard_router, keys_router, whoami_router
from app.schemas.error import ErrorBody, ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(error=ErrorBody(code=code, message=message))
    return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="TurboZap Access API", version="1.0.0")
    app.state.store = InMemoryStore()

    app.add_middleware(
        RequestGateMiddleware,
        policy=GatePolicy(
            session_cookie_names=settings.session_cookie_names,
            sign_in_path=settings.sign_in_path,
            app_landing_path=settings.app_landing_path,
            table=DEFAULT_ROUTE_TABLE,
        ),
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(
            "request.invalid method=%s path=%s errors=%d",
            request.method,
            request.url.path,
            len(exc.errors()),
        )
        return _error_response(400, "VALIDATION_ERROR", "Invalid request payload")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.failed method=%s path=%s", request.method, request.url.path)
        return _error_response(500, "INTERNAL_ERROR", "Internal server error")

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    api_prefix = "/api"
    app.include_router(keys_router, prefix=api_prefix)
    app.include_router(admin_router, prefix=api_prefix)
    app.include_router(whoami_router, prefix=api_prefix)
    app.include_router(dashboard_router)

    return app


app = create_app()
