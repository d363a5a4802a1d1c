"""Request gate middleware."""

from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from app.core.logging_safety import safe_log_identifier
from app.domain.gate import ContinueWithHeader, GatePolicy, Redirect, evaluate_gate

logger = logging.getLogger(__name__)


class RequestGateMiddleware(BaseHTTPMiddleware):
    """Applies the cookie-presence gate to every request before routing."""

    def __init__(self, app: ASGIApp, policy: GatePolicy) -> None:
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        decision = evaluate_gate(path, request.cookies, self.policy)

        if isinstance(decision, Redirect):
            logger.info(
                "gate.redirect path_id=%s location=%s",
                safe_log_identifier(path, prefix="path"),
                decision.location.split("?", 1)[0],
            )
            return RedirectResponse(url=decision.location, status_code=307)

        if isinstance(decision, ContinueWithHeader):
            request.state.required_role = decision.value
            response = await call_next(request)
            response.headers[decision.name] = decision.value
            return response

        return await call_next(request)
