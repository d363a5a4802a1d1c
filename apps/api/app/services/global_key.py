"""Admin-only read of the configuration-sourced global API key."""

from app.core.config import Settings
from app.domain.authorization import Denied, DenialReason, authorize
from app.domain.outcomes import FORBIDDEN, UNAUTHENTICATED, Failure, FailureKind
from app.schemas.api_key import GlobalApiKey
from app.schemas.auth import AuthPrincipal, Role

_NOT_CONFIGURED = Failure(FailureKind.NOT_FOUND, "Global API key not configured")


class GlobalKeyService:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def get_global_key(self, principal: AuthPrincipal | None) -> GlobalApiKey | Failure:
        decision = authorize(principal, Role.ADMIN)
        if isinstance(decision, Denied):
            return UNAUTHENTICATED if decision.reason is DenialReason.UNAUTHENTICATED else FORBIDDEN

        key = self._settings.configured_global_api_key()
        if key is None:
            return _NOT_CONFIGURED
        return GlobalApiKey(key=key)
