"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    auth_provider: Literal["mock", "session"] = "session"
    identity_provider_url: str = "http://localhost:3000"
    identity_provider_session_path: str = "/api/auth/get-session"
    identity_provider_timeout_seconds: float = Field(default=5.0, gt=0)
    cookie_prefix: str = Field(default="turbozap", min_length=1)
    global_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("TURBOZAP_GLOBAL_API_KEY", "API_KEY", "NEXT_PUBLIC_API_KEY"),
    )
    sign_in_path: str = "/sign-in"
    app_landing_path: str = "/app"

    model_config = SettingsConfigDict(env_prefix="TURBOZAP_", extra="ignore")

    @property
    def session_cookie_names(self) -> tuple[str, ...]:
        """Session cookie names in lookup order, secure variant first."""
        plain = f"{self.cookie_prefix}.session_token"
        return (f"__Secure-{plain}", plain)

    def configured_global_api_key(self) -> str | None:
        if self.global_api_key is None:
            return None
        value = self.global_api_key.get_secret_value().strip()
        return value or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
