"""Authentication schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "USER"
    DEVELOPER = "DEVELOPER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: object) -> "Role":
        """Normalize provider role strings; unknown or missing roles degrade to USER."""
        text = str(value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            return cls.USER


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by business services."""

    user_id: str = Field(min_length=1)
    role: Role = Role.USER
    email_verified: bool = False
