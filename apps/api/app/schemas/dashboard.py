"""Dashboard page access schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.domain.routes import RouteCategory
from app.schemas.auth import Role


class PageAccess(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    path: str
    category: RouteCategory
    user_id: str
    role: Role


class PageAccessResponse(BaseModel):
    success: Literal[True] = True
    data: PageAccess
