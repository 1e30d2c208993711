"""Auth-related data models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from finnotech.scopes import GrantType


class TokenResponse(BaseModel):
    """``result`` object of the Finnotech token endpoint response."""
    value: str
    refresh_token: str = Field(alias="refreshToken")
    life_time: int = Field(alias="lifeTime")
    scopes: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class TokenRecord(BaseModel):
    """A freshly issued token, handed to the delegate for storage."""
    access_token: str
    refresh_token: str
    life_time: int
    scopes: list[str]
    token_type: GrantType

    model_config = {"frozen": True}
