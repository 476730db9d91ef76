"""Google Analytics integration record."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GAProperty(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_id: str = Field(alias="propertyId")
    display_name: str = Field(default="Unnamed Property", alias="displayName")
    parent: Optional[str] = None


class GATokens(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "Bearer"
    expiry_date: Optional[int] = None  # epoch ms
    scope: Optional[str] = None


class GAIntegration(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    connected: bool = True
    access_token: str = Field(alias="accessToken")
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    expires_at: Optional[int] = Field(default=None, alias="expiresAt")
    connected_at: str = Field(alias="connectedAt")
    properties: List[GAProperty] = []

    def is_expired(self, now_ms: int) -> bool:
        return self.expires_at is not None and self.expires_at < now_ms
