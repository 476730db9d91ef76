"""User model as supplied by the auth provider."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


Subscription = Literal["free", "pro", "enterprise"]


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    photo_url: Optional[str] = Field(default=None, alias="photoURL")


class Profile(User):
    """A user plus what we keep about them locally."""

    subscription: Subscription = "free"

    @property
    def is_pro(self) -> bool:
        return self.subscription in ("pro", "enterprise")
