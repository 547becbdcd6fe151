from __future__ import annotations

from pydantic import Field

from ..storage.models import CamelModel, Place, ReviewOut, UserOut


class ProfileUpdate(CamelModel):
    """Editable profile fields.  Email and password are changed elsewhere
    (or not at all) and are ignored if sent."""

    name: str | None = Field(default=None, min_length=1)
    profile_picture: str | None = None


class PasswordChangeRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class AccountDeleteRequest(CamelModel):
    password: str = Field(..., min_length=1)


class MessageResponse(CamelModel):
    message: str


class UserHistory(CamelModel):
    user: UserOut
    reviews: list[ReviewOut]
    favorites: list[Place]
