from __future__ import annotations

from pydantic import Field

from ..storage.models import CamelModel, UserOut

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


class RegisterRequest(CamelModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1)


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(CamelModel):
    status: str = "ok"
    user: UserOut
