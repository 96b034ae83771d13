from typing import Optional

from pydantic import EmailStr, Field

from .base import CamelModel


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    avatar: Optional[str] = Field(default=None, max_length=500)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UpdateProfileRequest(CamelModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    avatar: Optional[str] = Field(default=None, max_length=500)
