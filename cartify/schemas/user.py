# cartify/schemas/user.py
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from cartify.schemas.base import CamelModel
from cartify.schemas.cart import CartLine


class RegisterRequest(CamelModel):
    """
    Payload for sign-up.

    Validation rules:
      - email must be a valid EmailStr (stored lowercased)
      - name cannot be empty or whitespace
    """

    name: str = Field(max_length=50)
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class ChangePasswordRequest(CamelModel):
    email: str
    current_password: str
    new_password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserPublic(CamelModel):
    """What login/register hand back about the account."""

    user_id: str
    name: str
    email: str


class UserRead(UserPublic):
    """Admin listing: everything except the password hash."""

    is_admin: bool
    is_active: bool
    cart: list[CartLine]
    created_at: datetime


class AuthResponse(CamelModel):
    token: str
    user: UserPublic


class AdminAuthResponse(AuthResponse):
    is_admin: bool
