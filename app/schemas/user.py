"""
User schemas for authentication and profile management.

Passwords travel as ``SecretStr`` so they never show up in reprs or logs.
"""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    SecretStr,
)

from app.configs.settings import MAX_NAME_LENGTH, settings


def _strip_name(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            mssg = "Name is required"
            raise ValueError(mssg)
    return value


def _check_password(value: SecretStr) -> SecretStr:
    if len(value.get_secret_value()) < settings.PASSWORD_MIN_LENGTH:
        mssg = f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
        raise ValueError(mssg)
    return value


UserName = Annotated[str, BeforeValidator(_strip_name)]
Email = Annotated[EmailStr, AfterValidator(str.lower)]
Password = Annotated[SecretStr, AfterValidator(_check_password)]


class SignupRequest(BaseModel):
    """Signup payload."""

    name: UserName = Field(..., max_length=MAX_NAME_LENGTH, examples=["Jane Doe"])
    email: Email = Field(..., examples=["jane@example.com"])
    password: Password = Field(..., examples=["s3cret-pass"])


class LoginRequest(BaseModel):
    """Login payload."""

    email: Email = Field(..., examples=["jane@example.com"])
    password: SecretStr = Field(..., examples=["s3cret-pass"])


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    name: UserName | None = Field(default=None, max_length=MAX_NAME_LENGTH)
    email: Email | None = None
    password: Password | None = None


class UserPublic(BaseModel):
    """Identity returned alongside a token."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: str


class UserResponse(UserPublic):
    """Full user record without the password hash."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse


class UserListEnvelope(BaseModel):
    success: bool = True
    users: list[UserResponse]


class AuthResponse(BaseModel):
    """Signup and login response."""

    success: bool = True
    user: UserPublic
    token: str
