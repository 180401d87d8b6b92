"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from app.core.permissions import UserRole
from app.schemas.booking import CamelModel


class UserRegister(CamelModel):
    """Schema for profile registration."""

    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.CUSTOMER
    bio: str = Field(default="", max_length=2000)
    location: str | None = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class UserUpdate(CamelModel):
    """Schema for updating user profile."""

    name: str | None = Field(None, min_length=1, max_length=200)
    bio: str | None = Field(None, max_length=2000)
    location: str | None = Field(None, max_length=255)


class UserResponse(CamelModel):
    uid: str
    name: str
    role: str
    email: str | None = None
    phone: str | None = None
    bio: str = ""
    location: str | None = None
    created_at: datetime
    updated_at: datetime


class UserEnvelope(CamelModel):
    ok: bool = True
    user: UserResponse


class UserDetailResponse(CamelModel):
    user: UserResponse


class DeviceTokenRegister(CamelModel):
    token: str = Field(..., min_length=1, max_length=512)
