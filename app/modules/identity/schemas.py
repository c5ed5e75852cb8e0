"""Identity schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.enums import AccountStatusEnum, RoleEnum


class UserCreate(BaseModel):
    """User registration request. New accounts start as students."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    timezone: str = Field(default="UTC", max_length=64)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr
    password: str


class TokenRead(BaseModel):
    """Access JWT response."""

    access_token: str
    token_type: str = "bearer"


class UserRead(BaseModel):
    """User output schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    timezone: str
    account_status: AccountStatusEnum
    roles: list[RoleEnum] = Field(validation_alias="active_roles")
    created_at: datetime
    updated_at: datetime

    @field_validator("roles", mode="after")
    @classmethod
    def sort_roles(cls, value: list[RoleEnum]) -> list[RoleEnum]:
        return sorted(value)
