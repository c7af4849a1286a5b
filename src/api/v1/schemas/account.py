"""Pydantic schemas for Account API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for registering an account."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=256)
    username: str | None = Field(None, max_length=32)


class LoginRequest(BaseModel):
    """Schema for logging in. ``identifier`` is an email or a username."""

    identifier: str = Field(..., max_length=255)
    password: str = Field(..., max_length=256)


class UsernameUpdate(BaseModel):
    username: str = Field(..., max_length=32)


class PasswordUpdate(BaseModel):
    current_password: str = Field(..., max_length=256)
    new_password: str = Field(..., max_length=256)


class AvatarUpdate(BaseModel):
    avatar_url: str | None = Field(None, max_length=500)


class AccountResponse(BaseModel):
    """Schema for Account response. The password hash is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: str | None
    avatar_url: str | None
    created_at: datetime


class AccountDetailResponse(BaseModel):
    """Schema for single Account response."""

    data: AccountResponse
    meta: dict[str, Any] = Field(default_factory=dict)


class AccountGroupResponse(BaseModel):
    """A group on the account dashboard."""

    model_config = ConfigDict(from_attributes=True)

    group_id: UUID
    slug: str
    name: str
    membership_id: UUID
    is_admin: bool


class AccountGroupListResponse(BaseModel):
    data: list[AccountGroupResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
