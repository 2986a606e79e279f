from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class OwnerSummary(BaseModel):
    """Public projection of a user embedded in other views."""

    id: str
    username: str
    fullname: Optional[str] = None
    avatar: str

    model_config = {"from_attributes": True}


class UserProfileResponse(BaseModel):
    id: str
    username: str
    email: str
    fullname: str
    avatar: str
    cover_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ChannelProfileResponse(BaseModel):
    id: str
    username: str
    email: str
    fullname: str
    avatar: str
    cover_image: Optional[str] = None
    created_at: datetime
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class AccountUpdateRequest(BaseModel):
    fullname: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)


class LoginRequest(BaseModel):
    username: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)


class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = Field(default=None)


class ChangePasswordRequest(BaseModel):
    old_password: Optional[str] = Field(default=None)
    new_password: Optional[str] = Field(default=None)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    user: UserProfileResponse
