"""Schemas for login, account and user administration."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: int
    username: str
    display_name: str
    role: Literal["user", "admin"]
    role_label: str
    created_at: datetime


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    user: UserResponse
    session_token: str


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str


class DisplayNameUpdateRequest(BaseModel):
    display_name: str


class UserCreateRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str
    display_name: str
    role: Literal["user", "admin"] = "user"


class PasswordResetRequest(BaseModel):
    new_password: str


class StatusResponse(BaseModel):
    ok: bool = True
    request_id: str
