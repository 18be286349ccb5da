"""Schemas for subjects."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SubjectResponse(BaseModel):
    id: int
    name: str
    color: str
    is_default: bool
    created_at: datetime


class SubjectCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
