"""Schemas for countdowns."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CountdownResponse(BaseModel):
    id: int
    name: str
    target_time: datetime
    notify_enabled: bool
    remaining_days: int
    remaining_hours: int
    remaining_minutes: int
    is_expired: bool
    created_at: datetime


class CountdownCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    target_time: datetime
    notify_enabled: bool = True
