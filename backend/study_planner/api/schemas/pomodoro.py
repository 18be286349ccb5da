"""Schemas for focus sessions."""
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class PomodoroResponse(BaseModel):
    id: int
    subject_id: Optional[int]
    subject_name: Optional[str]
    task_id: Optional[int]
    start_time: datetime
    end_time: Optional[datetime]
    duration_minutes: int
    status: Literal["running", "completed", "cancelled"]


class PomodoroStartRequest(BaseModel):
    subject_id: Optional[int] = None
    task_id: Optional[int] = None


class PomodoroFinishRequest(BaseModel):
    duration_minutes: int = Field(..., ge=0)
