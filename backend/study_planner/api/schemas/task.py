"""Schemas for daily tasks and auto-completion."""
from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class TaskResponse(BaseModel):
    id: int
    subject_id: Optional[int]
    subject_name: Optional[str]
    subject_color: Optional[str]
    task_date: date
    start_time: time
    end_time: time
    content: str
    status: Literal["pending", "completed", "failed"]
    alarm_enabled: bool
    alarm_time: Optional[time]
    created_at: datetime
    updated_at: datetime


class TaskCreateRequest(BaseModel):
    task_date: date
    start_time: time
    end_time: time
    content: str = Field(..., min_length=1)
    subject_id: Optional[int] = None
    alarm_enabled: bool = False
    alarm_time: Optional[time] = None


class TaskUpdateRequest(BaseModel):
    """Every field is optional; only fields present in the body are written."""

    subject_id: Optional[int] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    content: Optional[str] = None
    alarm_enabled: Optional[bool] = None
    alarm_time: Optional[time] = None


class CheckContentRequest(BaseModel):
    task_date: date
    content: str = Field(..., min_length=1)


class CheckContentResponse(BaseModel):
    matched: List[TaskResponse]
    request_id: str
