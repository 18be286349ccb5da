"""Schemas for study statistics."""
from __future__ import annotations

import datetime as dt
from typing import List

from pydantic import BaseModel


class SubjectStudyTimePayload(BaseModel):
    subject_id: int
    subject_name: str
    subject_color: str
    total_minutes: int


class DailyCompletionPayload(BaseModel):
    date: dt.date
    total_tasks: int
    completed_tasks: int
    completion_rate: float


class StatisticsResponse(BaseModel):
    start_date: dt.date
    end_date: dt.date
    total_study_minutes: int
    total_tasks: int
    completed_tasks: int
    completion_rate: float
    subject_distribution: List[SubjectStudyTimePayload]
    daily_trend: List[DailyCompletionPayload]
