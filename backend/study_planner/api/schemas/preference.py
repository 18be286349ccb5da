"""Schemas for study preferences."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class PreferenceResponse(BaseModel):
    id: Optional[int]
    daily_hours: int
    start_time: str
    end_time: str
    lunch_break_start: str
    lunch_break_end: str
    study_phase: str
    study_phase_label: str
    focus_subjects: List[str]
    weak_subjects: List[str]
    exam_date: Optional[str]
    days_until_exam: Optional[int]
    notes: Optional[str]


class PreferenceSaveRequest(BaseModel):
    daily_hours: int = 8
    start_time: str = "07:00"
    end_time: str = "22:00"
    lunch_break_start: str = "12:00"
    lunch_break_end: str = "14:00"
    study_phase: str = "foundation"
    focus_subjects: List[str] = Field(default_factory=list)
    weak_subjects: List[str] = Field(default_factory=list)
    exam_date: Optional[str] = None
    notes: Optional[str] = None
