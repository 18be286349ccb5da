"""Study preferences with fallback defaults."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from study_planner.core.errors import ValidationError
from study_planner.db.models.study_preference import StudyPhase, StudyPreference

logger = logging.getLogger(__name__)

DEFAULT_DAILY_HOURS = 8
DEFAULT_START_TIME = time(7, 0)
DEFAULT_END_TIME = time(22, 0)
DEFAULT_LUNCH_START = time(12, 0)
DEFAULT_LUNCH_END = time(14, 0)


@dataclass
class PreferenceView:
    """Stored preferences, or the defaults when the user has none yet."""

    id: Optional[int] = None
    daily_hours: int = DEFAULT_DAILY_HOURS
    start_time: time = DEFAULT_START_TIME
    end_time: time = DEFAULT_END_TIME
    lunch_break_start: time = DEFAULT_LUNCH_START
    lunch_break_end: time = DEFAULT_LUNCH_END
    study_phase: StudyPhase = StudyPhase.FOUNDATION
    focus_subjects: List[str] = field(default_factory=list)
    weak_subjects: List[str] = field(default_factory=list)
    exam_date: Optional[date] = None
    notes: Optional[str] = None

    @property
    def is_saved(self) -> bool:
        return self.id is not None

    def days_until_exam(self, today: date) -> Optional[int]:
        if self.exam_date is None:
            return None
        return (self.exam_date - today).days

    @classmethod
    def from_row(cls, row: StudyPreference) -> "PreferenceView":
        return cls(
            id=row.id,
            daily_hours=row.daily_hours,
            start_time=row.start_time,
            end_time=row.end_time,
            lunch_break_start=row.lunch_break_start,
            lunch_break_end=row.lunch_break_end,
            study_phase=row.phase,
            focus_subjects=list(row.focus_subjects or []),
            weak_subjects=list(row.weak_subjects or []),
            exam_date=row.exam_date,
            notes=row.notes,
        )


def find_preference(db: Session, user_id: int) -> Optional[StudyPreference]:
    return db.query(StudyPreference).filter(StudyPreference.user_id == user_id).first()


def get_preference(db: Session, user_id: int) -> PreferenceView:
    row = find_preference(db, user_id)
    return PreferenceView.from_row(row) if row else PreferenceView()


def parse_clock(value: str, field_name: str) -> time:
    """Parse an HH:MM string."""
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be in HH:MM format") from exc


def parse_exam_date(value: Optional[str]) -> Optional[date]:
    if value is None or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError("exam_date must be in YYYY-MM-DD format") from exc


def parse_phase(value: str) -> StudyPhase:
    try:
        return StudyPhase(value)
    except ValueError as exc:
        allowed = ", ".join(phase.value for phase in StudyPhase)
        raise ValidationError(f"study_phase must be one of: {allowed}") from exc


def save_preference(
    db: Session,
    user_id: int,
    *,
    daily_hours: int,
    start_time: str,
    end_time: str,
    lunch_break_start: str,
    lunch_break_end: str,
    study_phase: str,
    focus_subjects: Sequence[str] = (),
    weak_subjects: Sequence[str] = (),
    exam_date: Optional[str] = None,
    notes: Optional[str] = None,
) -> PreferenceView:
    """Create or replace the user's preferences."""
    if not 1 <= daily_hours <= 24:
        raise ValidationError("daily_hours must be between 1 and 24")
    parsed_start = parse_clock(start_time, "start_time")
    parsed_end = parse_clock(end_time, "end_time")
    parsed_lunch_start = parse_clock(lunch_break_start, "lunch_break_start")
    parsed_lunch_end = parse_clock(lunch_break_end, "lunch_break_end")
    if parsed_start >= parsed_end:
        raise ValidationError("start_time must be earlier than end_time")
    if parsed_lunch_start >= parsed_lunch_end:
        raise ValidationError("lunch_break_start must be earlier than lunch_break_end")
    phase = parse_phase(study_phase)
    parsed_exam_date = parse_exam_date(exam_date)

    row = find_preference(db, user_id)
    if row is None:
        row = StudyPreference(user_id=user_id)
    row.daily_hours = daily_hours
    row.start_time = parsed_start
    row.end_time = parsed_end
    row.lunch_break_start = parsed_lunch_start
    row.lunch_break_end = parsed_lunch_end
    row.study_phase = phase.value
    row.focus_subjects = [name.strip() for name in focus_subjects if name.strip()]
    row.weak_subjects = [name.strip() for name in weak_subjects if name.strip()]
    row.exam_date = parsed_exam_date
    row.notes = notes.strip() if notes and notes.strip() else None
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Study preferences saved for user %s (phase=%s)", user_id, phase.value)
    return PreferenceView.from_row(row)
