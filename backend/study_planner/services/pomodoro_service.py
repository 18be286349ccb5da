"""Focus (pomodoro) session tracking."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from study_planner.core.clock import utcnow
from study_planner.core.errors import NotFound, ValidationError
from study_planner.db.models.pomodoro_session import PomodoroSession, PomodoroStatus
from study_planner.db.models.subject import Subject
from study_planner.db.models.task import Task

DEFAULT_HISTORY_LIMIT = 50


@dataclass
class PomodoroRecord:
    session: PomodoroSession
    subject_name: Optional[str]


def start_pomodoro(
    db: Session,
    user_id: int,
    *,
    subject_id: Optional[int] = None,
    task_id: Optional[int] = None,
) -> PomodoroRecord:
    if subject_id is not None:
        owned = db.query(Subject.id).filter(Subject.id == subject_id, Subject.user_id == user_id).first()
        if owned is None:
            raise NotFound("Subject not found")
    if task_id is not None:
        owned = db.query(Task.id).filter(Task.id == task_id, Task.user_id == user_id).first()
        if owned is None:
            raise NotFound("Task not found")

    session_row = PomodoroSession(
        user_id=user_id,
        subject_id=subject_id,
        task_id=task_id,
        start_time=utcnow(),
        duration_minutes=0,
        status=PomodoroStatus.RUNNING.value,
    )
    db.add(session_row)
    db.commit()
    return _record(db, user_id, session_row.id)


def complete_pomodoro(db: Session, user_id: int, pomodoro_id: int, duration_minutes: int) -> PomodoroRecord:
    return _finish(db, user_id, pomodoro_id, duration_minutes, PomodoroStatus.COMPLETED)


def cancel_pomodoro(db: Session, user_id: int, pomodoro_id: int, duration_minutes: int) -> PomodoroRecord:
    return _finish(db, user_id, pomodoro_id, duration_minutes, PomodoroStatus.CANCELLED)


def pomodoro_history(db: Session, user_id: int, limit: int = DEFAULT_HISTORY_LIMIT) -> List[PomodoroRecord]:
    rows = (
        db.query(PomodoroSession, Subject.name)
        .outerjoin(Subject, Subject.id == PomodoroSession.subject_id)
        .filter(PomodoroSession.user_id == user_id)
        .order_by(desc(PomodoroSession.start_time), desc(PomodoroSession.id))
        .limit(limit)
        .all()
    )
    return [PomodoroRecord(session=row, subject_name=name) for row, name in rows]


def _finish(
    db: Session,
    user_id: int,
    pomodoro_id: int,
    duration_minutes: int,
    status: PomodoroStatus,
) -> PomodoroRecord:
    if duration_minutes < 0:
        raise ValidationError("duration_minutes must not be negative")
    session_row = (
        db.query(PomodoroSession)
        .filter(PomodoroSession.id == pomodoro_id, PomodoroSession.user_id == user_id)
        .first()
    )
    if session_row is None:
        raise NotFound("Pomodoro session not found")
    session_row.status = status.value
    session_row.end_time = utcnow()
    session_row.duration_minutes = duration_minutes
    db.add(session_row)
    db.commit()
    return _record(db, user_id, pomodoro_id)


def _record(db: Session, user_id: int, pomodoro_id: int) -> PomodoroRecord:
    row = (
        db.query(PomodoroSession, Subject.name)
        .outerjoin(Subject, Subject.id == PomodoroSession.subject_id)
        .filter(PomodoroSession.id == pomodoro_id, PomodoroSession.user_id == user_id)
        .first()
    )
    if row is None:
        raise NotFound("Pomodoro session not found")
    session_row, subject_name = row
    return PomodoroRecord(session=session_row, subject_name=subject_name)
