"""Study statistics over a date range."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import List

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from study_planner.core.errors import ValidationError
from study_planner.db.models.pomodoro_session import PomodoroSession, PomodoroStatus
from study_planner.db.models.subject import Subject
from study_planner.db.models.task import Task, TaskStatus


@dataclass
class SubjectStudyTime:
    subject_id: int
    subject_name: str
    subject_color: str
    total_minutes: int


@dataclass
class DailyCompletion:
    date: date
    total_tasks: int
    completed_tasks: int
    completion_rate: float


@dataclass
class Statistics:
    total_study_minutes: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    completion_rate: float = 0.0
    subject_distribution: List[SubjectStudyTime] = field(default_factory=list)
    daily_trend: List[DailyCompletion] = field(default_factory=list)


def _rate(completed: int, total: int) -> float:
    return (completed / total) * 100.0 if total else 0.0


def get_stats(db: Session, user_id: int, start_date: date, end_date: date) -> Statistics:
    """Aggregate completed focus minutes and task completion between two dates, inclusive."""
    if start_date > end_date:
        raise ValidationError("start_date must not be after end_date")

    range_start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    range_end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
    completed_focus = (
        PomodoroSession.user_id == user_id,
        PomodoroSession.status == PomodoroStatus.COMPLETED.value,
        PomodoroSession.start_time >= range_start,
        PomodoroSession.start_time < range_end,
    )

    total_minutes = (
        db.query(func.coalesce(func.sum(PomodoroSession.duration_minutes), 0))
        .filter(*completed_focus)
        .scalar()
    )

    completed_flag = case((Task.status == TaskStatus.COMPLETED.value, 1), else_=0)
    total_tasks, completed_tasks = (
        db.query(func.count(Task.id), func.coalesce(func.sum(completed_flag), 0))
        .filter(Task.user_id == user_id, Task.task_date >= start_date, Task.task_date <= end_date)
        .one()
    )

    subject_minutes = func.sum(PomodoroSession.duration_minutes)
    subject_rows = (
        db.query(Subject.id, Subject.name, Subject.color, subject_minutes)
        .join(PomodoroSession, PomodoroSession.subject_id == Subject.id)
        .filter(Subject.user_id == user_id, *completed_focus)
        .group_by(Subject.id, Subject.name, Subject.color)
        .having(subject_minutes > 0)
        .order_by(subject_minutes.desc(), Subject.id)
        .all()
    )

    daily_rows = (
        db.query(Task.task_date, func.count(Task.id), func.coalesce(func.sum(completed_flag), 0))
        .filter(Task.user_id == user_id, Task.task_date >= start_date, Task.task_date <= end_date)
        .group_by(Task.task_date)
        .order_by(Task.task_date)
        .all()
    )

    return Statistics(
        total_study_minutes=int(total_minutes or 0),
        total_tasks=int(total_tasks or 0),
        completed_tasks=int(completed_tasks or 0),
        completion_rate=_rate(int(completed_tasks or 0), int(total_tasks or 0)),
        subject_distribution=[
            SubjectStudyTime(
                subject_id=subject_id,
                subject_name=name,
                subject_color=color,
                total_minutes=int(minutes),
            )
            for subject_id, name, color, minutes in subject_rows
        ],
        daily_trend=[
            DailyCompletion(
                date=day,
                total_tasks=int(total),
                completed_tasks=int(done),
                completion_rate=_rate(int(done), int(total)),
            )
            for day, total, done in daily_rows
        ],
    )
