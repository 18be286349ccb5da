"""Task records and free-text auto-completion."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import asc
from sqlalchemy.orm import Session

from study_planner.core.errors import NotFound, ValidationError
from study_planner.db.models.subject import Subject
from study_planner.db.models.task import Task, TaskStatus
from study_planner.services.similarity import is_match, match_threshold

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"subject_id", "start_time", "end_time", "content", "alarm_enabled", "alarm_time"})
REQUIRED_FIELDS = frozenset({"start_time", "end_time", "content", "alarm_enabled"})


@dataclass
class TaskRecord:
    task: Task
    subject: Optional[Subject]


def list_tasks_by_date(db: Session, user_id: int, task_date: date) -> List[TaskRecord]:
    """Return the owner's tasks for task_date ordered by start time."""
    rows = (
        db.query(Task, Subject)
        .outerjoin(Subject, Subject.id == Task.subject_id)
        .filter(Task.user_id == user_id, Task.task_date == task_date)
        .order_by(asc(Task.start_time), asc(Task.id))
        .all()
    )
    return [TaskRecord(task=task, subject=subject) for task, subject in rows]


def get_task(db: Session, user_id: int, task_id: int) -> TaskRecord:
    row = (
        db.query(Task, Subject)
        .outerjoin(Subject, Subject.id == Task.subject_id)
        .filter(Task.id == task_id, Task.user_id == user_id)
        .first()
    )
    if row is None:
        raise NotFound("Task not found")
    task, subject = row
    return TaskRecord(task=task, subject=subject)


def create_task(
    db: Session,
    user_id: int,
    *,
    task_date: date,
    start_time: time,
    end_time: time,
    content: str,
    subject_id: Optional[int] = None,
    alarm_enabled: bool = False,
    alarm_time: Optional[time] = None,
) -> TaskRecord:
    content = content.strip()
    if not content:
        raise ValidationError("Task content must not be empty")
    _ensure_time_order(start_time, end_time)
    if subject_id is not None:
        _ensure_subject_owned(db, user_id, subject_id)

    task = Task(
        user_id=user_id,
        subject_id=subject_id,
        task_date=task_date,
        start_time=start_time,
        end_time=end_time,
        content=content,
        status=TaskStatus.PENDING.value,
        alarm_enabled=alarm_enabled,
        alarm_time=alarm_time,
    )
    db.add(task)
    db.commit()
    return get_task(db, user_id, task.id)


def update_task(db: Session, user_id: int, task_id: int, changes: Mapping[str, Any]) -> TaskRecord:
    """Apply a sparse update; only the supplied fields are written."""
    task = _owned_task(db, user_id, task_id)
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unsupported task fields: {', '.join(sorted(unknown))}")
    if not changes:
        return get_task(db, user_id, task_id)

    updates: Dict[str, Any] = dict(changes)
    cleared = sorted(field for field in REQUIRED_FIELDS if field in updates and updates[field] is None)
    if cleared:
        raise ValidationError(f"Fields cannot be null: {', '.join(cleared)}")
    if "content" in updates:
        content = (updates["content"] or "").strip()
        if not content:
            raise ValidationError("Task content must not be empty")
        updates["content"] = content
    if updates.get("subject_id") is not None:
        _ensure_subject_owned(db, user_id, updates["subject_id"])
    _ensure_time_order(updates.get("start_time", task.start_time), updates.get("end_time", task.end_time))

    for field, value in updates.items():
        setattr(task, field, value)
    db.add(task)
    db.commit()
    return get_task(db, user_id, task_id)


def delete_task(db: Session, user_id: int, task_id: int) -> None:
    deleted = (
        db.query(Task)
        .filter(Task.id == task_id, Task.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if not deleted:
        raise NotFound("Task not found")


def toggle_task_status(db: Session, user_id: int, task_id: int) -> TaskRecord:
    task = _owned_task(db, user_id, task_id)
    task.status = task.task_status.next().value
    db.add(task)
    db.commit()
    return get_task(db, user_id, task_id)


def check_content(
    db: Session,
    user_id: int,
    task_date: date,
    text: str,
    *,
    threshold: float | None = None,
) -> List[TaskRecord]:
    """Mark every pending task on task_date that text matches as completed.

    Tasks are evaluated in start-time order and each match is committed on its
    own. If a write fails, completions committed before it stay committed and
    the error propagates; there is no rollback of earlier matches.
    """
    limit = match_threshold() if threshold is None else threshold
    matched: List[TaskRecord] = []

    for record in list_tasks_by_date(db, user_id, task_date):
        task = record.task
        if task.task_status is not TaskStatus.PENDING:
            continue
        if not is_match(text, task.content, limit):
            continue

        task.status = TaskStatus.COMPLETED.value
        db.add(task)
        try:
            db.commit()
        except Exception:
            db.rollback()
            logger.warning(
                "Auto-completion write failed for task %s after %d committed match(es)",
                task.id,
                len(matched),
            )
            raise
        logger.debug("Task %s auto-completed", task.id)
        matched.append(record)

    return matched


def _owned_task(db: Session, user_id: int, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()
    if task is None:
        raise NotFound("Task not found")
    return task


def _ensure_subject_owned(db: Session, user_id: int, subject_id: int) -> None:
    exists = db.query(Subject.id).filter(Subject.id == subject_id, Subject.user_id == user_id).first()
    if exists is None:
        raise NotFound("Subject not found")


def _ensure_time_order(start_time: time, end_time: time) -> None:
    if start_time >= end_time:
        raise ValidationError("start_time must be earlier than end_time")
