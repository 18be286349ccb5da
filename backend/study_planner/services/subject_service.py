"""Subject records owned by a user."""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from study_planner.core.errors import NotFound, ValidationError
from study_planner.db.models.subject import Subject

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT_COLOR = "#3B82F6"


def list_subjects(db: Session, user_id: int) -> List[Subject]:
    """Default subjects first, then alphabetical."""
    return (
        db.query(Subject)
        .filter(Subject.user_id == user_id)
        .order_by(desc(Subject.is_default), asc(Subject.name), asc(Subject.id))
        .all()
    )


def create_subject(db: Session, user_id: int, name: str, color: str | None = None) -> Subject:
    name = name.strip()
    if not name:
        raise ValidationError("Subject name must not be empty")
    subject = Subject(
        user_id=user_id,
        name=name,
        color=color or DEFAULT_SUBJECT_COLOR,
        is_default=False,
    )
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


def delete_subject(db: Session, user_id: int, subject_id: int) -> None:
    """Delete a custom subject; default subjects are protected."""
    deleted = (
        db.query(Subject)
        .filter(Subject.id == subject_id, Subject.user_id == user_id, Subject.is_default.is_(False))
        .delete(synchronize_session=False)
    )
    db.commit()
    if not deleted:
        raise NotFound("Subject not found or cannot be deleted")
    logger.info("Subject %s deleted for user %s", subject_id, user_id)
