"""Helpers for working with user accounts."""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from study_planner.core.errors import Conflict, NotFound, ValidationError
from study_planner.core.security import hash_password
from study_planner.db.models.subject import Subject
from study_planner.db.models.user import User, UserRole
from study_planner.services.session_store import revoke_user_sessions

logger = logging.getLogger(__name__)

MAX_DISPLAY_NAME_LENGTH = 50

# Seeded for every new account; default subjects cannot be deleted.
DEFAULT_SUBJECTS = (
    ("政治", "#EF4444"),
    ("英语", "#10B981"),
    ("数学", "#3B82F6"),
    ("专业课", "#F59E0B"),
)


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(desc(User.created_at), desc(User.id)).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def find_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def create_user(
    db: Session,
    *,
    username: str,
    password: str,
    display_name: str,
    role: UserRole = UserRole.USER,
) -> User:
    """Create an account with a hashed password and the default subject set."""
    username = username.strip()
    if not username:
        raise ValidationError("Username must not be empty")
    display_name = normalize_display_name(display_name)
    if find_user_by_username(db, username):
        raise Conflict("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        display_name=display_name,
        role=role.value,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError as exc:
        # Lost a race with a concurrent create for the same username.
        db.rollback()
        raise Conflict("Username already exists") from exc

    for name, color in DEFAULT_SUBJECTS:
        db.add(Subject(user_id=user.id, name=name, color=color, is_default=True))
    db.commit()
    db.refresh(user)
    logger.info("User %s created (role=%s)", user.id, role.value)
    return user


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User %s deleted", user_id)


def reset_user_password(db: Session, user_id: int, new_password: str) -> None:
    """Set a new password and sign the user out everywhere."""
    user = get_user(db, user_id)
    user.password_hash = hash_password(new_password)
    db.add(user)
    db.commit()
    revoke_user_sessions(db, user_id)
    logger.info("Password reset for user %s", user_id)


def normalize_display_name(display_name: str) -> str:
    trimmed = display_name.strip()
    if not trimmed:
        raise ValidationError("Display name must not be empty")
    if len(trimmed) > MAX_DISPLAY_NAME_LENGTH:
        raise ValidationError(f"Display name must be {MAX_DISPLAY_NAME_LENGTH} characters or less")
    return trimmed


def ensure_bootstrap_admin(db: Session, username: str, password: str) -> User | None:
    """Create the configured admin account once; returns None when it already exists."""
    if find_user_by_username(db, username.strip()):
        return None
    user = create_user(
        db,
        username=username,
        password=password,
        display_name=username,
        role=UserRole.ADMIN,
    )
    logger.info("Bootstrap admin account created")
    return user
